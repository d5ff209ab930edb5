"""Identifier and property key rendering for TypeScript output."""

import json
import re

from caseconverter import macrocase

from protoc_gen_types.descriptors.models import EnumDescriptor, MessageDescriptor, SchemaFile

STARTS_WITH_DIGIT = re.compile(r"^[0-9]")
CONTAINS_SPECIAL_CHAR = re.compile(r"[^a-zA-Z0-9_$]")
IDENTIFIER = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")

# Words that cannot name a generated type, or would shadow a global the output relies on.
RESERVED_NAMES = {
    # ECMAScript keywords and literals
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "import",
    "in",
    "instanceof",
    "new",
    "null",
    "return",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    "yield",
    # strict mode and TypeScript
    "await",
    "implements",
    "interface",
    "let",
    "package",
    "private",
    "protected",
    "public",
    "static",
    "any",
    "boolean",
    "declare",
    "never",
    "number",
    "object",
    "string",
    "symbol",
    "type",
    "undefined",
    "unknown",
    "bigint",
    # globals
    "globalThis",
    "Array",
    "Boolean",
    "Date",
    "Error",
    "Function",
    "JSON",
    "Map",
    "Math",
    "Number",
    "Object",
    "Partial",
    "Promise",
    "Record",
    "Set",
    "String",
    "Symbol",
    "Uint8Array",
    # runtime types imported by generated files
    "JsonObject",
    "JsonValue",
}


def needs_quoting(key: str) -> bool:
    """Check whether a property key must be written as a string literal.

    A key is quoted when it is empty, starts with a decimal digit, or contains
    anything besides letters, digits, ``_`` and ``$``.
    """
    return key == "" or bool(STARTS_WITH_DIGIT.match(key)) or bool(CONTAINS_SPECIAL_CHAR.search(key))


def string_literal(value: str) -> str:
    """Render a double-quoted string literal."""
    return json.dumps(value)


def property_key(key: str) -> str:
    """Render a key for the left side of a type member, quoting it when needed."""
    return string_literal(key) if needs_quoting(key) else key


def safe_identifier(name: str) -> str:
    """Escape a generated symbol name that clashes with a reserved word or global."""
    return f"{name}$" if name in RESERVED_NAMES else name


def _nested_name(desc: MessageDescriptor | EnumDescriptor) -> str:
    names = [desc.name, *(parent.name for parent in desc.parents())]
    return "_".join(reversed(names))


def declaration_names(schema_file: SchemaFile) -> dict[MessageDescriptor | EnumDescriptor, str]:
    """
    Assign a unique symbol name to every type declared in a file.

    Nested names are joined with ``_`` (``Outer.Inner`` becomes ``Outer_Inner``).
    Names are allocated in declaration order, so the result is deterministic.

    Args:
        schema_file: The file whose declarations are named

    Returns:
        dict: Mapping of each declared message and enum to its symbol name
    """
    names: dict[MessageDescriptor | EnumDescriptor, str] = {}
    taken: set[str] = set()
    for desc in schema_file.declared_types():
        name = safe_identifier(_nested_name(desc))
        while name in taken:
            name = f"{name}$"
        taken.add(name)
        names[desc] = name
    return names


def enum_value_names(enum: EnumDescriptor) -> list[str]:
    """
    Member names for the values of an enum, in declaration order.

    When every value starts with the enum name in SCREAMING_SNAKE_CASE followed
    by ``_`` (``PhoneType`` → ``PHONE_TYPE_``), the prefix is dropped, provided
    each remainder is an identifier that does not start with a digit.
    """
    prefix = f"{macrocase(enum.name)}_"
    remainders = [value.name[len(prefix) :] for value in enum.values if value.name.startswith(prefix)]
    if len(remainders) == len(enum.values) and all(
        remainder and IDENTIFIER.match(remainder) for remainder in remainders
    ):
        return remainders
    return [value.name for value in enum.values]
