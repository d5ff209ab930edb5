"""Map field descriptors to TypeScript types describing their JSON shape."""

from dataclasses import dataclass

from protoc_gen_types.descriptors.loader import to_json_name
from protoc_gen_types.descriptors.models import (
    EnumDescriptor,
    FieldDescriptor,
    FieldKind,
    FieldLabel,
    MessageDescriptor,
    ScalarType,
    WellKnownType,
)
from protoc_gen_types.descriptors.well_known import NULL_VALUE_TYPE_NAME, is_wrapper
from protoc_gen_types.exporters.typescript.identifiers import string_literal
from protoc_gen_types.exporters.typescript.printer import RUNTIME_MODULE, GeneratedFile

FLOAT_JSON_TYPE = 'number | "NaN" | "Infinity" | "-Infinity"'
LONG_JSON_TYPE = "string | number"

SCALAR_JSON_TYPES = {
    ScalarType.DOUBLE: FLOAT_JSON_TYPE,
    ScalarType.FLOAT: FLOAT_JSON_TYPE,
    ScalarType.INT64: LONG_JSON_TYPE,
    ScalarType.UINT64: LONG_JSON_TYPE,
    ScalarType.SINT64: LONG_JSON_TYPE,
    ScalarType.FIXED64: LONG_JSON_TYPE,
    ScalarType.SFIXED64: LONG_JSON_TYPE,
    ScalarType.INT32: "number",
    ScalarType.UINT32: "number",
    ScalarType.SINT32: "number",
    ScalarType.FIXED32: "number",
    ScalarType.SFIXED32: "number",
    ScalarType.BOOL: "boolean",
    ScalarType.STRING: "string",
    # base64 encoded
    ScalarType.BYTES: "string",
}


@dataclass(frozen=True)
class FieldShape:
    """The TypeScript type of a field and whether its member is optional."""

    typing: str
    optional: bool


def scalar_json_type(scalar: ScalarType) -> str:
    return SCALAR_JSON_TYPES[scalar]


def enum_json_type(enum: EnumDescriptor) -> str:
    """The union of an enum's value names as string literals, in declaration order."""
    if enum.type_name == NULL_VALUE_TYPE_NAME:
        return "null"
    if not enum.values:
        return "never"
    return " | ".join(string_literal(value.name) for value in enum.values)


def well_known_json_type(well_known: WellKnownType, f: GeneratedFile) -> str:
    """The inline JSON shape of a well-known message."""
    match well_known:
        case WellKnownType.ANY:
            return '{ "@type"?: string }'
        case WellKnownType.TIMESTAMP | WellKnownType.DURATION | WellKnownType.FIELD_MASK:
            return "string"
        case WellKnownType.STRUCT:
            return f.import_type("JsonObject", RUNTIME_MODULE)
        case WellKnownType.VALUE:
            return f.import_type("JsonValue", RUNTIME_MODULE)
        case WellKnownType.LIST_VALUE:
            return f"{f.import_type('JsonValue', RUNTIME_MODULE)}[]"
        case WellKnownType.EMPTY:
            return "Record<string, never>"


def message_json_type(message: MessageDescriptor, f: GeneratedFile) -> str:
    """
    The type of a message-typed value.

    Well-known messages expand inline and wrappers collapse to the type of
    their single field. Any other message is referenced by its shape name.
    """
    if message.well_known is not None:
        return well_known_json_type(message.well_known, f)
    if is_wrapper(message):
        return value_json_type(message.fields[0], f)
    return f.shape_ref(message)


def value_json_type(field: FieldDescriptor, f: GeneratedFile) -> str:
    """The type of one value of a field: the field itself, a list element, or a map value."""
    match field.value_kind:
        case FieldKind.SCALAR if field.scalar is not None:
            return scalar_json_type(field.scalar)
        case FieldKind.ENUM if field.enum is not None:
            return enum_json_type(field.enum)
        case FieldKind.MESSAGE if field.message is not None:
            return message_json_type(field.message, f)
    raise ValueError(f"Field {field.parent.type_name}.{field.name} has no resolved value type")


def _array_of(typing: str) -> str:
    return f"({typing})[]" if " | " in typing else f"{typing}[]"


def is_optional(field: FieldDescriptor) -> bool:
    """
    Whether a field's member is optional in the JSON shape.

    Lists and maps never are. Fields with an explicit ``optional`` label and
    members of a oneof always are. Singular message fields are, unless the
    message is a wrapper that collapses to a scalar.
    """
    if field.kind in (FieldKind.LIST, FieldKind.MAP):
        return False
    if field.has_explicit_presence or field.real_oneof is not None:
        return True
    if field.kind == FieldKind.MESSAGE and field.message is not None:
        return not is_wrapper(field.message)
    return False


def field_shape(field: FieldDescriptor, f: GeneratedFile) -> FieldShape:
    """
    Derive the TypeScript type and optionality of a field.

    Args:
        field: The field descriptor
        f: The file being generated, used to reference and import shapes

    Returns:
        FieldShape: The type expression and the optional flag
    """
    value_type = value_json_type(field, f)
    if field.kind == FieldKind.LIST:
        typing = _array_of(value_type)
    elif field.kind == FieldKind.MAP:
        typing = f"{{ [key: string]: {value_type} }}"
    else:
        typing = value_type
    return FieldShape(typing=typing, optional=is_optional(field))


def field_declaration(field: FieldDescriptor) -> str:
    """Render a field roughly as declared in the .proto file, e.g. ``optional int64 id = 1``."""

    def type_name(kind: FieldKind | None) -> str:
        if kind == FieldKind.ENUM and field.enum is not None:
            return field.enum.type_name
        if kind == FieldKind.MESSAGE and field.message is not None:
            return field.message.type_name
        return field.scalar.value if field.scalar is not None else ""

    if field.kind == FieldKind.MAP and field.map_key is not None:
        declaration = f"map<{field.map_key.value}, {type_name(field.element_kind)}> {field.name} = {field.number}"
    else:
        label = ""
        if field.kind == FieldKind.LIST:
            label = "repeated "
        elif field.has_explicit_presence:
            label = "optional "
        elif field.label == FieldLabel.REQUIRED:
            label = "required "
        declaration = f"{label}{type_name(field.value_kind)} {field.name} = {field.number}"

    field_options = []
    if field.json_name != to_json_name(field.name):
        field_options.append(f"json_name = {string_literal(field.json_name)}")
    if field.deprecated:
        field_options.append("deprecated = true")
    if field_options:
        declaration += f" [{', '.join(field_options)}]"
    return declaration
