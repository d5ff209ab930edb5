"""Line-oriented output unit with type-only import tracking."""

import posixpath
from collections.abc import Sequence

from protoc_gen_types.descriptors.models import EnumDescriptor, MessageDescriptor, SchemaFile
from protoc_gen_types.exporters.typescript.identifiers import declaration_names
from protoc_gen_types.options import FrameworkOptions, ImportExtension

RUNTIME_MODULE = "@bufbuild/protobuf"

IMPORT_EXTENSIONS = {
    ImportExtension.NONE: "",
    ImportExtension.JS: ".js",
    ImportExtension.TS: ".ts",
}


class GeneratedFile:
    """
    One generated TypeScript file.

    Declarations of the file's own types get their symbol names up front, so a
    type can be referenced before it is printed. Types from other files are
    imported with ``import type``. An imported symbol that clashes with a local
    name gets an alias such as ``Foo$1``.
    """

    def __init__(self, name: str, schema_file: SchemaFile, framework: FrameworkOptions) -> None:
        self.name = name
        self.schema_file = schema_file
        self.framework = framework
        self.preamble = ""
        self._lines: list[str] = []
        self._imports: dict[str, dict[str, str]] = {}
        self._symbols: dict[str, dict[MessageDescriptor | EnumDescriptor, str]] = {
            schema_file.name: declaration_names(schema_file)
        }
        self._taken: set[str] = set(self._symbols[schema_file.name].values())

    def print(self, *parts: str) -> None:
        """Append one line made of the given parts."""
        self._lines.append("".join(parts))

    def blank(self) -> None:
        """Append an empty line."""
        self._lines.append("")

    def jsdoc(self, lines: Sequence[str], indent: str = "") -> None:
        """Append a JSDoc block. ``*/`` inside the text is escaped."""
        self._lines.append(f"{indent}/**")
        for line in lines:
            line = line.rstrip().replace("*/", "*\\/")
            self._lines.append(f"{indent} * {line}" if line else f"{indent} *")
        self._lines.append(f"{indent} */")

    def local_name(self, desc: MessageDescriptor | EnumDescriptor) -> str:
        """The symbol name of a type declared in this file."""
        return self._symbols[self.schema_file.name][desc]

    def import_type(self, symbol: str, module: str) -> str:
        """
        Register a type-only import.

        Args:
            symbol: The exported name in the source module
            module: The module specifier

        Returns:
            str: The name to use in this file (the symbol, or its alias)
        """
        module_imports = self._imports.setdefault(module, {})
        if symbol in module_imports:
            return module_imports[symbol]

        alias = symbol
        counter = 1
        while alias in self._taken:
            alias = f"{symbol}${counter}"
            counter += 1
        self._taken.add(alias)
        module_imports[symbol] = alias
        return alias

    def shape_ref(self, desc: MessageDescriptor | EnumDescriptor) -> str:
        """Reference the declared shape of a message or enum, importing it when it lives in another file."""
        if desc.file is self.schema_file:
            return self.local_name(desc)
        if desc.file.name not in self._symbols:
            self._symbols[desc.file.name] = declaration_names(desc.file)
        return self.import_type(self._symbols[desc.file.name][desc], self.import_path(desc.file))

    def import_path(self, target: SchemaFile) -> str:
        """The relative module specifier of another file's generated output."""
        target_path = f"{target.base_name}_pb{IMPORT_EXTENSIONS[self.framework.import_extension]}"
        relative = posixpath.relpath(target_path, posixpath.dirname(self.schema_file.name) or ".")
        return relative if relative.startswith("../") else f"./{relative}"

    def _import_lines(self) -> list[str]:
        modules = sorted(self._imports, key=lambda module: module != RUNTIME_MODULE)
        lines = []
        for module in modules:
            names = [
                symbol if symbol == alias else f"{symbol} as {alias}" for symbol, alias in self._imports[module].items()
            ]
            lines.append(f'import type {{ {", ".join(names)} }} from "{module}";')
        return lines

    def is_empty(self) -> bool:
        return not any(line.strip() for line in self._lines)

    def content(self) -> str:
        """Render preamble, imports and body."""
        sections = []
        if self.preamble:
            sections.append(self.preamble.rstrip("\n"))
        import_lines = self._import_lines()
        if import_lines:
            sections.append("\n".join(import_lines))

        body = list(self._lines)
        while body and not body[-1].strip():
            body.pop()
        if body:
            sections.append("\n".join(body))
        return "\n\n".join(sections) + "\n"
