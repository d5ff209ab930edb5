from collections.abc import Sequence

from jinja2 import Environment, PackageLoader, select_autoescape

from protoc_gen_types import __version__, log
from protoc_gen_types.descriptors.models import (
    EnumDescriptor,
    EnumValue,
    FieldDescriptor,
    MessageDescriptor,
    SchemaFile,
    WellKnownType,
)
from protoc_gen_types.descriptors.well_known import is_wrapper
from protoc_gen_types.exporters.typescript.fields import (
    field_declaration,
    field_shape,
    value_json_type,
    well_known_json_type,
)
from protoc_gen_types.exporters.typescript.identifiers import enum_value_names, property_key
from protoc_gen_types.exporters.typescript.printer import GeneratedFile
from protoc_gen_types.options import FrameworkOptions, Options

PLUGIN_NAME = "protoc-gen-types-only"


def _comment_lines(comments: str | None) -> list[str]:
    """Split a protoc leading comment into lines, dropping the space after ``//``."""
    if not comments:
        return []
    lines = [line[1:] if line.startswith(" ") else line for line in comments.rstrip("\n").split("\n")]
    return [*lines, ""]


def _is_deprecated(desc: MessageDescriptor | EnumDescriptor) -> bool:
    return desc.deprecated or desc.file.deprecated or any(parent.deprecated for parent in desc.parents())


class TypeScriptTransformer:
    """
    Transformer class to convert protobuf descriptors to TypeScript type declarations.

    Each schema file becomes one output file holding a structural type per
    message, describing its JSON encoding, and an ``enum`` per protobuf enum.
    """

    def __init__(
        self,
        files: Sequence[SchemaFile],
        options: Options,
        framework: FrameworkOptions | None = None,
        parameter: str = "",
    ):
        self.files = files
        self.options = options
        self.framework = framework or FrameworkOptions()
        self.parameter = parameter

        self.env = Environment(
            loader=PackageLoader("protoc_gen_types.exporters.typescript", "templates"),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def transform(self) -> list[GeneratedFile]:
        """
        Generate one output file per schema file.

        Returns:
            list[GeneratedFile]: The generated files, in input order. Files without
            declarations are left out unless ``keep_empty_files`` is set.
        """
        log.info(f"Generating TypeScript declarations for {len(self.files)} files")

        generated = []
        for schema_file in self.files:
            f = self.generate_file(schema_file)
            if f is None:
                log.debug(f"Skipping {schema_file.name}: no types declared")
                continue
            generated.append(f)
            log.debug(f"Generated {f.name}")

        log.info(f"Successfully generated {len(generated)} files")
        return generated

    def generate_file(self, schema_file: SchemaFile) -> GeneratedFile | None:
        """Emit the declarations of one schema file, or None when it declares nothing to emit."""
        declared_types = list(schema_file.declared_types())
        if not declared_types and not self.framework.keep_empty_files:
            return None

        f = GeneratedFile(schema_file.base_name + self.framework.file_suffix, schema_file, self.framework)
        f.preamble = self._render_preamble(schema_file)

        file_doc = [f"Describes the file {schema_file.name}."]
        if schema_file.deprecated:
            file_doc.append("@deprecated")
        f.jsdoc(file_doc)
        f.blank()

        for desc in declared_types:
            if isinstance(desc, MessageDescriptor):
                self.generate_message(f, desc)
            else:
                self.generate_enum(f, desc)
            f.blank()

        extensions = len(schema_file.extensions) + sum(
            len(desc.nested_extensions) for desc in declared_types if isinstance(desc, MessageDescriptor)
        )
        if extensions:
            log.debug(f"Skipped {extensions} extensions in {schema_file.name}")
        return f

    def _render_preamble(self, schema_file: SchemaFile) -> str:
        template = self.env.get_template("preamble.ts.j2")
        file_note = f"syntax {schema_file.syntax}"
        if schema_file.package:
            file_note = f"package {schema_file.package}, {file_note}"
        return template.render(
            plugin_name=PLUGIN_NAME,
            version=__version__,
            parameter_note=f' with parameter "{self.parameter}"' if self.parameter else "",
            file_name=schema_file.name,
            file_note=file_note,
        )

    def _export(self, keyword: str, name: str) -> str:
        if self.framework.declaration_only:
            return f"export declare {keyword} {name}"
        return f"export {keyword} {name}"

    def _type_doc(self, kind: str, desc: MessageDescriptor | EnumDescriptor) -> list[str]:
        lines = [*_comment_lines(desc.comments), f"@generated from {kind} {desc.type_name}"]
        if _is_deprecated(desc):
            lines.append("@deprecated")
        return lines

    def _field_doc(self, field: FieldDescriptor) -> list[str]:
        lines = [*_comment_lines(field.comments), f"@generated from field: {field_declaration(field)};"]
        if field.deprecated:
            lines.append("@deprecated")
        return lines

    def _enum_value_doc(self, value: EnumValue) -> list[str]:
        lines = [*_comment_lines(value.comments), f"@generated from enum value: {value.name} = {value.number};"]
        if value.deprecated:
            lines.append("@deprecated")
        return lines

    def generate_enum(self, f: GeneratedFile, enum: EnumDescriptor) -> None:
        """Emit an ``enum`` with one member per value, in declaration order."""
        f.jsdoc(self._type_doc("enum", enum))
        f.print(self._export("enum", f.local_name(enum)), " {")
        for index, (value, member_name) in enumerate(zip(enum.values, enum_value_names(enum), strict=True)):
            if index > 0:
                f.blank()
            f.jsdoc(self._enum_value_doc(value), "  ")
            f.print("  ", member_name, " = ", str(value.number), ",")
        f.print("}")

    def generate_message(self, f: GeneratedFile, message: MessageDescriptor) -> None:
        """Emit the JSON shape of a message."""
        declaration = self._export("type", f.local_name(message))
        f.jsdoc(self._type_doc("message", message))
        match message.well_known:
            case WellKnownType.ANY:
                f.print(declaration, " = {")
                f.print('  "@type"?: string;')
                f.print("};")
            case None:
                if is_wrapper(message):
                    f.print(declaration, " = ", value_json_type(message.fields[0], f), ";")
                else:
                    self._generate_record(f, message, declaration)
            case well_known:
                f.print(declaration, " = ", well_known_json_type(well_known, f), ";")

    def _generate_record(self, f: GeneratedFile, message: MessageDescriptor, declaration: str) -> None:
        f.print(declaration, " = {")
        for index, field in enumerate(message.fields):
            if index > 0:
                f.blank()
            f.jsdoc(self._field_doc(field), "  ")
            shape = field_shape(field, f)
            marker = "?: " if shape.optional else ": "
            f.print("  ", property_key(field.json_name), marker, shape.typing, ";")
        f.print("};")
