"""Build the descriptor model from ``google.protobuf.descriptor_pb2`` messages."""

from collections.abc import Iterable, Sequence

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest
from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    EnumDescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
    FileDescriptorSet,
    SourceCodeInfo,
)
from google.protobuf.message import DecodeError

from protoc_gen_types import log
from protoc_gen_types.descriptors.models import (
    EnumDescriptor,
    EnumValue,
    FieldDescriptor,
    FieldKind,
    FieldLabel,
    MessageDescriptor,
    OneofDescriptor,
    ScalarType,
    SchemaFile,
)
from protoc_gen_types.descriptors.well_known import resolve_well_known
from protoc_gen_types.errors import DescriptorError

SCALAR_TYPES = {
    FieldDescriptorProto.TYPE_DOUBLE: ScalarType.DOUBLE,
    FieldDescriptorProto.TYPE_FLOAT: ScalarType.FLOAT,
    FieldDescriptorProto.TYPE_INT64: ScalarType.INT64,
    FieldDescriptorProto.TYPE_UINT64: ScalarType.UINT64,
    FieldDescriptorProto.TYPE_INT32: ScalarType.INT32,
    FieldDescriptorProto.TYPE_FIXED64: ScalarType.FIXED64,
    FieldDescriptorProto.TYPE_FIXED32: ScalarType.FIXED32,
    FieldDescriptorProto.TYPE_BOOL: ScalarType.BOOL,
    FieldDescriptorProto.TYPE_STRING: ScalarType.STRING,
    FieldDescriptorProto.TYPE_BYTES: ScalarType.BYTES,
    FieldDescriptorProto.TYPE_UINT32: ScalarType.UINT32,
    FieldDescriptorProto.TYPE_SFIXED32: ScalarType.SFIXED32,
    FieldDescriptorProto.TYPE_SFIXED64: ScalarType.SFIXED64,
    FieldDescriptorProto.TYPE_SINT32: ScalarType.SINT32,
    FieldDescriptorProto.TYPE_SINT64: ScalarType.SINT64,
}

LABELS = {
    FieldDescriptorProto.LABEL_OPTIONAL: FieldLabel.OPTIONAL,
    FieldDescriptorProto.LABEL_REQUIRED: FieldLabel.REQUIRED,
    FieldDescriptorProto.LABEL_REPEATED: FieldLabel.REPEATED,
}

MESSAGE_TYPES = {FieldDescriptorProto.TYPE_MESSAGE, FieldDescriptorProto.TYPE_GROUP}

# Field numbers inside descriptor.proto, used to address source locations.
FILE_MESSAGE_TYPE = 4
FILE_ENUM_TYPE = 5
MESSAGE_FIELD = 2
MESSAGE_NESTED_TYPE = 3
MESSAGE_ENUM_TYPE = 4
ENUM_VALUE = 2


def to_json_name(name: str) -> str:
    """Derive a JSON name the way protoc does: drop underscores, capitalize the letter after each."""
    result = []
    capitalize_next = False
    for char in name:
        if char == "_":
            capitalize_next = True
        elif capitalize_next:
            result.append(char.upper())
            capitalize_next = False
        else:
            result.append(char)
    return "".join(result)


def _qualify(scope: str, name: str) -> str:
    return f"{scope}.{name}" if scope else name


class SourceComments:
    """Leading comments of a file, addressed by source location path."""

    def __init__(self, source_code_info: SourceCodeInfo) -> None:
        self._leading: dict[tuple[int, ...], str] = {}
        for location in source_code_info.location:
            if location.HasField("leading_comments"):
                self._leading[tuple(location.path)] = location.leading_comments

    def leading(self, path: Sequence[int]) -> str | None:
        return self._leading.get(tuple(path))


class DescriptorSet:
    """All files of one generation pass, with cross references resolved."""

    def __init__(self) -> None:
        self.files: dict[str, SchemaFile] = {}
        self._messages: dict[str, MessageDescriptor] = {}
        self._enums: dict[str, EnumDescriptor] = {}

    @classmethod
    def from_protos(cls, file_protos: Iterable[FileDescriptorProto]) -> "DescriptorSet":
        """
        Load file descriptors, adding dependencies before their dependents.

        Args:
            file_protos: The file descriptors, in any order

        Returns:
            DescriptorSet: The loaded set

        Raises:
            DescriptorError: If a dependency is missing or a type reference cannot be resolved
        """
        descriptor_set = cls()
        protos_by_name = {file_proto.name: file_proto for file_proto in file_protos}
        for name in protos_by_name:
            descriptor_set._add_with_dependencies(name, protos_by_name, [])
        log.debug(f"Loaded {len(descriptor_set.files)} files")
        return descriptor_set

    def get_file(self, name: str) -> SchemaFile:
        try:
            return self.files[name]
        except KeyError:
            raise DescriptorError(f'File "{name}" is not part of the descriptor set') from None

    def get_message(self, type_name: str) -> MessageDescriptor:
        try:
            return self._messages[type_name.lstrip(".")]
        except KeyError:
            raise DescriptorError(f'Message "{type_name}" is not part of the descriptor set') from None

    def get_enum(self, type_name: str) -> EnumDescriptor:
        try:
            return self._enums[type_name.lstrip(".")]
        except KeyError:
            raise DescriptorError(f'Enum "{type_name}" is not part of the descriptor set') from None

    def _add_with_dependencies(
        self, name: str, protos_by_name: dict[str, FileDescriptorProto], importers: list[str]
    ) -> SchemaFile:
        if name in self.files:
            return self.files[name]
        if name in importers:
            raise DescriptorError(f"Import cycle detected: {' -> '.join([*importers, name])}")
        if name not in protos_by_name:
            importer = importers[-1] if importers else "<input>"
            raise DescriptorError(
                f'File "{name}" imported by "{importer}" is missing, '
                "was the descriptor set built with --include_imports?"
            )

        file_proto = protos_by_name[name]
        for dependency in file_proto.dependency:
            self._add_with_dependencies(dependency, protos_by_name, [*importers, name])
        return self.add_file(file_proto)

    def add_file(self, file_proto: FileDescriptorProto) -> SchemaFile:
        """
        Add one file whose dependencies are already loaded.

        Args:
            file_proto: The file descriptor

        Returns:
            SchemaFile: The loaded file
        """
        if file_proto.name in self.files:
            return self.files[file_proto.name]

        schema_file = SchemaFile(
            name=file_proto.name,
            package=file_proto.package,
            syntax=file_proto.syntax or "proto2",
            deprecated=file_proto.options.deprecated,
            dependencies=[self.get_file(dependency) for dependency in file_proto.dependency],
        )
        comments = SourceComments(file_proto.source_code_info)

        # Types are declared first so fields may refer to types declared later in the file.
        pending: list[tuple[MessageDescriptor, DescriptorProto, tuple[int, ...]]] = []
        for index, message_proto in enumerate(file_proto.message_type):
            schema_file.messages.append(
                self._declare_message(
                    message_proto, schema_file, None, file_proto.package, (FILE_MESSAGE_TYPE, index), comments, pending
                )
            )
        for index, enum_proto in enumerate(file_proto.enum_type):
            schema_file.enums.append(
                self._declare_enum(enum_proto, schema_file, None, file_proto.package, (FILE_ENUM_TYPE, index), comments)
            )
        schema_file.extensions = [_qualify(file_proto.package, extension.name) for extension in file_proto.extension]

        for message, message_proto, path in pending:
            self._add_fields(message, message_proto, path, comments)

        self.files[schema_file.name] = schema_file
        log.debug(f"Loaded file {schema_file.name}")
        return schema_file

    def _declare_message(
        self,
        message_proto: DescriptorProto,
        schema_file: SchemaFile,
        parent: MessageDescriptor | None,
        scope: str,
        path: tuple[int, ...],
        comments: SourceComments,
        pending: list[tuple[MessageDescriptor, DescriptorProto, tuple[int, ...]]],
    ) -> MessageDescriptor:
        type_name = _qualify(scope, message_proto.name)
        message = MessageDescriptor(
            name=message_proto.name,
            type_name=type_name,
            file=schema_file,
            parent=parent,
            deprecated=message_proto.options.deprecated,
            map_entry=message_proto.options.map_entry,
            well_known=resolve_well_known(type_name),
            oneofs=[OneofDescriptor(name=oneof.name) for oneof in message_proto.oneof_decl],
            nested_extensions=[_qualify(type_name, extension.name) for extension in message_proto.extension],
            comments=comments.leading(path),
        )
        self._messages[type_name] = message

        for index, nested_proto in enumerate(message_proto.nested_type):
            message.nested_messages.append(
                self._declare_message(
                    nested_proto,
                    schema_file,
                    message,
                    type_name,
                    (*path, MESSAGE_NESTED_TYPE, index),
                    comments,
                    pending,
                )
            )
        for index, enum_proto in enumerate(message_proto.enum_type):
            message.nested_enums.append(
                self._declare_enum(
                    enum_proto, schema_file, message, type_name, (*path, MESSAGE_ENUM_TYPE, index), comments
                )
            )

        # Nested messages come first so map entries have their fields before the map field is resolved.
        pending.append((message, message_proto, path))
        return message

    def _declare_enum(
        self,
        enum_proto: EnumDescriptorProto,
        schema_file: SchemaFile,
        parent: MessageDescriptor | None,
        scope: str,
        path: tuple[int, ...],
        comments: SourceComments,
    ) -> EnumDescriptor:
        type_name = _qualify(scope, enum_proto.name)
        enum = EnumDescriptor(
            name=enum_proto.name,
            type_name=type_name,
            file=schema_file,
            parent=parent,
            deprecated=enum_proto.options.deprecated,
            comments=comments.leading(path),
        )
        enum.values = [
            EnumValue(
                name=value_proto.name,
                number=value_proto.number,
                parent=enum,
                deprecated=value_proto.options.deprecated,
                comments=comments.leading((*path, ENUM_VALUE, index)),
            )
            for index, value_proto in enumerate(enum_proto.value)
        ]
        self._enums[type_name] = enum
        return enum

    def _add_fields(
        self,
        message: MessageDescriptor,
        message_proto: DescriptorProto,
        path: tuple[int, ...],
        comments: SourceComments,
    ) -> None:
        for index, field_proto in enumerate(message_proto.field):
            field = self._build_field(message, field_proto)
            field.comments = comments.leading((*path, MESSAGE_FIELD, index))
            if field_proto.HasField("oneof_index"):
                field.oneof = message.oneofs[field_proto.oneof_index]
                field.oneof.fields.append(field)
            message.fields.append(field)

        for oneof in message.oneofs:
            oneof.synthetic = len(oneof.fields) == 1 and oneof.fields[0].proto3_optional

    def _build_field(self, message: MessageDescriptor, field_proto: FieldDescriptorProto) -> FieldDescriptor:
        label = LABELS[field_proto.label]
        field = FieldDescriptor(
            name=field_proto.name,
            json_name=field_proto.json_name if field_proto.HasField("json_name") else to_json_name(field_proto.name),
            number=field_proto.number,
            kind=FieldKind.SCALAR,
            parent=message,
            label=label,
            proto3_optional=field_proto.proto3_optional,
            deprecated=field_proto.options.deprecated,
        )

        if field_proto.type in MESSAGE_TYPES:
            referenced = self._resolve_message(message, field_proto)
            if label == FieldLabel.REPEATED and referenced.map_entry:
                key_field, value_field = referenced.fields
                field.kind = FieldKind.MAP
                field.map_key = key_field.scalar
                field.element_kind = value_field.kind
                field.scalar = value_field.scalar
                field.enum = value_field.enum
                field.message = value_field.message
                return field
            field.kind = FieldKind.MESSAGE
            field.message = referenced
        elif field_proto.type == FieldDescriptorProto.TYPE_ENUM:
            field.kind = FieldKind.ENUM
            field.enum = self._resolve_enum(message, field_proto)
        else:
            field.scalar = SCALAR_TYPES[field_proto.type]

        if label == FieldLabel.REPEATED:
            field.element_kind = field.kind
            field.kind = FieldKind.LIST
        return field

    def _resolve_message(self, message: MessageDescriptor, field_proto: FieldDescriptorProto) -> MessageDescriptor:
        try:
            return self.get_message(field_proto.type_name)
        except DescriptorError:
            raise DescriptorError(
                f'Unable to resolve message "{field_proto.type_name}" for field {message.type_name}.{field_proto.name}'
            ) from None

    def _resolve_enum(self, message: MessageDescriptor, field_proto: FieldDescriptorProto) -> EnumDescriptor:
        try:
            return self.get_enum(field_proto.type_name)
        except DescriptorError:
            raise DescriptorError(
                f'Unable to resolve enum "{field_proto.type_name}" for field {message.type_name}.{field_proto.name}'
            ) from None


def load_request(request: CodeGeneratorRequest) -> tuple[DescriptorSet, list[SchemaFile]]:
    """
    Load the descriptors of a plugin request.

    Args:
        request: The CodeGeneratorRequest sent by protoc

    Returns:
        tuple: The descriptor set and the files to generate, in request order
    """
    descriptor_set = DescriptorSet.from_protos(request.proto_file)
    return descriptor_set, [descriptor_set.get_file(name) for name in request.file_to_generate]


def load_descriptor_set(data: bytes, file_names: Sequence[str] | None = None) -> tuple[DescriptorSet, list[SchemaFile]]:
    """
    Load a serialized FileDescriptorSet, as written by ``protoc --descriptor_set_out``.

    Args:
        data: The serialized FileDescriptorSet
        file_names: Files to generate. Defaults to every file that is not a google/protobuf import.

    Returns:
        tuple: The descriptor set and the files to generate

    Raises:
        DescriptorError: If the data cannot be decoded or the descriptors cannot be loaded
    """
    try:
        file_set = FileDescriptorSet.FromString(data)
    except DecodeError as e:
        raise DescriptorError(f"Input is not a serialized FileDescriptorSet: {e}") from e
    descriptor_set = DescriptorSet.from_protos(file_set.file)
    if file_names:
        return descriptor_set, [descriptor_set.get_file(name) for name in file_names]
    return descriptor_set, [
        descriptor_set.files[file_proto.name]
        for file_proto in file_set.file
        if not file_proto.name.startswith("google/protobuf/")
    ]
