from collections.abc import Callable, Sequence

import pytest
from google.protobuf import (
    any_pb2,
    duration_pb2,
    empty_pb2,
    field_mask_pb2,
    struct_pb2,
    timestamp_pb2,
    wrappers_pb2,
)
from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    EnumDescriptorProto,
    EnumValueDescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
    OneofDescriptorProto,
)

from protoc_gen_types.descriptors import DescriptorSet, SchemaFile
from protoc_gen_types.exporters.typescript import translate_to_typescript
from protoc_gen_types.options import parse_parameter

WELL_KNOWN_MODULES = [any_pb2, duration_pb2, empty_pb2, field_mask_pb2, struct_pb2, timestamp_pb2, wrappers_pb2]

F = FieldDescriptorProto


def well_known_file_protos() -> list[FileDescriptorProto]:
    """The google/protobuf well-known files as FileDescriptorProtos."""
    protos = []
    for module in WELL_KNOWN_MODULES:
        file_proto = FileDescriptorProto()
        module.DESCRIPTOR.CopyToProto(file_proto)
        protos.append(file_proto)
    return protos


def field(
    name: str,
    number: int,
    type_: int,
    *,
    label: int = F.LABEL_OPTIONAL,
    type_name: str | None = None,
    json_name: str | None = None,
    proto3_optional: bool = False,
    oneof_index: int | None = None,
    deprecated: bool = False,
) -> FieldDescriptorProto:
    field_proto = FieldDescriptorProto(name=name, number=number, type=type_, label=label)
    if type_name is not None:
        field_proto.type_name = type_name
    if json_name is not None:
        field_proto.json_name = json_name
    if proto3_optional:
        field_proto.proto3_optional = True
    if oneof_index is not None:
        field_proto.oneof_index = oneof_index
    if deprecated:
        field_proto.options.deprecated = True
    return field_proto


def message(
    name: str,
    fields: Sequence[FieldDescriptorProto] = (),
    *,
    nested: Sequence[DescriptorProto] = (),
    enums: Sequence[EnumDescriptorProto] = (),
    oneofs: Sequence[str] = (),
    deprecated: bool = False,
    map_entry: bool = False,
) -> DescriptorProto:
    message_proto = DescriptorProto(
        name=name,
        field=list(fields),
        nested_type=list(nested),
        enum_type=list(enums),
        oneof_decl=[OneofDescriptorProto(name=oneof) for oneof in oneofs],
    )
    if deprecated:
        message_proto.options.deprecated = True
    if map_entry:
        message_proto.options.map_entry = True
    return message_proto


def map_entry(name: str, key_type: int, value_type: int, value_type_name: str | None = None) -> DescriptorProto:
    return message(
        name,
        [field("key", 1, key_type), field("value", 2, value_type, type_name=value_type_name)],
        map_entry=True,
    )


def enum(name: str, values: Sequence[tuple[str, int]], *, deprecated_values: Sequence[str] = ()) -> EnumDescriptorProto:
    enum_proto = EnumDescriptorProto(name=name)
    for value_name, number in values:
        value = EnumValueDescriptorProto(name=value_name, number=number)
        if value_name in deprecated_values:
            value.options.deprecated = True
        enum_proto.value.append(value)
    return enum_proto


def proto_file(
    name: str,
    *,
    package: str = "example.v1",
    messages: Sequence[DescriptorProto] = (),
    enums: Sequence[EnumDescriptorProto] = (),
    dependencies: Sequence[str] = (),
    syntax: str = "proto3",
    deprecated: bool = False,
) -> FileDescriptorProto:
    file_proto = FileDescriptorProto(
        name=name,
        package=package,
        syntax=syntax,
        message_type=list(messages),
        enum_type=list(enums),
        dependency=list(dependencies),
    )
    if deprecated:
        file_proto.options.deprecated = True
    return file_proto


def user_file_proto() -> FileDescriptorProto:
    """A file exercising most field kinds, similar to what protoc sends for example/v1/user.proto."""
    status = enum("Status", [("STATUS_UNSPECIFIED", 0), ("STATUS_ACTIVE", 1), ("STATUS_DISABLED", 3)])
    address = message("Address", [field("street", 1, F.TYPE_STRING, json_name="street")])
    user = message(
        "User",
        [
            field("id", 1, F.TYPE_INT64, json_name="id", proto3_optional=True, oneof_index=1),
            field("name", 2, F.TYPE_STRING, json_name="name"),
            field("tags", 3, F.TYPE_STRING, label=F.LABEL_REPEATED, json_name="tags"),
            field(
                "scores",
                4,
                F.TYPE_MESSAGE,
                label=F.LABEL_REPEATED,
                type_name=".example.v1.User.ScoresEntry",
                json_name="scores",
            ),
            field("address", 5, F.TYPE_MESSAGE, type_name=".example.v1.User.Address", json_name="address"),
            field("created_at", 6, F.TYPE_MESSAGE, type_name=".google.protobuf.Timestamp", json_name="createdAt"),
            field("nickname", 7, F.TYPE_MESSAGE, type_name=".google.protobuf.StringValue", json_name="nickname"),
            field("status", 8, F.TYPE_ENUM, type_name=".example.v1.User.Status", json_name="status"),
            field("email", 9, F.TYPE_STRING, json_name="email", oneof_index=0),
            field("phone", 10, F.TYPE_STRING, json_name="phone", oneof_index=0),
            field("two_fa", 11, F.TYPE_BOOL, json_name="2fa"),
            field(
                "history",
                12,
                F.TYPE_ENUM,
                label=F.LABEL_REPEATED,
                type_name=".example.v1.User.Status",
                json_name="history",
            ),
            field("avatar", 13, F.TYPE_BYTES, json_name="avatar"),
            field("rating", 14, F.TYPE_DOUBLE, json_name="rating"),
        ],
        nested=[map_entry("ScoresEntry", F.TYPE_STRING, F.TYPE_INT32), address],
        enums=[status],
        oneofs=["contact", "_id"],
    )
    return proto_file(
        "example/v1/user.proto",
        messages=[user],
        dependencies=["google/protobuf/timestamp.proto", "google/protobuf/wrappers.proto"],
    )


def load_files(*file_protos: FileDescriptorProto) -> list[SchemaFile]:
    """Load the given files on top of the well-known files and return them in order."""
    descriptor_set = DescriptorSet.from_protos([*well_known_file_protos(), *file_protos])
    return [descriptor_set.get_file(file_proto.name) for file_proto in file_protos]


def generate_typescript(*file_protos: FileDescriptorProto, parameter: str = "") -> dict[str, str]:
    framework, options = parse_parameter(parameter)
    return translate_to_typescript(options, load_files(*file_protos), framework, parameter)


@pytest.fixture(scope="module")
def user_file() -> SchemaFile:
    return load_files(user_file_proto())[0]


@pytest.fixture
def generate() -> Callable[..., dict[str, str]]:
    return generate_typescript
