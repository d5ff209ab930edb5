"""Read-only descriptor model consumed by the exporters.

The loader builds these objects once per generation pass from
``FileDescriptorProto`` messages. Cross references (field → message/enum,
declaration → parent) are resolved, so exporters never look anything up by name.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class WellKnownType(str, Enum):
    """The closed set of well-known messages with bespoke JSON shapes."""

    ANY = "google.protobuf.Any"
    TIMESTAMP = "google.protobuf.Timestamp"
    DURATION = "google.protobuf.Duration"
    FIELD_MASK = "google.protobuf.FieldMask"
    STRUCT = "google.protobuf.Struct"
    VALUE = "google.protobuf.Value"
    LIST_VALUE = "google.protobuf.ListValue"
    EMPTY = "google.protobuf.Empty"


class FieldKind(str, Enum):
    SCALAR = "scalar"
    ENUM = "enum"
    MESSAGE = "message"
    LIST = "list"
    MAP = "map"


class FieldLabel(str, Enum):
    OPTIONAL = "optional"
    REQUIRED = "required"
    REPEATED = "repeated"


class ScalarType(str, Enum):
    DOUBLE = "double"
    FLOAT = "float"
    INT64 = "int64"
    UINT64 = "uint64"
    INT32 = "int32"
    FIXED64 = "fixed64"
    FIXED32 = "fixed32"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"
    UINT32 = "uint32"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    SINT32 = "sint32"
    SINT64 = "sint64"


@dataclass(eq=False)
class SchemaFile:
    """A compilation unit, e.g. ``foo/bar.proto``."""

    name: str
    package: str
    syntax: str
    deprecated: bool = False
    dependencies: list["SchemaFile"] = field(default_factory=list, repr=False)
    messages: list["MessageDescriptor"] = field(default_factory=list, repr=False)
    enums: list["EnumDescriptor"] = field(default_factory=list, repr=False)
    extensions: list[str] = field(default_factory=list, repr=False)

    @property
    def base_name(self) -> str:
        """The file name without its ``.proto`` extension."""
        return self.name[: -len(".proto")] if self.name.endswith(".proto") else self.name

    def declared_types(self) -> Iterator["MessageDescriptor | EnumDescriptor"]:
        """Yield every message and enum of the file in declaration order.

        Each top-level message is followed by its nested types (depth first),
        then come the top-level enums. Map entry messages are skipped.
        """
        for message in self.messages:
            yield from _message_and_nested_types(message)
        yield from self.enums


def _message_and_nested_types(message: "MessageDescriptor") -> Iterator["MessageDescriptor | EnumDescriptor"]:
    if message.map_entry:
        return
    yield message
    for nested in message.nested_messages:
        yield from _message_and_nested_types(nested)
    yield from message.nested_enums


@dataclass(eq=False)
class OneofDescriptor:
    name: str
    synthetic: bool = False
    fields: list["FieldDescriptor"] = field(default_factory=list, repr=False)


@dataclass(eq=False)
class MessageDescriptor:
    name: str
    type_name: str
    file: SchemaFile = field(repr=False)
    parent: "MessageDescriptor | None" = field(default=None, repr=False)
    deprecated: bool = False
    map_entry: bool = False
    well_known: WellKnownType | None = None
    fields: list["FieldDescriptor"] = field(default_factory=list, repr=False)
    oneofs: list[OneofDescriptor] = field(default_factory=list, repr=False)
    nested_messages: list["MessageDescriptor"] = field(default_factory=list, repr=False)
    nested_enums: list["EnumDescriptor"] = field(default_factory=list, repr=False)
    nested_extensions: list[str] = field(default_factory=list, repr=False)
    comments: str | None = None

    def parents(self) -> Iterator["MessageDescriptor"]:
        """Yield the enclosing messages, innermost first."""
        parent = self.parent
        while parent is not None:
            yield parent
            parent = parent.parent


@dataclass(eq=False)
class EnumValue:
    name: str
    number: int
    parent: "EnumDescriptor" = field(repr=False)
    deprecated: bool = False
    comments: str | None = None


@dataclass(eq=False)
class EnumDescriptor:
    name: str
    type_name: str
    file: SchemaFile = field(repr=False)
    parent: MessageDescriptor | None = field(default=None, repr=False)
    deprecated: bool = False
    values: list[EnumValue] = field(default_factory=list, repr=False)
    comments: str | None = None

    def parents(self) -> Iterator[MessageDescriptor]:
        """Yield the enclosing messages, innermost first."""
        parent = self.parent
        while parent is not None:
            yield parent
            parent = parent.parent


@dataclass(eq=False)
class FieldDescriptor:
    """A message field.

    ``kind`` tells how the field is shaped. For ``LIST`` and ``MAP`` fields,
    ``element_kind`` holds the kind of the element (or of the map value) and
    ``scalar``/``enum``/``message`` describe that element. ``map_key`` is only
    set for maps.
    """

    name: str
    json_name: str
    number: int
    kind: FieldKind
    parent: MessageDescriptor = field(repr=False)
    label: FieldLabel = FieldLabel.OPTIONAL
    element_kind: FieldKind | None = None
    scalar: ScalarType | None = None
    enum: EnumDescriptor | None = field(default=None, repr=False)
    message: MessageDescriptor | None = field(default=None, repr=False)
    map_key: ScalarType | None = None
    oneof: OneofDescriptor | None = field(default=None, repr=False)
    proto3_optional: bool = False
    deprecated: bool = False
    comments: str | None = None

    @property
    def value_kind(self) -> FieldKind:
        """The kind of a single value: the field kind, or the element kind for lists and maps."""
        if self.kind in (FieldKind.LIST, FieldKind.MAP) and self.element_kind is not None:
            return self.element_kind
        return self.kind

    @property
    def real_oneof(self) -> OneofDescriptor | None:
        """The oneof group, unless it is the synthetic group of a proto3 optional field."""
        if self.oneof is None or self.oneof.synthetic:
            return None
        return self.oneof

    @property
    def has_explicit_presence(self) -> bool:
        """Whether the field was declared with an explicit ``optional`` label."""
        if self.proto3_optional:
            return True
        return (
            self.parent.file.syntax == "proto2"
            and self.label == FieldLabel.OPTIONAL
            and self.kind not in (FieldKind.LIST, FieldKind.MAP)
        )
