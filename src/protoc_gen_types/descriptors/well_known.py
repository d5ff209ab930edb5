from protoc_gen_types.descriptors.models import FieldKind, MessageDescriptor, WellKnownType

WRAPPERS_FILE = "google/protobuf/wrappers.proto"
NULL_VALUE_TYPE_NAME = "google.protobuf.NullValue"

WELL_KNOWN_TYPES = {well_known.value: well_known for well_known in WellKnownType}


def resolve_well_known(type_name: str) -> WellKnownType | None:
    """Return the well-known kind for a fully-qualified message name, if any."""
    return WELL_KNOWN_TYPES.get(type_name)


def is_wrapper(message: MessageDescriptor) -> bool:
    """Check whether a message is a scalar wrapper such as ``google.protobuf.Int32Value``.

    A wrapper lives in ``wrappers.proto`` and holds exactly one singular scalar
    field named ``value`` with number 1.
    """
    if message.file.name != WRAPPERS_FILE or len(message.fields) != 1:
        return False
    value_field = message.fields[0]
    return value_field.name == "value" and value_field.number == 1 and value_field.kind == FieldKind.SCALAR
