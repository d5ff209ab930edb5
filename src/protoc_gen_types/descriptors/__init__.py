"""Descriptor model and loader."""

from .loader import DescriptorSet, load_descriptor_set, load_request
from .models import (
    EnumDescriptor,
    EnumValue,
    FieldDescriptor,
    FieldKind,
    FieldLabel,
    MessageDescriptor,
    OneofDescriptor,
    ScalarType,
    SchemaFile,
    WellKnownType,
)
from .well_known import is_wrapper

__all__ = [
    "DescriptorSet",
    "EnumDescriptor",
    "EnumValue",
    "FieldDescriptor",
    "FieldKind",
    "FieldLabel",
    "MessageDescriptor",
    "OneofDescriptor",
    "ScalarType",
    "SchemaFile",
    "WellKnownType",
    "is_wrapper",
    "load_descriptor_set",
    "load_request",
]
