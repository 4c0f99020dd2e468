"""PHP literals for the declared default value of a field."""

from __future__ import annotations

import math
import struct
from typing import Callable, Dict

from google.protobuf.descriptor import FieldDescriptor

# Value used when a field declares no default of its own (repeated fields included).
ZERO_VALUES = {
    FieldDescriptor.CPPTYPE_INT32: 0,
    FieldDescriptor.CPPTYPE_INT64: 0,
    FieldDescriptor.CPPTYPE_UINT32: 0,
    FieldDescriptor.CPPTYPE_UINT64: 0,
    FieldDescriptor.CPPTYPE_FLOAT: 0.0,
    FieldDescriptor.CPPTYPE_DOUBLE: 0.0,
    FieldDescriptor.CPPTYPE_BOOL: False,
    FieldDescriptor.CPPTYPE_STRING: "",
}


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _non_finite(value: float) -> str:
    if math.isnan(value):
        return "NAN"
    return "INF" if value > 0 else "-INF"


def format_double(value: float) -> str:
    if not math.isfinite(value):
        return _non_finite(value)
    return repr(float(value))


def format_float(value: float) -> str:
    """Shortest decimal that reads back as the same 32-bit float."""
    if not math.isfinite(value):
        return _non_finite(value)
    value = _to_float32(value)
    for precision in range(6, 10):
        text = "%.*g" % (precision, value)
        if _to_float32(float(text)) == value:
            break
    # keep it a float literal in PHP
    if not any(c in text for c in ".eEn"):
        text += ".0"
    return text


def _declared_default(field):
    if field.has_default_value:
        return field.default_value
    if field.type == FieldDescriptor.TYPE_BYTES:
        return b""
    return ZERO_VALUES[field.cpp_type]


def _format_int(field, naming) -> str:
    return str(int(_declared_default(field)))


def _format_float(field, naming) -> str:
    return format_float(_declared_default(field))


def _format_double(field, naming) -> str:
    return format_double(_declared_default(field))


def _format_bool(field, naming) -> str:
    return "true" if _declared_default(field) else "false"


def _format_string(field, naming) -> str:
    return '"' + naming.escape(_declared_default(field)) + '"'


def _format_enum(field, naming) -> str:
    enum = field.enum_type
    member = None
    if field.has_default_value:
        member = enum.values_by_number.get(field.default_value)
    if member is None:
        member = enum.values[0]
    return naming.class_name(enum) + "::" + member.name


def _format_message(field, naming) -> str:
    return "null"


FORMATTERS: Dict[int, Callable] = {
    FieldDescriptor.CPPTYPE_INT32: _format_int,
    FieldDescriptor.CPPTYPE_INT64: _format_int,
    FieldDescriptor.CPPTYPE_UINT32: _format_int,
    FieldDescriptor.CPPTYPE_UINT64: _format_int,
    FieldDescriptor.CPPTYPE_FLOAT: _format_float,
    FieldDescriptor.CPPTYPE_DOUBLE: _format_double,
    FieldDescriptor.CPPTYPE_BOOL: _format_bool,
    FieldDescriptor.CPPTYPE_STRING: _format_string,
    FieldDescriptor.CPPTYPE_ENUM: _format_enum,
    FieldDescriptor.CPPTYPE_MESSAGE: _format_message,
}

_missing = {
    name for name in dir(FieldDescriptor)
    if name.startswith("CPPTYPE_") and getattr(FieldDescriptor, name) not in FORMATTERS
}
if _missing:
    raise ImportError(f"No PHP default formatter for {sorted(_missing)}")


def default_value_as_string(field, naming) -> str:
    """Return the PHP literal for the default value of ``field``.

    Every cpp_type has a formatter; a field of any other kind means the
    descriptor library grew a new kind and is treated as a bug, not an input
    error.
    """
    formatter = FORMATTERS.get(field.cpp_type)
    if formatter is None:
        raise AssertionError(f"Field '{field.name}' has unhandled cpp_type {field.cpp_type}")
    return formatter(field, naming)
