"""Template variables for fields and oneofs.

Each mapping is built fresh for one field (or oneof), handed to a template and
thrown away. Keys:

    name, [], definition, default, capitalized_name, field, type
    oneof                      (oneof members only)
    oneof_name, oneof_case, oneof_capitalized_name,
    oneof_definition, oneof_default, oneof_field
"""

from __future__ import annotations

from google.protobuf.descriptor import FieldDescriptor

from protoc_php.defaults import default_value_as_string
from protoc_php.descriptors import is_repeated, real_containing_oneof
from protoc_php.models import Variables

ONEOF_NONE = "self::NONE"


def oneof_variables(oneof, naming) -> Variables:
    name = naming.variable_name(oneof.name)
    return {
        "name": name,
        "oneof_name": name,
        "oneof_case": "_" + name + "case",
        "oneof_capitalized_name": naming.capitalized_name(oneof.name),
        "oneof_definition": naming.one_line_definition(naming.oneof_definition(oneof)),
        "oneof_default": ONEOF_NONE,
        "oneof_field": oneof.name,
    }


def field_variables(field, naming) -> Variables:
    variables: Variables = {}
    variables["name"] = naming.variable_name(field.name)
    variables["[]"] = "[]" if is_repeated(field) else ""
    variables["definition"] = naming.one_line_definition(naming.field_definition(field))
    variables["default"] = default_value_as_string(field, naming)
    variables["capitalized_name"] = naming.capitalized_name(field.name)
    variables["field"] = field.name

    oneof = real_containing_oneof(field)
    if oneof is not None:
        variables["oneof"] = naming.oneof_constant(field.name)
        # Members share the oneof's storage, so its name replaces the field's.
        for key, value in oneof_variables(oneof, naming).items():
            if key == "name" or key not in variables:
                variables[key] = value

    if field.type in (FieldDescriptor.TYPE_MESSAGE, FieldDescriptor.TYPE_GROUP):
        variables["type"] = naming.class_name(field.message_type) + " "
    else:
        variables["type"] = ""
    return variables
