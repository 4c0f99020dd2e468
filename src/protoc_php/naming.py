"""Lexical helpers that turn protobuf names and values into PHP spellings.

``PhpNaming`` is the default implementation of the naming capability used by
the variable mapper and the file generator. Anything exposing the same methods
can be passed in its place (the tests use this to pin down names).
"""

from __future__ import annotations

import re
from typing import List, Union

from google.protobuf.descriptor import FieldDescriptor

from protoc_php.descriptors import containing_chain, is_repeated
from protoc_php.models import GenerationError

# Words PHP will not accept as method, constant or class names.
PHP_RESERVED = frozenset(
    """
    abstract and array as break callable case catch class clone const continue
    declare default die do echo else elseif empty enddeclare endfor endforeach
    endif endswitch endwhile eval exit extends final finally fn for foreach
    function global goto if implements include include_once instanceof
    insteadof interface isset list match namespace new or print private
    protected public readonly require require_once return static switch throw
    trait try unset use var while xor yield
    bool false float int iterable mixed never null object string true void
    """.split()
)

# Escapes PHP understands inside a double-quoted string literal.
PHP_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "$": "\\$",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

PROTO_TYPE_NAMES = {
    FieldDescriptor.TYPE_DOUBLE: "double",
    FieldDescriptor.TYPE_FLOAT: "float",
    FieldDescriptor.TYPE_INT64: "int64",
    FieldDescriptor.TYPE_UINT64: "uint64",
    FieldDescriptor.TYPE_INT32: "int32",
    FieldDescriptor.TYPE_FIXED64: "fixed64",
    FieldDescriptor.TYPE_FIXED32: "fixed32",
    FieldDescriptor.TYPE_BOOL: "bool",
    FieldDescriptor.TYPE_STRING: "string",
    FieldDescriptor.TYPE_GROUP: "group",
    FieldDescriptor.TYPE_BYTES: "bytes",
    FieldDescriptor.TYPE_UINT32: "uint32",
    FieldDescriptor.TYPE_SFIXED32: "sfixed32",
    FieldDescriptor.TYPE_SFIXED64: "sfixed64",
    FieldDescriptor.TYPE_SINT32: "sint32",
    FieldDescriptor.TYPE_SINT64: "sint64",
}


def to_pascal(name: str) -> str:
    parts = re.split(r"[_\-]", name)
    return "".join(p[:1].upper() + p[1:] for p in parts if p)


def to_camel(name: str) -> str:
    # Convert snake_case or kebab-case to lowerCamelCase
    pascal = to_pascal(name)
    return pascal[:1].lower() + pascal[1:]


def _escape_char(ch: str) -> str:
    if ch in PHP_ESCAPES:
        return PHP_ESCAPES[ch]
    code = ord(ch)
    if code < 0x20 or code == 0x7F:
        return f"\\x{code:02x}"
    return ch


def _escape_byte(code: int) -> str:
    ch = chr(code)
    if ch in PHP_ESCAPES:
        return PHP_ESCAPES[ch]
    if 0x20 <= code < 0x7F:
        return ch
    return f"\\x{code:02x}"


class PhpNaming:
    """Default PHP naming rules.

    With ``use_namespaces`` on, class references are fully qualified with the
    namespace derived from the declaring file's package.
    """

    def __init__(self, use_namespaces: bool = False):
        self.use_namespaces = use_namespaces

    def variable_name(self, raw: str) -> str:
        """lowerCamelCase identifier, suffixed with ``_`` when it is a PHP keyword."""
        name = to_camel(raw)
        if not name:
            raise GenerationError(f"Cannot derive a PHP identifier from {raw!r}")
        if name.lower() in PHP_RESERVED:
            name += "_"
        return name

    def capitalized_name(self, raw: str) -> str:
        name = to_pascal(raw)
        if not name:
            raise GenerationError(f"Cannot derive a PHP identifier from {raw!r}")
        return name

    def short_class_name(self, descriptor) -> str:
        """Class name without namespace; nested types are joined with ``_``."""
        name = "_".join(d.name for d in containing_chain(descriptor))
        if name.lower() in PHP_RESERVED:
            name += "_"
        return name

    def class_name(self, descriptor) -> str:
        if descriptor is None:
            raise GenerationError("Field refers to a type that is not in the descriptor pool")
        name = self.short_class_name(descriptor)
        if not self.use_namespaces:
            return name
        if not descriptor.file.package:
            # global namespace
            return "\\" + name
        return "\\" + self.namespace_name(descriptor.file) + "\\" + name

    def namespace_name(self, file) -> str:
        if not file.package:
            raise GenerationError(f"File '{file.name}' has no package to derive a namespace from")
        return "\\".join(to_pascal(part) for part in file.package.split("."))

    def output_path(self, file_name: str) -> str:
        """Map a proto file name to the PHP file generated for it."""
        if not file_name:
            raise GenerationError("Cannot map an empty file name to an output path")
        for suffix in (".protodevel", ".proto"):
            if file_name.endswith(suffix):
                file_name = file_name[: -len(suffix)]
                break
        return file_name + ".php"

    def escape(self, value: Union[str, bytes]) -> str:
        """Escape text for use between double quotes in PHP source."""
        if isinstance(value, bytes):
            return "".join(_escape_byte(b) for b in value)
        return "".join(_escape_char(ch) for ch in value)

    def one_line_definition(self, text: str) -> str:
        line = re.sub(r"\s*\n\s*", " ", text.strip())
        # "?>" would end the PHP block even inside a // comment
        return line.replace("?>", "? >")

    def oneof_constant(self, field_name: str) -> str:
        if not field_name:
            raise GenerationError("Oneof member without a name")
        constant = field_name.upper()
        if constant == "NONE":
            raise GenerationError(f"Oneof member '{field_name}' clashes with the NONE case constant")
        return constant

    def field_definition(self, field, with_label: bool = True) -> str:
        """Render a field the way it would be written in a .proto file."""
        label = ""
        if with_label:
            if is_repeated(field):
                label = "repeated "
            elif field.is_required:
                label = "required "
            else:
                label = "optional "

        if field.type in (FieldDescriptor.TYPE_MESSAGE, FieldDescriptor.TYPE_ENUM):
            target = field.message_type or field.enum_type
            type_name = "." + target.full_name
        else:
            type_name = PROTO_TYPE_NAMES[field.type]

        text = f"{label}{type_name} {field.name} = {field.number}"
        if field.has_default_value:
            text += f" [default = {self._definition_default(field)}]"
        return text + ";"

    def oneof_definition(self, oneof) -> str:
        lines: List[str] = [f"oneof {oneof.name} {{"]
        for field in oneof.fields:
            lines.append("  " + self.field_definition(field, with_label=False))
        lines.append("}")
        return "\n".join(lines)

    def _definition_default(self, field) -> str:
        value = field.default_value
        if field.cpp_type == FieldDescriptor.CPPTYPE_STRING:
            return '"' + self.escape(value) + '"'
        if field.cpp_type == FieldDescriptor.CPPTYPE_BOOL:
            return "true" if value else "false"
        if field.cpp_type == FieldDescriptor.CPPTYPE_ENUM:
            member = field.enum_type.values_by_number.get(value)
            return member.name if member is not None else str(value)
        return str(value)
