from __future__ import annotations

import logging
from typing import Iterable

from protoc_php.descriptors import real_oneofs
from protoc_php.generator.php_templates import render
from protoc_php.printer import Printer
from protoc_php.variables import field_variables, oneof_variables

logger = logging.getLogger(__name__)


def generate_message(message, naming) -> str:
    """Generate the PHP class for one message (nested messages not included)."""
    fields = [field_variables(f, naming) for f in message.fields]
    oneofs = [oneof_variables(o, naming) for o in real_oneofs(message)]

    return render(
        "message.php.j2",
        full_name=message.full_name,
        class_name=naming.short_class_name(message),
        fields=fields,
        oneofs=oneofs,
    )


def print_messages(printer: Printer, messages: Iterable, naming) -> None:
    for message in messages:
        logger.debug("Emitting message %s (%d fields)", message.full_name, len(message.fields))
        printer.print(generate_message(message, naming))
