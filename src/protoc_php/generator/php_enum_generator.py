from __future__ import annotations

import logging
from typing import Iterable

from protoc_php.generator.php_templates import render
from protoc_php.printer import Printer

logger = logging.getLogger(__name__)


def generate_enum(enum, naming) -> str:
    """Generate the PHP class holding the constants of one enum."""
    values = [{"name": v.name, "number": v.number} for v in enum.values]
    return render(
        "enum.php.j2",
        full_name=enum.full_name,
        class_name=naming.short_class_name(enum),
        values=values,
    )


def print_enums(printer: Printer, enums: Iterable, naming) -> None:
    for enum in enums:
        logger.debug("Emitting enum %s", enum.full_name)
        printer.print(generate_enum(enum, naming))
