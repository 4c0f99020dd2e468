from __future__ import annotations

import logging
from typing import Iterable

from protoc_php.generator.php_templates import render
from protoc_php.printer import Printer

logger = logging.getLogger(__name__)


def generate_service(service, naming) -> str:
    """Generate a PHP interface with one method per RPC."""
    methods = []
    for method in service.methods:
        methods.append({
            "name": method.name,
            "method_name": naming.variable_name(method.name),
            "input_type": method.input_type.full_name,
            "output_type": method.output_type.full_name,
            "input_class": naming.class_name(method.input_type),
        })

    return render(
        "service.php.j2",
        full_name=service.full_name,
        class_name=naming.short_class_name(service),
        methods=methods,
    )


def print_services(printer: Printer, services: Iterable, naming) -> None:
    for service in services:
        logger.debug("Emitting service %s", service.full_name)
        printer.print(generate_service(service, naming))
