"""Assemble a complete PHP file from one protobuf file descriptor.

Output order is fixed:

    header, [namespace open], requires, enums, messages, services, [namespace close]

The namespace block is only written when namespaces are enabled and the file
declares a package.
"""

from __future__ import annotations

import logging
from typing import Optional

from protoc_php.descriptors import all_enums, declared_types, file_proto, walk_messages
from protoc_php.generator.php_enum_generator import print_enums
from protoc_php.generator.php_message_generator import print_messages
from protoc_php.generator.php_service_generator import print_services
from protoc_php.generator.php_templates import render
from protoc_php.models import GenerationError, GenerationResult, GeneratorOptions
from protoc_php.naming import PhpNaming
from protoc_php.printer import Printer

logger = logging.getLogger(__name__)


class PhpFileGenerator:
    def __init__(self, file, options: Optional[GeneratorOptions] = None, naming=None):
        self.file = file
        self.options = options or GeneratorOptions()
        self.naming = naming or PhpNaming(use_namespaces=self.options.use_namespaces)
        self.file_proto = file_proto(file)

    def use_namespaces(self) -> bool:
        return self.options.use_namespaces and bool(self.file.package)

    def generate(self) -> GenerationResult:
        """Generate the PHP source, or an error message if emission failed."""
        printer = Printer()
        try:
            self._emit(printer)
        except GenerationError as e:
            logger.warning("Generation of %s failed: %s", self.file.name, e)
            return GenerationResult(error=str(e))
        return GenerationResult(content=printer.get_text())

    def _emit(self, printer: Printer) -> None:
        naming = self.naming
        enums, messages, services = declared_types(self.file, self.file_proto)

        logger.debug("%s: prologue", self.file.name)
        printer.print(render("file_header.php.j2", filename=naming.output_path(self.file.name)))

        if self.use_namespaces():
            logger.debug("%s: opening namespace", self.file.name)
            printer.print(render("namespace_open.php.j2", namespace=naming.namespace_name(self.file)))
            printer.indent()

        # Duplicate imports are written out as declared.
        for dependency in self.file_proto.dependency:
            printer.print(f"require('{naming.output_path(dependency)}');\n")

        print_enums(printer, all_enums(enums, messages), naming)
        print_messages(printer, walk_messages(messages), naming)
        print_services(printer, services, naming)

        if self.use_namespaces():
            printer.outdent()
            printer.print("}\n")
        logger.debug("%s: done", self.file.name)


def generate_file(file, options: Optional[GeneratorOptions] = None, naming=None) -> GenerationResult:
    return PhpFileGenerator(file, options, naming).generate()
