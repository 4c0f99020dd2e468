"""Indenting text accumulator used while emitting a PHP file."""

from __future__ import annotations

import logging
from typing import List

logger = logging.getLogger(__name__)

DEFAULT_INDENT = "  "


class Printer:
    """Collect output text, prefixing every non-empty line with the current indent."""

    def __init__(self, indent_str: str = DEFAULT_INDENT) -> None:
        self._chunks: List[str] = []
        self._indent_level = 0
        self._indent_str = indent_str
        self._at_line_start = True

    def print(self, text: str) -> None:
        indent = self._indent_str * self._indent_level
        for line in text.splitlines(keepends=True):
            if self._at_line_start and line.strip():
                self._chunks.append(indent)
            self._chunks.append(line)
            self._at_line_start = line.endswith("\n")

    def indent(self) -> None:
        self._indent_level += 1
        logger.debug("Indent level: %d", self._indent_level)

    def outdent(self) -> None:
        if self._indent_level == 0:
            raise ValueError("outdent() without matching indent()")
        self._indent_level -= 1
        logger.debug("Indent level: %d", self._indent_level)

    def get_text(self) -> str:
        return "".join(self._chunks)
