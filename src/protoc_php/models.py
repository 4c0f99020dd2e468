from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

# Template variables for one field or oneof, in insertion order.
Variables = Dict[str, str]

TRUTHY = ("", "1", "true", "yes", "on")


class GenerationError(Exception):
    """Raised when a file cannot be emitted (bad names, unknown descriptors)."""


@dataclass
class GeneratorOptions:
    use_namespaces: bool = False
    # Raw plugin parameter text, kept for reference only.
    parameter: str = ""

    @classmethod
    def from_parameter(cls, parameter: str) -> GeneratorOptions:
        """Build options from a protoc parameter string such as ``namespaces,foo=bar``."""
        options = cls(parameter=parameter)
        for chunk in parameter.split(","):
            key, _, value = chunk.partition("=")
            key = key.strip()
            if key in ("namespaces", "use_namespaces"):
                options.use_namespaces = value.strip().lower() in TRUTHY
        return options


@dataclass
class GenerationResult:
    """Either generated source text or an error message, never both."""

    content: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
