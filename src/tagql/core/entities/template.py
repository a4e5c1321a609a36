"""Compiled template entities."""

import re
from dataclasses import dataclass
from typing import Any

from tagql.core.entities.operation import OperationType

# Placeholder markers embedded in compiled template text.
# A plain marker is "\x00<index>\x01"; a spread marker is "\x00.<index>\x01".
MARKER_OPEN = "\x00"
MARKER_CLOSE = "\x01"
SPREAD_FLAG = "."

PLACEHOLDER_PATTERN = re.compile(r"\x00(\.?)(\d+)\x01")


def make_placeholder(index: int, spread: bool = False) -> str:
    """Build the marker for the interpolation at ``index``."""
    flag = SPREAD_FLAG if spread else ""
    return f"{MARKER_OPEN}{flag}{index}{MARKER_CLOSE}"


@dataclass(frozen=True, eq=False)
class CompiledTemplate:
    """Literal segments joined with placeholder markers.

    Compared and hashed by identity: every Operation built from this
    template carries it as its cache namespace key.
    """

    text: str
    values: tuple[Any, ...] = ()

    def __repr__(self) -> str:
        return f"CompiledTemplate(id={id(self):#x}, values={len(self.values)})"


@dataclass(frozen=True)
class SubOperation:
    """One operation or fragment definition found in a compiled template.

    Attributes:
        kind: Operation type of the definition.
        name: Operation or fragment name, if any.
        raw_query: Slice of the compiled text for this definition, with
            the fragments it spreads appended.
        end_index: Offset in the compiled text where the slice ends.
    """

    kind: OperationType
    name: str | None
    raw_query: str
    end_index: int

    @property
    def is_fragment(self) -> bool:
        return self.kind is OperationType.FRAGMENT
