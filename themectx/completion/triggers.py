"""Detection of what the user is typing from the text left of the cursor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
import re

_SPLIT_RE = re.compile(r"[ .|{}]+")


class TriggerKind(StrEnum):
    OBJECT = auto()
    PROPERTY = auto()


@dataclass(frozen=True)
class Trigger:
    kind: TriggerKind
    object_name: str | None = None


def detect_trigger(line_prefix: str) -> Trigger | None:
    """Work out which completions apply to ``line_prefix``.

    ``{{ product.`` asks for the properties of ``product``; a bare word
    with no dot asks for object names. Anything else gets no suggestions.
    """
    if line_prefix.endswith("."):
        parts = _SPLIT_RE.split(line_prefix.strip())
        if len(parts) < 2 or not parts[-2]:
            return None
        return Trigger(kind=TriggerKind.PROPERTY, object_name=parts[-2])

    if line_prefix.strip() and "." not in line_prefix:
        return Trigger(kind=TriggerKind.OBJECT)

    return None
