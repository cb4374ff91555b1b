"""Object knowledge base: descriptions, documentation links and properties."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from themectx.exceptions import KnowledgeBaseError

from .context_map import read_json_source

BUNDLED_OBJECTS = "objects.json"


class ObjectProperty(BaseModel):
    """A property of a Liquid object."""

    model_config = ConfigDict(frozen=True)

    description: str = ""
    link: str = Field(default="", description="Anchor appended to the object's link")
    type: str | None = Field(default=None, description="Object type when the property is itself an object")
    mock_value: Any | None = None


class ObjectEntry(BaseModel):
    """A Liquid object and its documented properties."""

    model_config = ConfigDict(frozen=True)

    description: str = ""
    link: str = ""
    properties: dict[str, ObjectProperty] = Field(default_factory=dict)


class ObjectKnowledgeBase(RootModel[dict[str, ObjectEntry]]):
    """Read-only mapping of object name to its documentation."""

    def get(self, name: str) -> ObjectEntry | None:
        return self.root.get(name)

    def names(self) -> list[str]:
        return list(self.root)

    def __contains__(self, name: object) -> bool:
        return name in self.root

    def __len__(self) -> int:
        return len(self.root)


def load_knowledge_base(path: str | Path | None = None) -> ObjectKnowledgeBase:
    """Load the object knowledge base from ``path``, or the bundled default."""
    resolved = Path(path) if path is not None else None
    data = read_json_source(resolved, BUNDLED_OBJECTS)
    try:
        return ObjectKnowledgeBase.model_validate(data)
    except ValidationError as e:
        raise KnowledgeBaseError(resolved or BUNDLED_OBJECTS, str(e)) from e


@lru_cache(maxsize=None)
def default_knowledge_base() -> ObjectKnowledgeBase:
    return load_knowledge_base()
