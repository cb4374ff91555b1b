"""Static map of which objects each context exposes.

Format::

    {
      "globals": ["cart", "shop", "settings"],
      "template_map": {"product": ["product"], "collection": ["collection"]}
    }
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from pathlib import Path
import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from themectx.discovery.schemas import GLOBAL_CONTEXT
from themectx.exceptions import KnowledgeBaseError

BUNDLED_CONTEXT_MAP = "context-map.json"


class StaticContextMap(BaseModel):
    """Global objects plus the objects each context key adds on top."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    global_objects: tuple[str, ...] = Field(default=(), alias="globals")
    template_map: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    @property
    def context_keys(self) -> list[str]:
        return list(self.template_map)

    def objects_for(self, context_key: str) -> tuple[str, ...]:
        """Objects a context exposes; the global context exposes the globals."""
        if context_key == GLOBAL_CONTEXT.context_key:
            return self.global_objects
        return self.template_map.get(context_key, ())


def read_json_source(path: Path | None, bundled_name: str) -> object:
    try:
        if path is None:
            bundled = resources.files("themectx.knowledge").joinpath("data").joinpath(bundled_name)
            text = bundled.read_text(encoding="utf-8")
        else:
            text = path.read_text(encoding="utf-8")
        return json.loads(text)
    except (OSError, json.JSONDecodeError) as e:
        raise KnowledgeBaseError(path or bundled_name, str(e)) from e


def load_context_map(path: str | Path | None = None) -> StaticContextMap:
    """Load a context map from ``path``, or the bundled default."""
    resolved = Path(path) if path is not None else None
    data = read_json_source(resolved, BUNDLED_CONTEXT_MAP)
    try:
        return StaticContextMap.model_validate(data)
    except ValidationError as e:
        raise KnowledgeBaseError(resolved or BUNDLED_CONTEXT_MAP, str(e)) from e


@lru_cache(maxsize=None)
def default_context_map() -> StaticContextMap:
    """The bundled context map, loaded once per process."""
    return load_context_map()
