"""Glue between the editor trigger, context discovery and completion items."""

from __future__ import annotations

from typing import TYPE_CHECKING
import logging

from themectx.discovery.cancellation import CancellationToken
from themectx.discovery.files import FileSource
from themectx.discovery.orchestrator import DiscoveryOrchestrator
from themectx.knowledge.context_map import StaticContextMap, default_context_map, load_context_map
from themectx.knowledge.objects import ObjectKnowledgeBase, default_knowledge_base, load_knowledge_base

from .items import CompletionItem, object_items, property_items
from .ranking import rank_objects
from .triggers import TriggerKind, detect_trigger

if TYPE_CHECKING:
    from themectx.config import ThemeContextConfig

logger = logging.getLogger(__name__)


class CompletionService:
    """Answers completion requests for one theme."""

    def __init__(
        self,
        orchestrator: DiscoveryOrchestrator,
        context_map: StaticContextMap | None = None,
        knowledge: ObjectKnowledgeBase | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.context_map = context_map if context_map is not None else default_context_map()
        self.knowledge = knowledge if knowledge is not None else default_knowledge_base()

    @classmethod
    def from_config(cls, source: FileSource, config: ThemeContextConfig) -> CompletionService:
        context_map = (
            load_context_map(config.context_map_path)
            if config.context_map_path
            else default_context_map()
        )
        knowledge = (
            load_knowledge_base(config.knowledge_base_path)
            if config.knowledge_base_path
            else default_knowledge_base()
        )
        return cls(
            DiscoveryOrchestrator.from_config(source, config),
            context_map=context_map,
            knowledge=knowledge,
        )

    def complete(
        self,
        path: str,
        line_prefix: str,
        token: CancellationToken | None = None,
    ) -> list[CompletionItem]:
        """Completions for the text left of the cursor in ``path``."""
        trigger = detect_trigger(line_prefix)
        if trigger is None:
            return []

        if trigger.kind == TriggerKind.PROPERTY:
            items = property_items(self.knowledge, trigger.object_name or "")
            if not items:
                logger.debug("No properties known for %r", trigger.object_name)
            return items

        result = self.orchestrator.resolve_file(path, token=token)
        if result.cancelled:
            return []
        ranked = rank_objects(self.context_map, result.contexts, result.category)
        return object_items(self.knowledge, ranked)
