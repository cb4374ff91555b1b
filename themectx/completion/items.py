"""Editor-facing completion items with markdown documentation."""

from __future__ import annotations

from enum import StrEnum, auto

from pydantic import BaseModel, ConfigDict, Field

from themectx.knowledge.objects import ObjectKnowledgeBase, ObjectProperty

from .ranking import RankedObject, RankTier


class CompletionItemKind(StrEnum):
    """Icon hint for the editor."""

    CLASS = auto()
    STRUCT = auto()
    FIELD = auto()


class CompletionItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    kind: CompletionItemKind
    detail: str = ""
    documentation: str = Field(default="", description="Markdown shown in the fly-out")
    tier: RankTier | None = None
    sort_key: tuple[int, str] = (0, "")

    @property
    def sort_text(self) -> str:
        """Sort key flattened for editors that only sort strings."""
        return f"{self.sort_key[0]}_{self.sort_key[1]}"

    @property
    def is_warning(self) -> bool:
        return self.tier == RankTier.POTENTIAL


def _property_documentation(
    object_name: str, name: str, prop: ObjectProperty, base_link: str
) -> str:
    lines = [
        f"### 🏷️ {name}",
        "---",
        prop.description,
        "",
        "**Usage:**",
        "```liquid",
        f"{{{{ {object_name}.{name} }}}}",
        "```",
    ]
    if prop.mock_value is not None:
        lines += ["", f"Example value: `{prop.mock_value}`"]
    if base_link or prop.link:
        lines += ["", "---", f"[🔗 View Shopify Reference]({base_link}{prop.link})"]
    return "\n".join(lines)


def property_items(knowledge: ObjectKnowledgeBase, object_name: str) -> list[CompletionItem]:
    """Completions for ``object_name.``; an unknown object yields nothing."""
    entry = knowledge.get(object_name)
    if entry is None:
        return []

    items: list[CompletionItem] = []
    for name, prop in entry.properties.items():
        items.append(CompletionItem(
            label=name,
            # Properties that lead to another object get a different icon
            kind=CompletionItemKind.STRUCT if prop.type else CompletionItemKind.FIELD,
            detail=f"(Object: {prop.type})" if prop.type else "(Property)",
            documentation=_property_documentation(object_name, name, prop, entry.link),
            sort_key=(0, name.lower()),
        ))
    return items


def object_items(
    knowledge: ObjectKnowledgeBase, ranked: list[RankedObject]
) -> list[CompletionItem]:
    """One completion per ranked object, in ranking order."""
    items: list[CompletionItem] = []
    for obj in ranked:
        entry = knowledge.get(obj.name)
        lines = [f"## 📦 {obj.name}", "---"]
        if obj.is_warning:
            lines += [f"> ⚠️ {obj.label}", ""]
        if entry is not None:
            lines.append(entry.description)
            if entry.link:
                lines += ["", f"[📚 Open Documentation]({entry.link})"]
        if obj.contexts:
            lines += ["", f"Provided by: {', '.join(obj.contexts)}"]

        items.append(CompletionItem(
            label=obj.name,
            kind=CompletionItemKind.CLASS,
            detail=obj.label,
            documentation="\n".join(lines),
            tier=obj.tier,
            sort_key=obj.sort_key,
        ))
    return items
