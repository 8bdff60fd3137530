"""Normalised view over Atlassian Document Format (ADF) nodes."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

# Children below this depth are dropped while parsing.
MAX_DEPTH = 100


@dataclass(frozen=True)
class DocumentNode:
    """A single ADF node with malformed fields coerced to empty values."""

    type: str
    content: Tuple["DocumentNode", ...] = ()
    text: str = ""
    attrs: Dict[str, Any] = field(default_factory=dict)

    def attr(self, name: str, default: Any = None) -> Any:
        value = self.attrs.get(name)
        return default if value is None else value

    def attr_text(self, name: str) -> str:
        """Return ``attrs[name]`` when it is a string, else ``""``."""

        value = self.attrs.get(name)
        return value if isinstance(value, str) else ""


def parse_node(raw: Any, *, depth: int = 0) -> Optional[DocumentNode]:
    """Build a :class:`DocumentNode` from decoded JSON.

    Returns ``None`` when ``raw`` is not a mapping. A missing or non-string
    ``type`` yields a node with an empty type, which renders to nothing.
    Children that are not mappings are skipped, as are all children of a
    node nested deeper than :data:`MAX_DEPTH`.
    """

    if not isinstance(raw, Mapping):
        return None

    node_type = raw.get("type")
    if not isinstance(node_type, str):
        node_type = ""

    children = raw.get("content")
    content: Tuple[DocumentNode, ...] = ()
    if isinstance(children, (list, tuple)) and depth < MAX_DEPTH:
        parsed = [parse_node(item, depth=depth + 1) for item in children]
        content = tuple(child for child in parsed if child is not None)

    text = raw.get("text")
    attrs = raw.get("attrs")
    return DocumentNode(
        type=node_type,
        content=content,
        text=text if isinstance(text, str) else "",
        attrs=dict(attrs) if isinstance(attrs, Mapping) else {},
    )


__all__ = ["MAX_DEPTH", "DocumentNode", "parse_node"]
