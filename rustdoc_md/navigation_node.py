"""Data model for navigation trees."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

CATEGORY = "category"
DOC = "doc"


@dataclass
class NavigationNode:
    """One sidebar entry: a module grouping node or a link to a document."""

    label: str
    kind: str  # category/doc
    path: str | None = None  # href of the document, or of the module overview
    collapsed: bool = False
    children: list["NavigationNode"] = field(default_factory=list)
    module_path: tuple[str, ...] = ()
    doc_id: str | None = None  # output file relative to the output root, no suffix

    def walk(self) -> Iterator["NavigationNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def count(self, kind: str) -> int:
        return sum(1 for node in self.walk() if node.kind == kind)

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the sidebar shape static site generators read."""
        if self.kind == DOC:
            return {
                "type": DOC,
                "id": self.doc_id,
                "label": self.label,
                "href": self.path,
            }
        out: dict[str, Any] = {
            "type": CATEGORY,
            "label": self.label,
            "collapsed": self.collapsed,
        }
        if self.path:
            out["href"] = self.path
        out["items"] = [child.to_dict() for child in self.children]
        return out
