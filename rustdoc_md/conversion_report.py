"""Logic for collecting and writing per-run conversion diagnostics."""

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from rustdoc_md.errors import OutputWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionMiss:
    """A reference to an identifier found in neither index."""

    item_id: str
    title: str


@dataclass(frozen=True)
class UnsupportedPayload:
    """An item rendered as a placeholder because its kind is unknown."""

    item_id: str
    tag: str


@dataclass(frozen=True)
class CollisionConflict:
    """A set of items whose output names clashed, and how they were renamed."""

    directory: str
    name: str
    resolved: dict[str, str]  # item id -> final file or anchor name


class ConversionReport:
    """Collects recoverable per-item problems of one conversion run."""

    def __init__(self, config_hash: str = "", format_version: int = 0) -> None:
        """Initialize the report with metadata."""
        self.config_hash = config_hash
        self.format_version = format_version
        self.misses: dict[str, ResolutionMiss] = {}
        self.unsupported: list[UnsupportedPayload] = []
        self.collisions: list[CollisionConflict] = []
        self.start_time = time.time()
        self._warned_tags: set[str] = set()

    def add_miss(self, item_id: str, title: str) -> None:
        if item_id not in self.misses:
            logger.debug("Unresolved reference to %s (%s)", item_id, title)
            self.misses[item_id] = ResolutionMiss(item_id, title)

    def add_unsupported(self, item_id: str, tag: str) -> None:
        if tag not in self._warned_tags:
            self._warned_tags.add(tag)
            logger.warning("Unsupported item kind %r rendered as placeholder", tag)
        if not any(u.item_id == item_id for u in self.unsupported):
            self.unsupported.append(UnsupportedPayload(item_id, tag))

    def add_collision(
        self, directory: str, name: str, resolved: dict[str, str]
    ) -> None:
        logger.warning(
            "Name collision for %s in %s resolved as %s",
            name,
            directory or "/",
            ", ".join(sorted(resolved.values())),
        )
        self.collisions.append(CollisionConflict(directory, name, dict(resolved)))

    def summary_line(self) -> str:
        return (
            f"{len(self.misses)} unresolved references, "
            f"{len(self.unsupported)} unsupported items, "
            f"{len(self.collisions)} name collisions"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": {
                "timestamp": time.time(),
                "duration": time.time() - self.start_time,
                "config_hash": self.config_hash,
                "format_version": self.format_version,
            },
            "misses": [asdict(m) for _, m in sorted(self.misses.items())],
            "unsupported": [asdict(u) for u in self.unsupported],
            "collisions": [asdict(c) for c in self.collisions],
            "stats": {
                "misses": len(self.misses),
                "unsupported": len(self.unsupported),
                "collisions": len(self.collisions),
            },
        }

    def generate_report(self, path: str | Path) -> None:
        """Write the report to a JSON file."""
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            raise OutputWriteError(target, str(e)) from e
