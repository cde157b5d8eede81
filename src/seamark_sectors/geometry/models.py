"""Input node and output records of the geometry emitter."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class SeamarkNode:
    """A point feature carrying ``seamark:*`` tags."""

    id: int
    lat: float
    lon: float
    timestamp: datetime | None = None
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def seamark_type(self) -> str | None:
        """Value of ``seamark:type``; ``None`` if the node is not a seamark."""
        return self.tags.get("seamark:type")


@dataclass
class OutputNode:
    """A generated point."""

    id: int
    lat: float
    lon: float
    timestamp: datetime | None = None
    tags: dict[str, str] = field(default_factory=dict)


@dataclass
class OutputWay:
    """A generated line referencing nodes by identity."""

    id: int
    refs: list[int]
    timestamp: datetime | None = None
    tags: dict[str, str] = field(default_factory=dict)


OutputElement = OutputNode | OutputWay
