"""Sector data models.

A node carries up to ``max_sectors`` light sectors.  Slot 0 is the default
(unnumbered) sector, slots 1..N are the numbered ones.  Each sector owns an
ordered list of segments which is raw after extraction and resolved (absolute,
contiguous bearings) after derivation.

All bearings are in degrees, all radii in nautical miles.  ``None`` means
"not set".
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from enum import Enum


class ArcStyle(Enum):
    """Visual treatment of a segment's arc."""

    UNDEF = "undef"
    SOLID = "solid"
    SUPPRESS = "suppress"
    DASHED = "dashed"
    TAPER_UP = "taper_up"
    TAPER_DOWN = "taper_down"
    TAPER_1 = "taper_1"
    TAPER_2 = "taper_2"
    TAPER_3 = "taper_3"
    TAPER_4 = "taper_4"
    TAPER_5 = "taper_5"
    TAPER_6 = "taper_6"
    TAPER_7 = "taper_7"

    @classmethod
    def parse(cls, text: str) -> ArcStyle | None:
        """Return the first style whose name *text* starts with, or ``None``."""
        for style in cls:
            if text.startswith(style.value):
                return style
        return None

    @property
    def tapering(self) -> bool:
        """True for ``taper_up`` and ``taper_down``."""
        return self in (ArcStyle.TAPER_UP, ArcStyle.TAPER_DOWN)


TAPER_STEPS: tuple[ArcStyle, ...] = (
    ArcStyle.TAPER_1,
    ArcStyle.TAPER_2,
    ArcStyle.TAPER_3,
    ArcStyle.TAPER_4,
    ArcStyle.TAPER_5,
    ArcStyle.TAPER_6,
    ArcStyle.TAPER_7,
)


class Colour(Enum):
    """The fixed light colour palette (order matters for prefix matching)."""

    WHITE = "white"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    BLUE = "blue"
    VIOLET = "violet"
    AMBER = "amber"

    @property
    def abbr(self) -> str:
        """Chart abbreviation, e.g. ``"W"`` or ``"Or"``."""
        return _COLOUR_ABBR[self]

    @classmethod
    def match(cls, text: str, prefix: bool = False) -> Colour | None:
        """Look up *text* in the palette (case-sensitive).

        With *prefix* the first colour *text* starts with is returned, so
        ``"red;white"`` matches :attr:`RED`.
        """
        for colour in cls:
            if text == colour.value or (prefix and text.startswith(colour.value)):
                return colour
        return None


_COLOUR_ABBR = {
    Colour.WHITE: "W",
    Colour.RED: "R",
    Colour.GREEN: "G",
    Colour.YELLOW: "Y",
    Colour.ORANGE: "Or",
    Colour.BLUE: "Bu",
    Colour.VIOLET: "Vi",
    Colour.AMBER: "Am",
}


class Category(Enum):
    PLAIN = "plain"
    DIRECTIONAL = "directional"


@dataclass
class LightCharacter:
    """Light character attributes taken from the global tags of a node."""

    text: str = ""
    """Raw ``seamark:light:character`` value, e.g. ``"Fl"``."""

    group: int | None = None
    period: float | None = None
    """Period in seconds."""

    range: float | None = None
    """Nominal range in nautical miles."""


@dataclass
class Segment:
    """A contiguous angular part of a sector with its own radius and style.

    Raw segments (straight from the ``radius`` tag) only carry ``span``,
    ``radius`` and ``style``; ``start``/``end`` are filled in by the deriver.
    """

    start: float | None = None
    end: float | None = None

    span: float | None = None
    """Angular width.  Negative means "measured backward from the sector end"."""

    radius: float | None = None
    colour: Colour | None = None
    style: ArcStyle = ArcStyle.UNDEF

    start_radial: bool = False
    """Draw a radial line at ``start``."""

    end_radial: bool = False
    """Draw a radial line at ``end``."""


@dataclass
class Sector:
    """One bearing-defined light sector of a node."""

    nr: int = 0
    used: bool = False
    start: float | None = None
    end: float | None = None

    orientation: float | None = None
    """Bearing of a directional light."""

    category: Category = Category.PLAIN
    colour: Colour = Colour.WHITE
    alt_colour: Colour | None = None
    """Secondary colour, rendered as offset arcs."""

    character: LightCharacter = field(default_factory=LightCharacter)
    radius: float | None = None
    """Scalar radius (simple radius tag or renderer hint)."""

    start_space: float | None = None
    """Angular gap to the previous sector (set by the validator)."""

    end_space: float | None = None
    """Angular gap to the next sector (set by the validator)."""

    mean: float | None = None
    segments: list[Segment] = field(default_factory=list)
    resolved: bool = False
    """True once the deriver has turned ``segments`` into absolute bearings."""

    @property
    def directional(self) -> bool:
        return self.category is Category.DIRECTIONAL

    @property
    def span(self) -> float:
        return self.end - self.start

    @property
    def full_circle(self) -> bool:
        return self.span >= 360.0

    def evolve(self, **changes) -> Sector:
        """Return a copy with *changes* applied; segments are copied too."""
        changes.setdefault("segments", [copy.copy(s) for s in self.segments])
        return replace(self, **changes)


@dataclass
class SectorTable:
    """Bounded collection of sector slots for one node.

    Slots are created on first access.  Slot 0 (the default sector) always
    exists.
    """

    capacity: int
    slots: dict[int, Sector] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.slot(0)

    def slot(self, nr: int) -> Sector:
        """Return sector *nr*, creating an empty one if necessary."""
        if not 0 <= nr < self.capacity:
            raise IndexError(f"sector slot {nr} outside [0, {self.capacity})")
        if nr not in self.slots:
            self.slots[nr] = Sector(nr=nr)
        return self.slots[nr]

    def touch(self, nr: int) -> Sector:
        """Return sector *nr* and mark it used."""
        sector = self.slot(nr)
        sector.used = True
        return sector

    @property
    def default(self) -> Sector:
        return self.slots[0]

    def used(self) -> list[Sector]:
        """Used sectors ordered by sector number."""
        return [self.slots[nr] for nr in sorted(self.slots) if self.slots[nr].used]

    @property
    def touched(self) -> int:
        """Number of distinct sector numbers marked used."""
        return len(self.used())
