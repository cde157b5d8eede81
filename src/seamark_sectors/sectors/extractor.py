"""Tag extraction — turns the ``seamark:light:*`` tags of a node into sectors.

Two key families are recognised:

* global keys ``seamark:light:<name>`` which populate the default sector
  (slot 0), e.g. ``seamark:light:orientation``;
* numbered keys ``seamark:light:<k>:<name>`` which populate sector *k*, e.g.
  ``seamark:light:3:sector_start``.

The extended ``radius`` syntax is a ``;``-separated list of segment
definitions, each either ``radius[:span[:type]]`` or ``radius[:type[:span]]``::

    seamark:light:1:radius = :10;:dashed;:solid:-10
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING

from seamark_sectors.sectors.errors import (
    InvalidTagValue,
    SectorError,
    SectorNumberOutOfRange,
    SegmentOverflow,
    UnknownArcStyle,
    UnknownColour,
)
from seamark_sectors.sectors.models import (
    ArcStyle,
    Category,
    Colour,
    Sector,
    SectorTable,
    Segment,
)

if TYPE_CHECKING:
    from seamark_sectors.config.settings import ProcessingContext

_logger = logging.getLogger(__name__)

KEY_PREFIX = "seamark:light:"
HINT_RADIUS_DIVISOR = 278.0
MAX_BEARING = 720.0      # degrees, either sign
MAX_RADIUS = 1000.0      # nm

_SECTOR_KEY = re.compile(r"(-?\d+)(.*)", re.DOTALL)
_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

def is_number(text: str) -> bool:
    """True if *text* starts with a (possibly negative) decimal number."""
    return _NUMBER.match(text.strip()) is not None


def leading_number(text: str) -> float | None:
    """Return the decimal number *text* starts with, or ``None``."""
    m = _NUMBER.match(text.strip())
    return float(m.group(0)) if m else None


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------

class SectorExtractor:
    """Populate a :class:`SectorTable` from the tags of one node.

    Args:
        context: Processing context supplying the configuration and the
            diagnostic sink.
    """

    def __init__(self, context: ProcessingContext) -> None:
        self._ctx = context
        cfg = context.config

        self._global: dict[str, Callable[[SectorTable, str, str], None]] = {
            "orientation": self._global_orientation,
            "category": self._global_category,
            "colour": self._global_colour,
            "character": self._global_character,
            "period": self._global_period,
            "range": self._global_range,
            "group": self._global_group,
        }
        if cfg.unsectored_radius:
            self._global["radius"] = self._global_radius

        # suffix → handler; a handler returns True if it populated a field
        self._numbered: dict[str, Callable[[Sector, str, str], bool]] = {
            "sector_start": self._sector_start,
            "sector_end": self._sector_end,
            "colour": self._sector_colour,
            "orientation": self._sector_orientation,
            "category": self._sector_category,
            "radius": self._sector_radius if not cfg.extended_radius else self._sector_segments,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(
        self,
        tags: Mapping[str, str] | Iterable[tuple[str, str]],
        node_id: int | None = None,
    ) -> SectorTable:
        """Parse *tags* into a fresh :class:`SectorTable`.

        Offending tags are reported and skipped; all other tags are still
        applied.  ``table.touched`` is the number of sectors marked used.
        """
        table = SectorTable(capacity=self._ctx.config.max_sectors)
        items = tags.items() if isinstance(tags, Mapping) else tags

        for key, value in items:
            try:
                self._apply(table, key, value)
            except SectorError as exc:
                if exc.node_id is None:
                    exc.node_id = node_id
                self._ctx.report(exc)

        return table

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _apply(self, table: SectorTable, key: str, value: str) -> None:
        if not key.startswith(KEY_PREFIX):
            return
        name = key[len(KEY_PREFIX):]

        handler = self._global.get(name)
        if handler is not None:
            handler(table, key, value)
            return

        m = _SECTOR_KEY.fullmatch(name)
        if m is None:
            _logger.debug("ignoring non-sector key %s", key)
            return

        nr = int(m.group(1))
        suffix = m.group(2)
        if nr <= 0 or nr >= table.capacity:
            raise SectorNumberOutOfRange(f"sector number out of range: {nr}", sector_nr=nr)

        if not suffix:
            if self._ctx.config.parse_hints:
                self._renderer_hint(table, nr, key, value)
            return

        handler = self._numbered.get(suffix[1:] if suffix.startswith(":") else suffix)
        if handler is None:
            _logger.debug("ignoring unknown sector key %s", key)
            return

        if handler(table.slot(nr), key, value):
            table.touch(nr)

    def _number(self, key: str, value: str, sector_nr: int | None = None) -> float:
        number = leading_number(value)
        if number is None or not math.isfinite(number):
            raise InvalidTagValue(f"{key}: not a number: {value!r}", sector_nr=sector_nr)
        return number

    def _bearing(self, key: str, value: str, sector_nr: int | None = None) -> float:
        bearing = self._number(key, value, sector_nr)
        if abs(bearing) > MAX_BEARING:
            raise InvalidTagValue(f"{key}: bearing out of range: {value!r}", sector_nr=sector_nr)
        return bearing

    def _radius(self, key: str, value: str, sector_nr: int | None = None) -> float:
        radius = self._number(key, value, sector_nr)
        if abs(radius) > MAX_RADIUS:
            raise InvalidTagValue(f"{key}: radius out of range: {value!r}", sector_nr=sector_nr)
        return radius

    # ------------------------------------------------------------------
    # Global keys (default sector)
    # ------------------------------------------------------------------

    def _global_orientation(self, table: SectorTable, key: str, value: str) -> None:
        table.default.orientation = self._bearing(key, value, 0)
        table.touch(0)

    def _global_category(self, table: SectorTable, key: str, value: str) -> None:
        if value == Category.DIRECTIONAL.value:
            table.default.category = Category.DIRECTIONAL
            table.touch(0)

    def _global_colour(self, table: SectorTable, key: str, value: str) -> None:
        colour = Colour.match(value)
        if colour is None:
            raise UnknownColour(f"unknown colour: {value}", sector_nr=0)
        table.default.colour = colour

    def _global_character(self, table: SectorTable, key: str, value: str) -> None:
        table.default.character.text = value

    def _global_period(self, table: SectorTable, key: str, value: str) -> None:
        table.default.character.period = self._number(key, value, 0)

    def _global_range(self, table: SectorTable, key: str, value: str) -> None:
        table.default.character.range = self._number(key, value, 0)

    def _global_group(self, table: SectorTable, key: str, value: str) -> None:
        table.default.character.group = int(self._number(key, value, 0))

    def _global_radius(self, table: SectorTable, key: str, value: str) -> None:
        table.default.radius = self._radius(key, value, 0)
        table.touch(0)

    # ------------------------------------------------------------------
    # Numbered keys
    # ------------------------------------------------------------------

    def _sector_start(self, sector: Sector, key: str, value: str) -> bool:
        sector.start = self._bearing(key, value, sector.nr)
        return True

    def _sector_end(self, sector: Sector, key: str, value: str) -> bool:
        sector.end = self._bearing(key, value, sector.nr)
        return True

    def _sector_orientation(self, sector: Sector, key: str, value: str) -> bool:
        sector.orientation = self._bearing(key, value, sector.nr)
        return True

    def _sector_category(self, sector: Sector, key: str, value: str) -> bool:
        if value != Category.DIRECTIONAL.value:
            return False
        sector.category = Category.DIRECTIONAL
        return True

    def _sector_colour(self, sector: Sector, key: str, value: str) -> bool:
        tokens = value.split(";", 1)
        colour = Colour.match(tokens[0].strip(), prefix=True)
        if colour is None:
            raise UnknownColour(f"unknown colour: {value}", sector_nr=sector.nr)
        sector.colour = colour

        if len(tokens) > 1 and tokens[1].strip():
            alt = Colour.match(tokens[1].strip(), prefix=True)
            if alt is None:
                raise UnknownColour(f"unknown colour: {tokens[1]}", sector_nr=sector.nr)
            sector.alt_colour = alt
        return True

    def _sector_radius(self, sector: Sector, key: str, value: str) -> bool:
        sector.radius = self._radius(key, value, sector.nr)
        return True

    def _sector_segments(self, sector: Sector, key: str, value: str) -> bool:
        segments = [
            self._parse_segment(sector.nr, key, group)
            for group in value.split(";")
            if group
        ]
        if not segments:
            return False
        limit = self._ctx.config.max_segments
        if len(segments) > limit:
            raise SegmentOverflow(
                f"{key}: {len(segments)} segments exceed capacity {limit}",
                sector_nr=sector.nr,
            )
        sector.segments = segments
        return True

    def _parse_segment(self, nr: int, key: str, group: str) -> Segment:
        """Parse one ``radius[:span[:type]]`` or ``radius[:type[:span]]`` group."""
        tokens = group.split(":")
        segment = Segment()
        if tokens[0]:
            segment.radius = self._radius(key, tokens[0], nr)
        if len(tokens) < 2:
            return segment

        if is_number(tokens[1]):
            segment.span = self._number(key, tokens[1], nr)
            if len(tokens) > 2:
                segment.style = self._arc_style(nr, tokens[2])
        else:
            segment.style = self._arc_style(nr, tokens[1])
            if len(tokens) > 2 and is_number(tokens[2]):
                segment.span = self._number(key, tokens[2], nr)
        return segment

    def _arc_style(self, nr: int, token: str) -> ArcStyle:
        style = ArcStyle.parse(token)
        if style is None:
            self._ctx.report(UnknownArcStyle(f"arc_type unknown: {token}", sector_nr=nr))
            return ArcStyle.SUPPRESS
        return style

    def _renderer_hint(self, table: SectorTable, nr: int, key: str, value: str) -> None:
        """``seamark:light:<k>=<colour>:<start>:<end>:<radius>``; stops at the first missing field."""
        fields = value.split(":")
        sector = table.touch(nr)
        colour = Colour.match(fields[0], prefix=True)
        if colour is not None:
            sector.colour = colour
        if len(fields) > 1:
            sector.start = self._bearing(key, fields[1], nr)
        if len(fields) > 2:
            sector.end = self._bearing(key, fields[2], nr)
        if len(fields) > 3:
            radius = self._number(key, fields[3], nr) / HINT_RADIUS_DIVISOR
            if abs(radius) > MAX_RADIUS:
                raise InvalidTagValue(f"{key}: radius out of range: {value!r}", sector_nr=nr)
            sector.radius = radius
