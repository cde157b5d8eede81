"""Geometry emission — resolved sectors to OSM-style nodes and ways.

Per segment the emitter produces, in this order:

1. the start point (+ a radial way from the light if ``start_radial``);
2. a radial connector to the previous segment if the radius changes;
3. the end point (+ a radial way if ``end_radial``);
4. the arc points and the arc way, unless the style is ``suppress`` or the
   radius is zero.

Radials are never drawn for full-circle sectors.  A sector with a secondary
colour is emitted four more times with shrinking radii and no radials; those
arcs are tagged ``seamark:light_arc_al<k>``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from seamark_sectors.geometry.models import OutputElement, OutputNode, OutputWay, SeamarkNode
from seamark_sectors.geometry.projection import arc_bearings, arc_step, project
from seamark_sectors.sectors.models import ArcStyle, Sector, Segment

if TYPE_CHECKING:
    from seamark_sectors.config.settings import ProcessingContext

ALT_RADIUS_OFFSETS: tuple[float, ...] = (0.003, 0.0035, 0.009, 0.005)


def light_character_label(sector: Sector) -> str:
    """Combined light character, e.g. ``"Fl(2)W. 10s 15M"``.

    Each part is included only if its source attribute is set; the colour
    abbreviation only together with a character text.
    """
    lc = sector.character
    label = lc.text
    if lc.group:
        label += f"({lc.group})"
    if lc.text:
        label += f"{'' if lc.group else ' '}{sector.colour.abbr}."
    if lc.period:
        label += f" {lc.period:g}s"
    if lc.range:
        label += f" {lc.range:g}M"
    return label


class GeometryEmitter:
    """Project resolved sectors around their node.

    Args:
        context: Processing context (arc spacing settings, identity allocator).
    """

    def __init__(self, context: ProcessingContext) -> None:
        self._ctx = context
        self._cfg = context.config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def emit_sector(self, node: SeamarkNode, sector: Sector) -> list[OutputElement]:
        """Return all nodes and ways of one resolved sector."""
        elements = self._emit_pass(node, sector, sector.segments, alternate=0)

        if sector.alt_colour is not None:
            segments = [
                replace(s, start_radial=False, end_radial=False) for s in sector.segments
            ]
            for k, offset in enumerate(ALT_RADIUS_OFFSETS, start=1):
                segments = [replace(s, radius=s.radius - offset) for s in segments]
                elements.extend(self._emit_pass(node, sector, segments, alternate=k))

        return elements

    def emit_light_character(self, node: SeamarkNode, sector: Sector) -> OutputNode | None:
        """Return the ``seamark:light_character`` annotation node, or ``None`` if empty."""
        label = light_character_label(sector)
        if not label:
            return None
        return OutputNode(
            id=self._ctx.next_id(),
            lat=node.lat,
            lon=node.lon,
            timestamp=node.timestamp,
            tags={"seamark:type": "virtual", "seamark:light_character": label},
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _emit_pass(
        self,
        node: SeamarkNode,
        sector: Sector,
        segments: list[Segment],
        alternate: int,
    ) -> list[OutputElement]:
        elements: list[OutputElement] = []
        radials = not sector.full_circle
        prev: Segment | None = None
        prev_end: OutputNode | None = None

        for seg in segments:
            start = self._point(node, seg.radius, seg.start)
            elements.append(start)
            if seg.start_radial and radials:
                elements.append(self._radial(node, sector, node.id, start.id))

            if (
                prev is not None
                and seg.radius != prev.radius
                and seg.style is not ArcStyle.SUPPRESS
                and prev.style is not ArcStyle.SUPPRESS
            ):
                elements.append(self._radial(node, sector, prev_end.id, start.id))

            end = self._point(node, seg.radius, seg.end)
            elements.append(end)
            if seg.end_radial and radials:
                elements.append(self._radial(node, sector, node.id, end.id))

            prev, prev_end = seg, end

            if seg.style is ArcStyle.SUPPRESS or seg.radius == 0:
                continue
            elements.extend(self._arc(node, sector, seg, start, end, alternate))

        return elements

    def _point(self, node: SeamarkNode, radius: float, bearing: float) -> OutputNode:
        lat, lon = project(node.lat, node.lon, radius, bearing)
        return OutputNode(id=self._ctx.next_id(), lat=lat, lon=lon, timestamp=node.timestamp)

    def _radial(self, node: SeamarkNode, sector: Sector, a: int, b: int) -> OutputWay:
        return OutputWay(
            id=self._ctx.next_id(),
            refs=[a, b],
            timestamp=node.timestamp,
            tags={
                "seamark:light_radial": str(sector.nr),
                "seamark:light:object": node.seamark_type or "",
            },
        )

    def _arc(
        self,
        node: SeamarkNode,
        sector: Sector,
        seg: Segment,
        start: OutputNode,
        end: OutputNode,
        alternate: int,
    ) -> list[OutputElement]:
        step = arc_step(seg.radius, self._cfg.arc_max, self._cfg.arc_div)
        points = [
            self._point(node, seg.radius, bearing)
            for bearing in arc_bearings(seg.start, seg.end, step)
        ]

        tags = {
            "seamark:light:sector_nr": str(sector.nr),
            "seamark:light:object": node.seamark_type or "",
            "seamark:arc_style": seg.style.value,
        }
        if alternate:
            tags[f"seamark:light_arc_al{alternate}"] = sector.alt_colour.value
        else:
            tags["seamark:light_arc"] = (seg.colour or sector.colour).value

        way = OutputWay(
            id=self._ctx.next_id(),
            refs=[start.id, *(p.id for p in points), end.id],
            timestamp=node.timestamp,
            tags=tags,
        )
        return [*points, way]
