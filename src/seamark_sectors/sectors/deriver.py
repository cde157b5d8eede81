"""Segment derivation — resolve a validated sector into contiguous segments.

Example for a sector 100°–200°::

    radius = :10;:dashed;:solid:-10   →   100–110 solid, 110–190 dashed, 190–200 solid
    radius = :-10:dashed              →   100–190 solid, 190–200 dashed

After derivation the first segment starts at ``sector.start``, the last ends at
``sector.end`` and ``segments[i].end == segments[i + 1].start`` for all *i*.
"""

from __future__ import annotations

import copy
from dataclasses import replace
from typing import TYPE_CHECKING

from seamark_sectors.sectors.errors import InvalidSegmentAngle, SegmentOverflow
from seamark_sectors.sectors.models import TAPER_STEPS, ArcStyle, Sector, Segment

if TYPE_CHECKING:
    from seamark_sectors.config.settings import ProcessingContext

TAPER_SEGMENTS = len(TAPER_STEPS)


class SegmentDeriver:
    """Turn the raw segment list of a sector into resolved segments.

    Args:
        context: Processing context (default radius, directional half-angle,
            segment capacity).
    """

    def __init__(self, context: ProcessingContext) -> None:
        self._cfg = context.config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def derive(self, sector: Sector) -> Sector:
        """Return a copy of *sector* with resolved ``segments``.

        A sector that is already resolved is returned unchanged.

        Raises:
            InvalidSegmentAngle: A negative span appears on a segment other
                than the last one.
            SegmentOverflow: Tapering expansion exceeds the segment capacity.
        """
        if sector.resolved:
            return sector

        if sector.directional:
            segments = self._directional(sector)
        elif not sector.segments:
            segments = [self._whole(sector)]
        else:
            segments = self._expand_tapers(sector, self._resolve(sector))
            last = segments[-1]
            last.end = sector.end
            last.span = last.end - last.start
            last.end_radial = True

        return sector.evolve(segments=segments, resolved=True)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _base_radius(self, sector: Sector) -> float:
        """Radius of the first segment: explicit, else sector radius, else default."""
        radius = sector.segments[0].radius if sector.segments else None
        if radius is None:
            radius = sector.radius
        if radius is None or radius < 0:
            radius = self._cfg.sector_radius
        return radius

    def _half_angle(self, space: float | None) -> float:
        """Directional half-angle bounded by half the gap to the neighbour."""
        if space is None or space < 0:
            return self._cfg.dir_arc
        return min(self._cfg.dir_arc, space / 2)

    def _whole(self, sector: Sector) -> Segment:
        radial = not sector.full_circle
        return Segment(
            start=sector.start,
            end=sector.end,
            span=sector.span,
            radius=self._base_radius(sector),
            colour=sector.colour,
            style=ArcStyle.SOLID,
            start_radial=radial,
            end_radial=radial,
        )

    def _directional(self, sector: Sector) -> list[Segment]:
        """Two solid segments meeting at the orientation, separated by a radial."""
        bearing = sector.orientation
        radius = self._base_radius(sector)
        before = self._half_angle(sector.start_space)
        after = self._half_angle(sector.end_space)
        return [
            Segment(
                start=bearing - before,
                end=bearing,
                span=before,
                radius=radius,
                colour=sector.colour,
                style=ArcStyle.SOLID,
                end_radial=True,
            ),
            Segment(
                start=bearing,
                end=bearing + after,
                span=after,
                radius=radius,
                colour=sector.colour,
                style=ArcStyle.SOLID,
            ),
        ]

    def _resolve(self, sector: Sector) -> list[Segment]:
        """Assign absolute bearings, inherited radius/colour/style to raw segments."""
        segments = [copy.copy(s) for s in sector.segments]
        total = sector.span

        first = segments[0]
        first.radius = self._base_radius(sector)
        if first.span is None:
            first.span = total
        elif first.span < 0:
            if len(segments) > 1:
                raise InvalidSegmentAngle(
                    "negative angle definition is just allowed in last segment",
                    sector_nr=sector.nr,
                )
            back = max(first.span, -total)
            segments.append(Segment(span=back, style=first.style))
            first.span = total + back
            first.style = ArcStyle.SOLID

        first.span = min(first.span, total)
        first.start = sector.start
        first.end = sector.start + first.span
        first.colour = sector.colour
        first.start_radial = True
        if first.style is ArcStyle.UNDEF:
            first.style = ArcStyle.SOLID

        for i in range(1, len(segments)):
            prev, seg = segments[i - 1], segments[i]
            if seg.radius is None:
                seg.radius = prev.radius
            if seg.style is ArcStyle.UNDEF:
                seg.style = prev.style
            seg.colour = prev.colour

            if seg.span is None:
                seg.start = prev.end
                seg.end = sector.end
            elif seg.span < 0:
                if i != len(segments) - 1:
                    raise InvalidSegmentAngle(
                        "negative angle definition is just allowed in last segment",
                        sector_nr=sector.nr,
                    )
                # the predecessor may shrink, but not past its own start
                back = max(seg.span, -total, prev.start - sector.end)
                prev.end = sector.end + back
                prev.span = prev.end - prev.start
                seg.start = prev.end
                seg.end = sector.end
            else:
                seg.start = prev.end
                seg.end = seg.start + min(seg.span, sector.end - prev.end)
            seg.span = seg.end - seg.start

        return segments

    def _expand_tapers(self, sector: Sector, segments: list[Segment]) -> list[Segment]:
        """Split every taper_up/taper_down segment into seven graded sub-segments."""
        limit = self._cfg.max_segments
        count = len(segments)
        expanded: list[Segment] = []

        for seg in segments:
            if not seg.style.tapering:
                expanded.append(seg)
                continue
            if count + TAPER_SEGMENTS - 1 > limit:
                raise SegmentOverflow(
                    f"tapering would exceed {limit} segments", sector_nr=sector.nr
                )
            count += TAPER_SEGMENTS - 1

            steps = TAPER_STEPS if seg.style is ArcStyle.TAPER_UP else TAPER_STEPS[::-1]
            width = (seg.end - seg.start) / TAPER_SEGMENTS
            start = seg.start
            for j, style in enumerate(steps):
                last = j == TAPER_SEGMENTS - 1
                end = seg.end if last else start + width
                expanded.append(replace(
                    seg,
                    start=start,
                    end=end,
                    span=end - start,
                    style=style,
                    start_radial=seg.start_radial and j == 0,
                    end_radial=seg.end_radial and last,
                ))
                start = end

        return expanded
