"""Sector validation — normalise, drop inconsistent sectors, order by bearing.

Output sectors satisfy ``start <= end`` (wrap-corrected by whole turns), are sorted
by their mean bearing, and carry the angular gap to their neighbours in
``start_space``/``end_space``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import TYPE_CHECKING

from seamark_sectors.sectors.errors import (
    DeprecatedSectorDefinition,
    IncompleteDirectionalDefinition,
    MissingBearing,
    SectorError,
)
from seamark_sectors.sectors.models import Sector, SectorTable

if TYPE_CHECKING:
    from seamark_sectors.config.settings import ProcessingContext


class SectorValidator:
    """Validate the used sectors of one node.

    Args:
        context: Processing context (``untagged_circle`` option, diagnostics).
    """

    def __init__(self, context: ProcessingContext) -> None:
        self._ctx = context

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate(
        self,
        sectors: SectorTable | Iterable[Sector],
        node_id: int | None = None,
    ) -> list[Sector]:
        """Return the valid sectors as new records, sorted by mean bearing.

        Args:
            sectors: Extraction result, or an iterable of sectors (e.g. the
                output of a previous validation).
            node_id: Owning node, used in diagnostics only.
        """
        candidates = sectors.used() if isinstance(sectors, SectorTable) else [
            s for s in sectors if s.used
        ]
        default_orientation = next(
            (s.orientation for s in candidates if s.nr == 0), None
        )

        valid: list[Sector] = []
        for sector in candidates:
            try:
                valid.append(self._normalize(sector, default_orientation))
            except SectorError as exc:
                exc.node_id = node_id
                self._ctx.report(exc)

        valid.sort(key=lambda s: s.mean)
        self._compute_spacing(valid)
        return valid

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _normalize(self, sector: Sector, default_orientation: float | None) -> Sector:
        """Apply the validity rules to one sector; raise if it must be dropped."""
        nr = sector.nr
        start, end = sector.start, sector.end

        if (
            nr != 0
            and start is not None
            and start == end
            and start == default_orientation
        ):
            raise DeprecatedSectorDefinition(
                f"deprecated feature: {nr}:sector_start == {nr}:sector_end == orientation",
                sector_nr=nr,
            )

        if (sector.orientation is not None) != sector.directional:
            raise IncompleteDirectionalDefinition(
                "incomplete definition of directional light", sector_nr=nr
            )

        if start is None and end is None:
            if sector.directional:
                start = end = sector.orientation
            elif self._ctx.config.untagged_circle:
                start, end = 0.0, 360.0
            else:
                raise MissingBearing("sector seems to lack start/end angle", sector_nr=nr)
        elif start is None or end is None:
            raise MissingBearing("sector has either no start or no end angle", sector_nr=nr)

        if start > end:
            end += 360.0 * math.ceil((start - end) / 360.0)

        return sector.evolve(start=start, end=end, mean=(start + end) / 2)

    @staticmethod
    def _compute_spacing(sectors: list[Sector]) -> None:
        """Set the circular gap between each sector and its successor."""
        n = len(sectors)
        for i, sector in enumerate(sectors):
            following = sectors[(i + 1) % n]
            gap = following.start - sector.end
            if i == n - 1:
                gap += 360.0
            sector.end_space = gap
            following.start_space = gap
