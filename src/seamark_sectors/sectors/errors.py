"""Non-fatal sector diagnostics.

Every error is scoped to a single tag, sector or segment.  Pipeline stages
raise them internally and hand them to
:meth:`~seamark_sectors.config.settings.ProcessingContext.report`, so none of
them ever aborts the processing of a whole feature.
"""

from __future__ import annotations


class SectorError(Exception):
    """Base class of all sector diagnostics.

    Args:
        message: Human readable description.
        sector_nr: Number of the offending sector, if known.
        node_id: Identity of the owning node, if known.
    """

    def __init__(
        self,
        message: str,
        sector_nr: int | None = None,
        node_id: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.sector_nr = sector_nr
        self.node_id = node_id

    def __str__(self) -> str:
        where = []
        if self.sector_nr is not None:
            where.append(f"sector {self.sector_nr}")
        if self.node_id is not None:
            where.append(f"node {self.node_id}")
        if where:
            return f"{self.message} ({', '.join(where)})"
        return self.message


class UnknownColour(SectorError):
    """Colour token not in the palette."""


class SectorNumberOutOfRange(SectorError):
    """Sector number <= 0 or >= capacity."""


class IncompleteDirectionalDefinition(SectorError):
    """Orientation without directional category, or the other way round."""


class MissingBearing(SectorError):
    """Start and/or end bearing missing and not recoverable."""


class DeprecatedSectorDefinition(SectorError):
    """Zero-width sector at the orientation of the default sector."""


class InvalidSegmentAngle(SectorError):
    """Negative span on a segment other than the last one."""


class SegmentOverflow(SectorError):
    """Segment list would exceed its capacity."""


class UnknownArcStyle(SectorError):
    """Arc style token not recognised; the segment falls back to ``suppress``."""


class InvalidTagValue(SectorError):
    """Numeric tag value that does not start with a number."""
