"""Light sector extraction, validation and segment derivation."""

from seamark_sectors.sectors.deriver import SegmentDeriver
from seamark_sectors.sectors.errors import (
    DeprecatedSectorDefinition,
    IncompleteDirectionalDefinition,
    InvalidSegmentAngle,
    InvalidTagValue,
    MissingBearing,
    SectorError,
    SectorNumberOutOfRange,
    SegmentOverflow,
    UnknownArcStyle,
    UnknownColour,
)
from seamark_sectors.sectors.extractor import SectorExtractor
from seamark_sectors.sectors.models import (
    ArcStyle,
    Category,
    Colour,
    LightCharacter,
    Sector,
    SectorTable,
    Segment,
)
from seamark_sectors.sectors.validator import SectorValidator

__all__ = [
    "ArcStyle",
    "Category",
    "Colour",
    "DeprecatedSectorDefinition",
    "IncompleteDirectionalDefinition",
    "InvalidSegmentAngle",
    "InvalidTagValue",
    "LightCharacter",
    "MissingBearing",
    "Sector",
    "SectorError",
    "SectorExtractor",
    "SectorNumberOutOfRange",
    "SectorTable",
    "SectorValidator",
    "Segment",
    "SegmentDeriver",
    "SegmentOverflow",
    "UnknownArcStyle",
    "UnknownColour",
]
