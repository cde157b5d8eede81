"""Processing configuration and the per-run processing context.

The configuration is read-only for the duration of a run.  The context owns
the only state that crosses feature boundaries: the identity allocator and
the list of diagnostics reported so far.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

from seamark_sectors.sectors.errors import SectorError

_logger = logging.getLogger(__name__)

ARC_MAX = 0.1        # nm between two arc points
ARC_DIV = 8.0        # radius / ARC_DIV = distance between arc points
SEC_RADIUS = 0.2     # nm
DIR_ARC = 2.0        # degrees (+/-) for directional lights
MAX_SECTORS = 32
MAX_SEGMENTS = 16

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})

# field name → environment variable
_ENV_MAP: tuple[tuple[str, str], ...] = (
    ("arc_max",           "SEAMARK_ARC_MAX"),
    ("dir_arc",           "SEAMARK_DIR_ARC"),
    ("light_character",   "SEAMARK_LIGHT_CHARACTER"),
    ("arc_div",           "SEAMARK_ARC_DIV"),
    ("parse_hints",       "SEAMARK_PARSE_HINTS"),
    ("first_id",          "SEAMARK_FIRST_ID"),
    ("sector_radius",     "SEAMARK_SECTOR_RADIUS"),
    ("render_sectors",    "SEAMARK_RENDER_SECTORS"),
    ("untagged_circle",   "SEAMARK_UNTAGGED_CIRCLE"),
    ("extended_radius",   "SEAMARK_EXTENDED_RADIUS"),
    ("unsectored_radius", "SEAMARK_UNSECTORED_RADIUS"),
)


@dataclass(frozen=True)
class ProcessingConfig:
    """Knobs of the sector pipeline.

    Raises:
        ValueError: If ``arc_div``, ``sector_radius`` or ``dir_arc`` is not
            strictly positive.
    """

    arc_max: float = ARC_MAX
    """Maximum distance between two arc points in nautical miles (0 = unlimited)."""

    dir_arc: float = DIR_ARC
    """Default half-angle of directional lights in degrees."""

    light_character: bool = False
    """Generate a ``seamark:light_character`` annotation node."""

    arc_div: float = ARC_DIV
    """Arc point-density divisor."""

    parse_hints: bool = False
    """Parse the renderer-hint tag ``seamark:light:<k>=<col>:<start>:<end>:<r>``."""

    first_id: int = -1
    """First identity handed out for generated nodes and ways."""

    sector_radius: float = SEC_RADIUS
    """Default sector radius in nautical miles."""

    render_sectors: bool = True
    """Generate sector geometry."""

    untagged_circle: bool = False
    """Render a full circle for sectors that have neither start nor end bearing."""

    extended_radius: bool = True
    """Parse ``radius`` as a list of ``radius[:span[:type]]`` segment definitions."""

    unsectored_radius: bool = False
    """Honour the global ``seamark:light:radius`` tag on the default sector."""

    max_sectors: int = MAX_SECTORS
    max_segments: int = MAX_SEGMENTS

    def __post_init__(self) -> None:
        if self.arc_div <= 0 or self.sector_radius <= 0 or self.dir_arc <= 0:
            raise ValueError(
                "illegal parameters: arc_div, sector_radius and dir_arc must be > 0 "
                f"(got {self.arc_div}, {self.sector_radius}, {self.dir_arc})"
            )
        if self.max_sectors < 1 or self.max_segments < 2:
            raise ValueError("illegal parameters: sector/segment capacity too small")
        values = (self.arc_max, self.dir_arc, self.arc_div, self.sector_radius)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"illegal parameters: non-finite value in {values}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> ProcessingConfig:
        """Build a config from ``SEAMARK_*`` environment variables.

        Keyword *overrides* win over the environment.
        """
        env = os.environ if environ is None else environ
        types = {f.name: f.type for f in fields(cls)}
        kwargs: dict = {}
        for name, var in _ENV_MAP:
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            kwargs[name] = _convert(raw, types[name], var)
        kwargs.update(overrides)
        return cls(**kwargs)


def _convert(raw: str, type_name: str, var: str):
    """Convert an environment string to the annotated field type."""
    try:
        if type_name == "bool":
            return raw.strip().lower() in _TRUE_VALUES
        if type_name == "int":
            return int(raw)
        return float(raw)
    except ValueError:
        raise ValueError(f"{var}: cannot convert {raw!r} to {type_name}") from None


class ProcessingContext:
    """State shared by all pipeline stages for one run.

    Args:
        config: Read-only configuration; defaults to :class:`ProcessingConfig`.
    """

    def __init__(self, config: ProcessingConfig | None = None) -> None:
        self.config = config or ProcessingConfig()
        self._next_id = self.config.first_id
        self.diagnostics: list[SectorError] = []

    def next_id(self) -> int:
        """Return a fresh identity; identities decrease monotonically and are never reused."""
        ident = self._next_id
        self._next_id -= 1
        return ident

    @property
    def peek_id(self) -> int:
        """The identity the next call to :meth:`next_id` will return."""
        return self._next_id

    def report(self, error: SectorError) -> None:
        """Record a non-fatal diagnostic and log it at WARNING level."""
        self.diagnostics.append(error)
        _logger.warning("%s: %s", type(error).__name__, error)
