"""FeatureProcessor — runs Extractor → Validator → Deriver → Emitter for one node."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from seamark_sectors.config.settings import ProcessingContext
from seamark_sectors.geometry.emitter import GeometryEmitter
from seamark_sectors.geometry.models import OutputElement, SeamarkNode
from seamark_sectors.sectors.deriver import SegmentDeriver
from seamark_sectors.sectors.errors import SectorError
from seamark_sectors.sectors.extractor import SectorExtractor
from seamark_sectors.sectors.models import Sector
from seamark_sectors.sectors.validator import SectorValidator

_logger = logging.getLogger(__name__)


@dataclass
class FeatureResult:
    """Outcome of processing one node."""

    node: SeamarkNode

    sectors: list[Sector] = field(default_factory=list)
    """Resolved sectors in emission order (empty when sectors are not rendered)."""

    elements: list[OutputElement] = field(default_factory=list)
    """Generated nodes and ways in output order."""


class FeatureProcessor:
    """Process seamark nodes one at a time.

    Args:
        context: Shared processing context; a default one is created if omitted.
            The same context must be reused for a whole run so that generated
            identities stay unique.
    """

    def __init__(self, context: ProcessingContext | None = None) -> None:
        self.context = context or ProcessingContext()
        self._extractor = SectorExtractor(self.context)
        self._validator = SectorValidator(self.context)
        self._deriver = SegmentDeriver(self.context)
        self._emitter = GeometryEmitter(self.context)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process(self, node: SeamarkNode) -> FeatureResult:
        """Generate sector geometry (and the light character node) for *node*.

        Nodes without a ``seamark:type`` tag yield an empty result.  Errors are
        reported to the context and only drop the offending tag or sector.
        """
        result = FeatureResult(node=node)
        if node.seamark_type is None:
            return result

        cfg = self.context.config
        table = self._extractor.extract(node.tags, node_id=node.id)

        if cfg.light_character:
            label = self._emitter.emit_light_character(node, table.default)
            if label is not None:
                result.elements.append(label)

        if not table.touched or not cfg.render_sectors:
            return result

        for sector in self._validator.validate(table, node_id=node.id):
            try:
                resolved = self._deriver.derive(sector)
            except SectorError as exc:
                exc.node_id = node.id
                self.context.report(exc)
                continue
            result.sectors.append(resolved)
            result.elements.extend(self._emitter.emit_sector(node, resolved))

        _logger.debug(
            "node %d: %d sectors, %d elements",
            node.id, len(result.sectors), len(result.elements),
        )
        return result
