"""SeamarkFilter — copy an OSM document and append generated sector geometry.

Every input element is written unchanged.  Directly after each seamark node
the nodes and ways generated for it follow.  A seamark node without usable
coordinates is copied and logged but gets no geometry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import chain

from lxml import etree

from seamark_sectors.osm.reader import OsmReader, parse_node
from seamark_sectors.osm.writer import to_element
from seamark_sectors.pipeline.processor import FeatureProcessor

_logger = logging.getLogger(__name__)

_DEFAULT_ROOT = {"version": "0.6", "generator": "seamark_sectors"}


@dataclass
class FilterStats:
    """Counters of one filter run."""

    elements: int = 0
    nodes: int = 0
    seamarks: int = 0
    generated: int = 0


class SeamarkFilter:
    """Stream an OSM document through a :class:`FeatureProcessor`.

    Args:
        processor: Processor used for every ``<node>``; a default one is
            created if omitted.
    """

    def __init__(self, processor: FeatureProcessor | None = None) -> None:
        self.processor = processor or FeatureProcessor()

    def run(self, source, sink) -> FilterStats:
        """Read OSM XML from *source* and write the augmented document to *sink*.

        Args:
            source: File name or binary file object to read.
            sink: File name or binary file object to write.

        Raises:
            lxml.etree.XMLSyntaxError: If the input is not well-formed.
        """
        stats = FilterStats()
        reader = OsmReader(source)
        elements = iter(reader)
        first = next(elements, None)
        root_attrib = reader.root_attrib or _DEFAULT_ROOT

        with etree.xmlfile(sink, encoding="utf-8") as xf:
            xf.write_declaration()
            with xf.element("osm", root_attrib):
                xf.write("\n")
                if first is not None:
                    for elem in chain([first], elements):
                        self._write(xf, elem, stats)

        _logger.info(
            "%d elements, %d nodes, %d seamarks, %d generated elements",
            stats.elements, stats.nodes, stats.seamarks, stats.generated,
        )
        return stats

    def _write(self, xf, elem: etree._Element, stats: FilterStats) -> None:
        xf.write(elem, pretty_print=True)
        stats.elements += 1
        if elem.tag != "node":
            return

        stats.nodes += 1
        if elem.find("tag[@k='seamark:type']") is None:
            return
        try:
            node = parse_node(elem)
        except ValueError as exc:
            _logger.warning("skipping seamark: %s", exc)
            return

        stats.seamarks += 1
        result = self.processor.process(node)
        for item in result.elements:
            xf.write(to_element(item), pretty_print=True)
        stats.generated += len(result.elements)
