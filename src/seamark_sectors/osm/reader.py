"""Incremental OSM XML reader.

Top-level elements (``node``, ``way``, ``relation``, ...) are yielded as soon
as they are complete and freed once the caller moves on, so arbitrarily
large documents are read in constant memory.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime

from lxml import etree

from seamark_sectors.geometry.models import SeamarkNode


class OsmReader:
    """Iterate over the top-level elements of an OSM document.

    Args:
        source: File name or binary file object.

    ``root_attrib`` holds the attributes of the ``<osm>`` root element once
    iteration has started.
    """

    def __init__(self, source) -> None:
        self._source = source
        self.root_attrib: dict[str, str] = {}

    def __iter__(self) -> Iterator[etree._Element]:
        depth = 0
        events = etree.iterparse(
            self._source, events=("start", "end"), remove_blank_text=True
        )
        for event, elem in events:
            if event == "start":
                if depth == 0:
                    self.root_attrib = dict(elem.attrib)
                depth += 1
                continue

            depth -= 1
            if depth != 1:
                continue
            yield elem
            elem.clear()
            while elem.getprevious() is not None:
                del elem.getparent()[0]


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an OSM ``timestamp`` attribute (``2011-06-01T12:00:00Z``)."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_node(elem: etree._Element) -> SeamarkNode:
    """Convert a ``<node>`` element into a :class:`SeamarkNode`.

    Raises:
        ValueError: If ``id``, ``lat`` or ``lon`` is missing or not numeric.
    """
    try:
        node_id = int(elem.get("id"))
        lat = float(elem.get("lat"))
        lon = float(elem.get("lon"))
    except (TypeError, ValueError):
        raise ValueError(
            f"malformed node (line {elem.sourceline}): {dict(elem.attrib)}"
        ) from None
    tags = {
        tag.get("k"): tag.get("v", "")
        for tag in elem.iterfind("tag")
        if tag.get("k") is not None
    }
    return SeamarkNode(
        id=node_id,
        lat=lat,
        lon=lon,
        timestamp=parse_timestamp(elem.get("timestamp")),
        tags=tags,
    )
