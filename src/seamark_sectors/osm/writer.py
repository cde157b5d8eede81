"""Serialisation of generated nodes and ways as OSM XML elements."""

from __future__ import annotations

from datetime import datetime, timezone

from lxml import etree

from seamark_sectors.geometry.models import OutputElement, OutputNode, OutputWay

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_timestamp(ts: datetime | None) -> str | None:
    if ts is None:
        return None
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.strftime(TIMESTAMP_FORMAT)


def _base_attrib(ident: int, ts: datetime | None) -> dict[str, str]:
    attrib = {"id": str(ident), "version": "1"}
    stamp = format_timestamp(ts)
    if stamp is not None:
        attrib["timestamp"] = stamp
    return attrib


def _add_tags(elem: etree._Element, tags: dict[str, str]) -> None:
    for k, v in tags.items():
        etree.SubElement(elem, "tag", k=k, v=v)


def node_element(node: OutputNode) -> etree._Element:
    attrib = _base_attrib(node.id, node.timestamp)
    attrib["lat"] = f"{node.lat:.7f}"
    attrib["lon"] = f"{node.lon:.7f}"
    elem = etree.Element("node", attrib)
    _add_tags(elem, node.tags)
    return elem


def way_element(way: OutputWay) -> etree._Element:
    elem = etree.Element("way", _base_attrib(way.id, way.timestamp))
    for ref in way.refs:
        etree.SubElement(elem, "nd", ref=str(ref))
    _add_tags(elem, way.tags)
    return elem


def to_element(item: OutputElement) -> etree._Element:
    """Convert a generated record into its XML element."""
    if isinstance(item, OutputNode):
        return node_element(item)
    return way_element(item)
