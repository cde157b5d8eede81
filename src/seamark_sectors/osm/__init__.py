"""OSM XML stream filter."""

from seamark_sectors.osm.filter import FilterStats, SeamarkFilter
from seamark_sectors.osm.reader import OsmReader, parse_node
from seamark_sectors.osm.writer import to_element

__all__ = ["FilterStats", "OsmReader", "SeamarkFilter", "parse_node", "to_element"]
