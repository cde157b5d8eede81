"""Tests for geometry emission of resolved sectors."""

from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from seamark_sectors.config.settings import ProcessingConfig, ProcessingContext
from seamark_sectors.geometry.emitter import (
    ALT_RADIUS_OFFSETS,
    GeometryEmitter,
    light_character_label,
)
from seamark_sectors.geometry.models import OutputNode, OutputWay, SeamarkNode
from seamark_sectors.geometry.projection import NM_PER_DEGREE, arc_bearings, arc_step
from seamark_sectors.sectors.deriver import SegmentDeriver
from seamark_sectors.sectors.models import (
    ArcStyle,
    Category,
    Colour,
    LightCharacter,
    Sector,
    Segment,
)

STAMP = datetime(2011, 6, 1, 12, 0, tzinfo=timezone.utc)

# ---------------------------------------------------------------------------
# Test-data helpers
# ---------------------------------------------------------------------------

def make_node(lat: float = 0.0, lon: float = 0.0) -> SeamarkNode:
    return SeamarkNode(
        id=1000, lat=lat, lon=lon, timestamp=STAMP,
        tags={"seamark:type": "light_minor"},
    )


def make_stages(**config) -> tuple[SegmentDeriver, GeometryEmitter, ProcessingContext]:
    ctx = ProcessingContext(ProcessingConfig(**config))
    return SegmentDeriver(ctx), GeometryEmitter(ctx), ctx


def emit(sector: Sector, node: SeamarkNode | None = None, **config):
    deriver, emitter, ctx = make_stages(**config)
    node = node or make_node()
    return emitter.emit_sector(node, deriver.derive(sector)), ctx


def ways(elements) -> list[OutputWay]:
    return [e for e in elements if isinstance(e, OutputWay)]


def nodes(elements) -> list[OutputNode]:
    return [e for e in elements if isinstance(e, OutputNode)]


def radials(elements) -> list[OutputWay]:
    return [w for w in ways(elements) if "seamark:light_radial" in w.tags]


def arcs(elements) -> list[OutputWay]:
    return [w for w in ways(elements) if "seamark:arc_style" in w.tags]


def distance_nm(node: SeamarkNode, point: OutputNode) -> float:
    dlat = (point.lat - node.lat) * NM_PER_DEGREE
    dlon = (point.lon - node.lon) * NM_PER_DEGREE * math.cos(math.radians(node.lat))
    return math.hypot(dlat, dlon)


# ---------------------------------------------------------------------------
# Basic sector
# ---------------------------------------------------------------------------

class TestBasicSector:
    @pytest.fixture()
    def red_sector(self):
        """Red sector 10°–50°, radius 5 nm."""
        sector = Sector(nr=1, used=True, start=10.0, end=50.0, colour=Colour.RED, radius=5.0)
        elements, ctx = emit(sector)
        return elements, ctx

    def test_single_arc_way_with_tags(self, red_sector):
        elements, _ = red_sector
        [arc] = arcs(elements)
        assert arc.tags == {
            "seamark:light:sector_nr": "1",
            "seamark:light:object": "light_minor",
            "seamark:arc_style": "solid",
            "seamark:light_arc": "red",
        }
        assert arc.timestamp == STAMP

    def test_arc_point_count_follows_step(self, red_sector):
        elements, _ = red_sector
        [arc] = arcs(elements)
        interior = arc_bearings(10.0, 50.0, arc_step(5.0, 0.1, 8.0))
        assert len(arc.refs) == len(interior) + 2

    def test_all_points_on_radius(self, red_sector):
        elements, _ = red_sector
        node = make_node()
        for point in nodes(elements):
            assert distance_nm(node, point) == pytest.approx(5.0)

    def test_two_radials_from_light(self, red_sector):
        elements, _ = red_sector
        rads = radials(elements)
        assert len(rads) == 2
        points = {p.id for p in nodes(elements)}
        for way in rads:
            assert way.refs[0] == 1000
            assert way.refs[1] in points
            assert way.tags == {"seamark:light_radial": "1", "seamark:light:object": "light_minor"}

    def test_arc_refs_resolve_to_emitted_points(self, red_sector):
        elements, _ = red_sector
        [arc] = arcs(elements)
        points = {p.id for p in nodes(elements)}
        assert set(arc.refs) <= points

    def test_emission_order(self, red_sector):
        """start point, start radial, end point, end radial, arc points, arc way."""
        elements, _ = red_sector
        assert isinstance(elements[0], OutputNode)
        assert elements[1] in radials(elements)
        assert isinstance(elements[2], OutputNode)
        assert elements[3] in radials(elements)
        assert elements[-1] in arcs(elements)
        assert elements[-1].refs[0] == elements[0].id
        assert elements[-1].refs[-1] == elements[2].id

    def test_identities_unique_and_decreasing(self, red_sector):
        elements, ctx = red_sector
        ids = [e.id for e in elements]
        assert len(set(ids)) == len(ids)
        assert ids == sorted(ids, reverse=True)
        assert ids[0] == -1
        assert ctx.peek_id == ids[-1] - 1


# ---------------------------------------------------------------------------
# Radials and connectors
# ---------------------------------------------------------------------------

class TestRadials:
    def test_directional_has_single_radial(self):
        sector = Sector(
            nr=0, used=True, start=45.0, end=45.0, orientation=45.0,
            category=Category.DIRECTIONAL, start_space=360.0, end_space=360.0,
        )
        elements, _ = emit(sector)
        assert len(radials(elements)) == 1
        assert len(arcs(elements)) == 2

    def test_full_circle_has_no_radials(self):
        elements, _ = emit(Sector(nr=1, used=True, start=0.0, end=360.0))
        assert radials(elements) == []
        assert len(arcs(elements)) == 1

    def test_connector_on_radius_change(self):
        sector = Sector(
            nr=2, used=True, start=0.0, end=90.0,
            segments=[Segment(radius=1.0, span=30.0), Segment(radius=2.0)],
        )
        elements, _ = emit(sector)
        rads = radials(elements)
        assert len(rads) == 3
        connector = rads[1]
        first_end, second_start = connector.refs
        by_id = {p.id: p for p in nodes(elements)}
        assert distance_nm(make_node(), by_id[first_end]) == pytest.approx(1.0)
        assert distance_nm(make_node(), by_id[second_start]) == pytest.approx(2.0)

    def test_no_connector_next_to_suppressed_segment(self):
        sector = Sector(
            nr=2, used=True, start=0.0, end=90.0,
            segments=[
                Segment(radius=1.0, span=30.0),
                Segment(radius=2.0, style=ArcStyle.SUPPRESS),
            ],
        )
        elements, _ = emit(sector)
        assert len(radials(elements)) == 2

    def test_no_connector_for_equal_radius(self):
        sector = Sector(
            nr=2, used=True, start=0.0, end=90.0,
            segments=[Segment(radius=1.0, span=30.0), Segment(style=ArcStyle.DASHED)],
        )
        elements, _ = emit(sector)
        assert len(radials(elements)) == 2
        assert [a.tags["seamark:arc_style"] for a in arcs(elements)] == ["solid", "dashed"]


# ---------------------------------------------------------------------------
# Suppressed arcs
# ---------------------------------------------------------------------------

class TestSuppressedArcs:
    def test_suppress_style_has_no_arc(self):
        sector = Sector(
            nr=1, used=True, start=0.0, end=90.0,
            segments=[Segment(radius=1.0, style=ArcStyle.SUPPRESS)],
        )
        elements, _ = emit(sector)
        assert arcs(elements) == []
        assert len(radials(elements)) == 2
        assert len(nodes(elements)) == 2

    def test_zero_radius_has_no_arc(self):
        sector = Sector(
            nr=1, used=True, start=0.0, end=90.0,
            segments=[Segment(radius=1.0, span=45.0), Segment(radius=0.0)],
        )
        elements, _ = emit(sector)
        assert len(arcs(elements)) == 1


# ---------------------------------------------------------------------------
# Secondary colour
# ---------------------------------------------------------------------------

class TestAlternateColour:
    @pytest.fixture()
    def elements(self):
        sector = Sector(
            nr=3, used=True, start=100.0, end=140.0, radius=1.0,
            colour=Colour.WHITE, alt_colour=Colour.RED,
        )
        elements, _ = emit(sector)
        return elements

    def test_five_arcs(self, elements):
        tags = [a.tags for a in arcs(elements)]
        assert len(tags) == 5
        assert tags[0]["seamark:light_arc"] == "white"
        for k in range(1, 5):
            assert tags[k][f"seamark:light_arc_al{k}"] == "red"
            assert "seamark:light_arc" not in tags[k]

    def test_alternate_passes_have_no_radials(self, elements):
        assert len(radials(elements)) == 2

    def test_radii_shrink_cumulatively(self, elements):
        by_id = {p.id: p for p in nodes(elements)}
        node = make_node()
        radii = [distance_nm(node, by_id[a.refs[0]]) for a in arcs(elements)]
        expected = [1.0]
        for offset in ALT_RADIUS_OFFSETS:
            expected.append(expected[-1] - offset)
        assert radii == pytest.approx(expected)


# ---------------------------------------------------------------------------
# Light character
# ---------------------------------------------------------------------------

def character_sector(colour=Colour.WHITE, **kw) -> Sector:
    return Sector(character=LightCharacter(**kw), colour=colour)


class TestLightCharacter:
    @pytest.mark.parametrize(
        "sector,label",
        [
            (character_sector(text="Fl", group=2, period=10.0, range=15.0), "Fl(2)W. 10s 15M"),
            (character_sector(text="Iso", period=4.0), "Iso W. 4s"),
            (character_sector(Colour.ORANGE, text="Q"), "Q Or."),
            (character_sector(period=2.5, range=7.0), " 2.5s 7M"),
            (character_sector(), ""),
        ],
    )
    def test_label(self, sector, label):
        assert light_character_label(sector) == label

    def test_annotation_node(self):
        _, emitter, _ = make_stages()
        node = make_node(54.0, 8.0)
        out = emitter.emit_light_character(node, character_sector(Colour.GREEN, text="Fl"))
        assert (out.lat, out.lon, out.timestamp) == (54.0, 8.0, STAMP)
        assert out.tags == {"seamark:type": "virtual", "seamark:light_character": "Fl G."}

    def test_empty_label_emits_nothing(self):
        _, emitter, ctx = make_stages()
        assert emitter.emit_light_character(make_node(), character_sector()) is None
        assert ctx.peek_id == -1
