"""Projection of resolved sectors into nodes and ways."""

from seamark_sectors.geometry.emitter import GeometryEmitter, light_character_label
from seamark_sectors.geometry.models import (
    OutputElement,
    OutputNode,
    OutputWay,
    SeamarkNode,
)
from seamark_sectors.geometry.projection import arc_step, project

__all__ = [
    "GeometryEmitter",
    "OutputElement",
    "OutputNode",
    "OutputWay",
    "SeamarkNode",
    "arc_step",
    "light_character_label",
    "project",
]
