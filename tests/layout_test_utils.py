"""Helpers for building small hand-made grids and rooms in tests."""

from levelforge.layout.catalog import CatalogResolver, RoomKind, build_template
from levelforge.layout.config import LayoutConfig
from levelforge.layout.geometry import Direction, Vec3
from levelforge.layout.grid import GridModel
from levelforge.layout.rooms import Door, PlacedRoom
from levelforge.layout.services import StaticTemplateCatalog
from levelforge.layout.topology import shape_category


def grid_of(cells, width=5, length=5):
    """Grid with ``cells`` filled in order (first cell becomes the seed cell)."""
    g = GridModel(width, length)
    for c in cells:
        g.fill(c)
    return g


def make_config(**kw):
    kw.setdefault("seed", 1)
    return LayoutConfig(**kw)


def make_resolver(rng, catalog=None):
    return CatalogResolver(catalog or StaticTemplateCatalog(), rng)


def bare_room(position, directions, kind=RoomKind.ENEMY, cell=(0, 0), half=48):
    """PlacedRoom at an arbitrary world position with doors facing ``directions``."""
    dirs = frozenset(directions)
    category = shape_category(dirs)
    template = build_template(
        dict(name="test-room", kind=kind.value, category=category.value, doors=tuple(dirs))
    )
    position = Vec3(*position)
    doors = [Door(d, position.plus(d.vector().scaled(half))) for d in sorted(dirs, key=lambda d: d.name)]
    return PlacedRoom(cell, position, 0, category, kind, template, doors)


__all__ = ["grid_of", "make_config", "make_resolver", "bare_room", "Direction"]
