"""Room templates, the built-in catalogue and per-attempt template resolution."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Collection, Dict, FrozenSet, List, NamedTuple, Optional

from .errors import NoMatchingTemplate
from .geometry import YAWS, Direction, Vec3, rotate_directions
from .topology import ShapeCategory, shape_category


class RoomKind(Enum):
    START = "start"
    ENEMY = "enemy"
    SPECIAL = "special"
    BOSS = "boss"


@dataclass(frozen=True)
class RoomTemplate:
    """Authored room asset description (doors given at yaw 0)."""

    name: str
    kind: RoomKind
    category: ShapeCategory
    doors: FrozenSet[Direction]
    spawn_offset: Optional[Vec3] = field(default=None, compare=False)

    def __post_init__(self):
        implied = shape_category(self.doors)
        if implied is not self.category:
            raise ValueError(f"template {self.name!r} authored as {self.category.value} but doors imply {implied.value}")

    def matching_yaws(self, directions: Collection[Direction]) -> List[int]:
        target = frozenset(directions)
        return [yaw for yaw in YAWS if rotate_directions(self.doors, yaw) == target]

    def to_dict(self):
        return {
            "name": self.name,
            "kind": self.kind.value,
            "category": self.category.value,
            "doors": sorted(d.name for d in self.doors),
        }


class Resolution(NamedTuple):
    template: RoomTemplate
    yaw: int


T, L, R, D = Direction.TOP, Direction.LEFT, Direction.RIGHT, Direction.DOWN

# Built-in catalogue. Door sets are deliberately authored in different
# orientations so placement always has to solve for a yaw.
DEFAULT_TEMPLATES = [
    dict(name="start-alcove", kind="start", category="one_door", doors=(T,), spawn=(0, 1, -16)),
    dict(name="start-hall", kind="start", category="two_door_linear", doors=(T, D), spawn=(0, 1, 0)),
    dict(name="start-corner", kind="start", category="two_door_curve", doors=(T, R), spawn=(-16, 1, -16)),
    dict(name="start-junction", kind="start", category="three_door", doors=(T, R, D), spawn=(-16, 1, 0)),
    dict(name="start-crossroads", kind="start", category="four_door", doors=(T, L, R, D), spawn=(0, 1, 0)),
    dict(name="crypt-dead-end", kind="enemy", category="one_door", doors=(T,)),
    dict(name="guard-post", kind="enemy", category="one_door", doors=(R,)),
    dict(name="long-gallery", kind="enemy", category="two_door_linear", doors=(T, D)),
    dict(name="barracks", kind="enemy", category="two_door_linear", doors=(L, R)),
    dict(name="bent-cellar", kind="enemy", category="two_door_curve", doors=(T, R)),
    dict(name="collapsed-corner", kind="enemy", category="two_door_curve", doors=(D, L)),
    dict(name="forked-catacomb", kind="enemy", category="three_door", doors=(T, R, D)),
    dict(name="ritual-chamber", kind="enemy", category="three_door", doors=(L, T, R)),
    dict(name="great-hall", kind="enemy", category="four_door", doors=(T, L, R, D)),
    dict(name="pillared-crossing", kind="enemy", category="four_door", doors=(T, L, R, D)),
    dict(name="treasure-vault", kind="special", category="one_door", doors=(T,)),
    dict(name="shrine", kind="special", category="one_door", doors=(D,)),
    dict(name="udok-lair", kind="boss", category="one_door", doors=(T,)),
    dict(name="throne-of-bones", kind="boss", category="one_door", doors=(L,)),
]

DEFAULT_HALLWAYS = ["hallway-plain", "hallway-torchlit", "hallway-collapsed"]


def build_template(entry: dict) -> RoomTemplate:
    spawn = entry.get("spawn")
    return RoomTemplate(
        name=entry["name"],
        kind=RoomKind(entry["kind"]),
        category=ShapeCategory(entry["category"]),
        doors=frozenset(d if isinstance(d, Direction) else Direction[d] for d in entry["doors"]),
        spawn_offset=Vec3(*spawn) if spawn is not None else None,
    )


def default_templates() -> List[RoomTemplate]:
    return [build_template(s) for s in DEFAULT_TEMPLATES]


class CatalogResolver:
    """Selects a template and yaw for a cell; pools are private to one attempt."""

    def __init__(self, catalog, rng=None):
        self.rng = rng or random
        self.pools: Dict[RoomKind, List[RoomTemplate]] = {kind: list(catalog.templates(kind)) for kind in RoomKind}

    def candidates(self, category: ShapeCategory, kind: RoomKind) -> List[RoomTemplate]:
        return [t for t in self.pools[kind] if t.category is category]

    def resolve(self, category: ShapeCategory, kind: RoomKind, directions: Collection[Direction]) -> Resolution:
        pool = self.candidates(category, kind)
        if not pool:
            raise NoMatchingTemplate(f"no {kind.value} template for {category.value}")
        template = pool[self.rng.randrange(len(pool))]
        yaws = template.matching_yaws(directions)
        if not yaws:
            raise NoMatchingTemplate(
                f"template {template.name!r} cannot be rotated onto {sorted(d.name for d in directions)}"
            )
        if category is ShapeCategory.FOUR_DOOR:
            # every yaw fits, orientation is cosmetic
            return Resolution(template, self.rng.choice(yaws))
        return Resolution(template, yaws[0])

    def consume(self, template: RoomTemplate) -> None:
        pool = self.pools[template.kind]
        if template in pool:
            pool.remove(template)


__all__ = [
    "RoomKind",
    "RoomTemplate",
    "Resolution",
    "CatalogResolver",
    "DEFAULT_TEMPLATES",
    "DEFAULT_HALLWAYS",
    "build_template",
    "default_templates",
]
