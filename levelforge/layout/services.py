"""Collaborator interfaces consumed by the generator, plus in-memory stand-ins.

The generator never reaches for global handles: every collaborator is passed
to :class:`~levelforge.layout.pipeline.LevelGenerator` explicitly. The
in-memory implementations back the CLI, the HTTP API and the tests.
"""
from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from levelforge.logging_utils import get_logger

from .catalog import DEFAULT_HALLWAYS, RoomKind, RoomTemplate, default_templates
from .geometry import Vec3
from .tiles import GLYPH_BOSS, GLYPH_EMPTY, GLYPH_ENEMY, GLYPH_SPECIAL, GLYPH_START

log = get_logger("levelforge.services")


class TemplateCatalog(ABC):
    @abstractmethod
    def templates(self, kind: RoomKind) -> List[RoomTemplate]:
        """Templates staged for ``kind``; empty when nothing is staged."""

    @abstractmethod
    def hallways(self) -> List[str]:
        """Hallway segment asset names."""


class Instantiator(ABC):
    @abstractmethod
    def instantiate(self, template_name: str, position: Vec3, yaw: int, parent: str):
        """Create a live instance and return an opaque handle."""

    @abstractmethod
    def clear(self, parent: str) -> None:
        """Tear down every instance created under ``parent``."""


class NavigationBaker(ABC):
    @abstractmethod
    def bake(self, parent: str) -> None: ...


class PlayerPlacer(ABC):
    @abstractmethod
    def place(self, position: Vec3, yaw: int) -> None: ...


class Fallback(ABC):
    @abstractmethod
    def invoke(self, reason: str) -> None: ...


class MinimapRenderer(ABC):
    @abstractmethod
    def render(self, rooms, hallways): ...


# ---------------------------------------------------------------------------
# In-memory implementations
# ---------------------------------------------------------------------------
class StaticTemplateCatalog(TemplateCatalog):
    def __init__(self, templates: Optional[Iterable[RoomTemplate]] = None, hallways: Optional[Sequence[str]] = None):
        self._by_kind: Dict[RoomKind, List[RoomTemplate]] = {k: [] for k in RoomKind}
        for t in default_templates() if templates is None else templates:
            self._by_kind[t.kind].append(t)
        self._hallways = list(DEFAULT_HALLWAYS if hallways is None else hallways)

    def templates(self, kind: RoomKind) -> List[RoomTemplate]:
        return list(self._by_kind.get(kind, []))

    def hallways(self) -> List[str]:
        return list(self._hallways)


@dataclass
class InstanceRecord:
    handle: int
    template_name: str
    position: Vec3
    yaw: int
    parent: str


class SceneRecorder(Instantiator):
    """Keeps instance records instead of creating engine objects."""

    def __init__(self):
        self.instances: List[InstanceRecord] = []
        self._ids = itertools.count(1)

    def instantiate(self, template_name, position, yaw, parent):
        rec = InstanceRecord(next(self._ids), template_name, position, yaw, parent)
        self.instances.append(rec)
        return rec.handle

    def clear(self, parent):
        self.instances = [i for i in self.instances if i.parent != parent]

    def under(self, parent: str) -> List[InstanceRecord]:
        return [i for i in self.instances if i.parent == parent]


class NullNavigationBaker(NavigationBaker):
    def __init__(self):
        self.bakes = 0

    def bake(self, parent):
        self.bakes += 1


class RecordingPlayerPlacer(PlayerPlacer):
    def __init__(self):
        self.position: Optional[Vec3] = None
        self.yaw: Optional[int] = None
        self.placements = 0

    def place(self, position, yaw):
        self.position, self.yaw = position, yaw
        self.placements += 1


@dataclass
class LoggingFallback(Fallback):
    reasons: List[str] = field(default_factory=list)

    def invoke(self, reason):
        self.reasons.append(reason)
        log.warn(event="fallback_invoked", reason=reason)


_GLYPHS = {
    RoomKind.START: GLYPH_START,
    RoomKind.ENEMY: GLYPH_ENEMY,
    RoomKind.SPECIAL: GLYPH_SPECIAL,
    RoomKind.BOSS: GLYPH_BOSS,
}


class AsciiMinimap(MinimapRenderer):
    """Text minimap, one glyph per grid cell, +y (TOP) printed first."""

    def __init__(self):
        self.last: Optional[str] = None

    def render(self, rooms, hallways):
        if not rooms:
            self.last = ""
            return self.last
        xs = [r.cell[0] for r in rooms]
        ys = [r.cell[1] for r in rooms]
        min_x, max_x, min_y, max_y = min(xs), max(xs), min(ys), max(ys)
        by_cell = {r.cell: r for r in rooms}
        lines = []
        for y in range(max_y, min_y - 1, -1):
            row = []
            for x in range(min_x, max_x + 1):
                room = by_cell.get((x, y))
                row.append(_GLYPHS[room.kind] if room else GLYPH_EMPTY)
            lines.append("".join(row))
        self.last = "\n".join(lines)
        return self.last


__all__ = [
    "TemplateCatalog",
    "Instantiator",
    "NavigationBaker",
    "PlayerPlacer",
    "Fallback",
    "MinimapRenderer",
    "StaticTemplateCatalog",
    "InstanceRecord",
    "SceneRecorder",
    "NullNavigationBaker",
    "RecordingPlayerPlacer",
    "LoggingFallback",
    "AsciiMinimap",
]
