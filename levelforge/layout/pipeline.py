"""Generation loop for grid-based room layouts.

One attempt runs the phases PLANNING -> ASSEMBLING -> INJECTING -> VALIDATING.
A recoverable failure in any of them (overlap, exhausted sampling, empty
template pool) throws the whole attempt away and plans again from a fresh
random seed cell; after ``max_iterations`` failed attempts the fallback
service takes over. A successful attempt moves on to CONNECTING, after which
the layout is handed to the instantiation, player, minimap and navigation
services.

``iter_phases`` is a generator that yields each phase before running it so a
host loop can interleave other work (one phase per frame, for example) or
request cancellation through a :class:`CancellationToken`. The token is
checked again when the host resumes, so a phase cancelled at its yield never
runs.
"""
from __future__ import annotations

import random
import threading
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from levelforge.logging_utils import get_logger

from .catalog import CatalogResolver, RoomKind
from .config import LayoutConfig
from .errors import (
    GenerationCancelled,
    InvariantViolation,
    NoMatchingTemplate,
    OverlapConflict,
    PlacementExhausted,
    RecoverableLayoutError,
    RegenerationExhausted,
)
from .grid import GridModel
from .hallways import connect
from .metrics import init_metrics
from .rooms import PlacedHallway, PlacedRoom, assemble
from .services import (
    AsciiMinimap,
    LoggingFallback,
    NullNavigationBaker,
    RecordingPlayerPlacer,
    SceneRecorder,
    StaticTemplateCatalog,
)
from .special import SpecialRoomInjector
from .validation import find_conflicts, has_conflict
from .walker import plan, validate_dimensions

log = get_logger("levelforge.layout")


class Phase(Enum):
    PLANNING = "planning"
    ASSEMBLING = "assembling"
    INJECTING = "injecting"
    VALIDATING = "validating"
    CONNECTING = "connecting"
    DONE = "done"
    EXHAUSTED = "exhausted"


class GenerationStatus(Enum):
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


class CancellationToken:
    """Thread-safe cancel flag honored between phases."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class AttemptContext:
    """Everything one attempt owns; dropped wholesale when the attempt fails."""

    number: int
    grid: Optional[GridModel] = None
    resolver: Optional[CatalogResolver] = None
    injector: Optional[SpecialRoomInjector] = None
    rooms: List[PlacedRoom] = field(default_factory=list)
    hallways: List[PlacedHallway] = field(default_factory=list)

    @property
    def start_room(self) -> Optional[PlacedRoom]:
        return next((r for r in self.rooms if r.kind is RoomKind.START), None)

    def rooms_of(self, kind: RoomKind) -> List[PlacedRoom]:
        return [r for r in self.rooms if r.kind is kind]

    def to_dict(self):
        return {
            "attempt": self.number,
            "size": [self.grid.width, self.grid.length] if self.grid else None,
            "rooms": [r.to_dict() for r in self.rooms],
            "hallways": [h.to_dict() for h in self.hallways],
        }


@dataclass
class GenerationResult:
    status: GenerationStatus
    seed: int
    attempts: int
    context: Optional[AttemptContext] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
    error: Optional[Exception] = None
    minimap: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is GenerationStatus.SUCCESS


_FAILURE_METRIC = {
    OverlapConflict: 'overlap_failures',
    PlacementExhausted: 'placement_failures',
    NoMatchingTemplate: 'template_failures',
}


class LevelGenerator:
    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        *,
        catalog=None,
        instantiator=None,
        navigation=None,
        player=None,
        fallback=None,
        minimap=None,
        parent: str = "level",
    ):
        # private copy; the caller's config is never mutated
        self.config = replace(config) if config is not None else LayoutConfig.from_env()
        # 0 is a valid deterministic seed; None picks one and records it
        if self.config.seed is None:
            self.config.seed = random.randint(0, 2**31 - 1)
        self.seed = self.config.seed
        self.rng = random.Random(self.seed)
        self.catalog = catalog or StaticTemplateCatalog()
        self.instantiator = instantiator or SceneRecorder()
        self.navigation = navigation or NullNavigationBaker()
        self.player = player or RecordingPlayerPlacer()
        self.fallback = fallback or LoggingFallback()
        self.minimap = minimap or AsciiMinimap()
        self.parent = parent
        self.metrics: Dict[str, Any] = {}
        self.result: Optional[GenerationResult] = None

    def generate(self, cancel: Optional[CancellationToken] = None) -> GenerationResult:
        for _phase in self.iter_phases(cancel):
            pass
        return self.result

    def iter_phases(self, cancel: Optional[CancellationToken] = None) -> Iterator[Phase]:
        cfg = self.config
        validate_dimensions(cfg.width, cfg.length, cfg.room_count, cfg.max_grid_cells)
        # every run replays from the recorded seed
        self.rng = random.Random(self.seed)
        self.metrics = init_metrics() if cfg.enable_metrics else {}
        self.result = None
        started = time.perf_counter()
        phase_times: Dict[str, int] = {}
        # previous layout goes away before the first attempt plans anything
        self.instantiator.clear(self.parent)

        failures = 0
        last_error: Optional[Exception] = None
        steps = (
            (Phase.PLANNING, self._plan),
            (Phase.ASSEMBLING, self._assemble),
            (Phase.INJECTING, self._inject),
            (Phase.VALIDATING, self._validate),
        )
        while True:
            if failures >= cfg.max_iterations:
                yield Phase.EXHAUSTED
                self._checkpoint(cancel, Phase.EXHAUSTED)
                self._exhaust(failures, last_error, started, phase_times)
                return
            ctx = AttemptContext(number=failures + 1)
            if cfg.enable_metrics:
                self.metrics['attempts'] += 1
            log.debug(event="attempt_start", attempt=ctx.number, seed=self.seed)
            try:
                for phase, fn in steps:
                    self._checkpoint(cancel, phase)
                    yield phase
                    self._checkpoint(cancel, phase)
                    self._timed(phase_times, phase, fn, ctx)
            except RecoverableLayoutError as exc:
                failures += 1
                last_error = exc
                if cfg.enable_metrics:
                    self.metrics[_FAILURE_METRIC.get(type(exc), 'placement_failures')] += 1
                log.info(event="attempt_failed", attempt=ctx.number, error=type(exc).__name__, reason=str(exc))
                continue
            except InvariantViolation as exc:
                log.error(event="invariant_violation", attempt=ctx.number, seed=self.seed, reason=str(exc))
                raise
            break

        self._checkpoint(cancel, Phase.CONNECTING)
        yield Phase.CONNECTING
        self._checkpoint(cancel, Phase.CONNECTING)
        self._timed(phase_times, Phase.CONNECTING, self._connect, ctx)
        minimap = self._publish(ctx)
        if cfg.enable_metrics:
            self.metrics['rooms_placed'] = len(ctx.rooms)
            self.metrics['special_rooms'] = len(ctx.rooms_of(RoomKind.SPECIAL))
            self.metrics['boss_rooms'] = len(ctx.rooms_of(RoomKind.BOSS))
            self.metrics['hallways_placed'] = len(ctx.hallways)
            self.metrics['runtime_ms'] = int((time.perf_counter() - started) * 1000)
            self.metrics['phase_ms'] = phase_times
        self.result = GenerationResult(
            GenerationStatus.SUCCESS, self.seed, ctx.number, ctx, self.metrics, minimap=minimap
        )
        log.info(event="layout_ready", seed=self.seed, attempts=ctx.number, rooms=len(ctx.rooms),
                 hallways=len(ctx.hallways))
        yield Phase.DONE

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------
    def _plan(self, ctx: AttemptContext) -> None:
        cfg = self.config
        walk = plan(cfg.width, cfg.length, cfg.room_count, self.rng, cfg.effective_walk_retry_cap())
        ctx.grid = walk.grid
        if cfg.enable_metrics:
            self.metrics['walk_retries'] += walk.retries
        if cfg.print_debug_matrix:
            log.debug(event="grid_matrix", attempt=ctx.number, rows=walk.grid.format_matrix().replace("\n", "|"))

    def _assemble(self, ctx: AttemptContext) -> None:
        ctx.resolver = CatalogResolver(self.catalog, self.rng)
        ctx.rooms = assemble(ctx.grid, ctx.resolver, self.config)

    def _inject(self, ctx: AttemptContext) -> None:
        ctx.injector = SpecialRoomInjector(ctx.resolver, self.config, self.rng)
        ctx.injector.inject(ctx.rooms, ctx.grid, RoomKind.BOSS, 1)
        ctx.injector.inject(ctx.rooms, ctx.grid, RoomKind.SPECIAL, self.config.special_room_count)

    def _validate(self, ctx: AttemptContext) -> None:
        if has_conflict(ctx.rooms):
            dupes = find_conflicts(ctx.rooms)
            raise OverlapConflict(f"{len(dupes)} world position(s) hold more than one room")

    def _connect(self, ctx: AttemptContext) -> None:
        ctx.hallways = connect(ctx.rooms, self.catalog.hallways(), self.config, self.rng, self.metrics)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _timed(self, phase_times, phase: Phase, fn, ctx) -> None:
        if not self.config.enable_metrics:
            fn(ctx)
            return
        ps = time.perf_counter()
        fn(ctx)
        phase_times[phase.value] = phase_times.get(phase.value, 0) + int((time.perf_counter() - ps) * 1000)

    def _checkpoint(self, cancel: Optional[CancellationToken], phase: Phase) -> None:
        if cancel is not None and cancel.cancelled:
            log.info(event="generation_cancelled", seed=self.seed, before=phase.value)
            raise GenerationCancelled(f"cancelled before {phase.value}")

    def _publish(self, ctx: AttemptContext) -> str:
        for room in ctx.rooms:
            self.instantiator.instantiate(room.template.name, room.position, room.yaw, self.parent)
        for hallway in ctx.hallways:
            self.instantiator.instantiate(hallway.template_name, hallway.position, hallway.yaw, self.parent)
        start = ctx.start_room
        spawn = start.spawn_transform() or (start.position, start.yaw)
        self.player.place(*spawn)
        minimap = self.minimap.render(ctx.rooms, ctx.hallways)
        self.navigation.bake(self.parent)
        return minimap

    def _exhaust(self, failures, last_error, started, phase_times) -> None:
        error = RegenerationExhausted(failures, last_error)
        if self.config.enable_metrics:
            self.metrics['runtime_ms'] = int((time.perf_counter() - started) * 1000)
            self.metrics['phase_ms'] = phase_times
        log.error(event="generation_exhausted", seed=self.seed, attempts=failures, reason=str(last_error))
        self.fallback.invoke(str(error))
        self.result = GenerationResult(GenerationStatus.EXHAUSTED, self.seed, failures, None, self.metrics, error)


def generate_layout(config: Optional[LayoutConfig] = None, **services) -> GenerationResult:
    """Convenience wrapper: build a generator and run it to completion."""
    return LevelGenerator(config, **services).generate()


__all__ = [
    "Phase",
    "GenerationStatus",
    "CancellationToken",
    "AttemptContext",
    "GenerationResult",
    "LevelGenerator",
    "generate_layout",
]
