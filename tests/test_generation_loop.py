import pytest

from levelforge.layout import pipeline
from levelforge.layout.catalog import RoomKind
from levelforge.layout.config import MAX_ITERATIONS, LayoutConfig
from levelforge.layout.errors import (
    ConfigurationError,
    GenerationCancelled,
    InvariantViolation,
    OverlapConflict,
)
from levelforge.layout.pipeline import CancellationToken, GenerationStatus, LevelGenerator, Phase, generate_layout
from levelforge.layout.services import (
    AsciiMinimap,
    LoggingFallback,
    NullNavigationBaker,
    RecordingPlayerPlacer,
    SceneRecorder,
)

ATTEMPT_PHASES = [Phase.PLANNING, Phase.ASSEMBLING, Phase.INJECTING, Phase.VALIDATING]


def _services():
    return dict(
        instantiator=SceneRecorder(),
        navigation=NullNavigationBaker(),
        player=RecordingPlayerPlacer(),
        fallback=LoggingFallback(),
        minimap=AsciiMinimap(),
    )


def _always_overlap(monkeypatch):
    monkeypatch.setattr(pipeline, "has_conflict", lambda rooms: True)


def test_successful_generation_publishes_layout():
    svc = _services()
    result = LevelGenerator(LayoutConfig(seed=42), **svc).generate()
    assert result.ok
    ctx = result.context
    assert len(ctx.rooms) == 12 + 2
    assert len(svc["instantiator"].under("level")) == len(ctx.rooms) + len(ctx.hallways)
    assert svc["player"].placements == 1
    assert svc["navigation"].bakes == 1
    assert svc["fallback"].reasons == []
    assert result.minimap == svc["minimap"].last
    assert result.minimap.count("S") == 1
    assert result.minimap.count("B") == 1


def test_player_placed_at_start_room_spawn():
    svc = _services()
    result = LevelGenerator(LayoutConfig(seed=7), **svc).generate()
    start = result.context.start_room
    position, yaw = start.spawn_transform()
    assert svc["player"].position == position
    assert svc["player"].yaw == yaw


def test_exhaustion_after_max_iterations_invokes_fallback_once(monkeypatch):
    _always_overlap(monkeypatch)
    svc = _services()
    result = LevelGenerator(LayoutConfig(seed=1), **svc).generate()
    assert result.status is GenerationStatus.EXHAUSTED
    assert result.attempts == MAX_ITERATIONS == 20
    assert len(svc["fallback"].reasons) == 1
    assert svc["instantiator"].instances == []
    assert svc["player"].placements == 0
    assert svc["navigation"].bakes == 0
    assert result.context is None


def test_exhausted_phase_sequence(monkeypatch):
    _always_overlap(monkeypatch)
    gen = LevelGenerator(LayoutConfig(seed=1, max_iterations=2), **_services())
    phases = list(gen.iter_phases())
    assert phases[:3] == ATTEMPT_PHASES[:3]
    assert phases.count(Phase.PLANNING) == 2
    assert phases[-1] is Phase.EXHAUSTED
    assert Phase.CONNECTING not in phases


def test_successful_phase_sequence():
    gen = LevelGenerator(LayoutConfig(seed=99), **_services())
    phases = list(gen.iter_phases())
    assert phases[:3] == ATTEMPT_PHASES[:3]
    assert phases[-2:] == [Phase.CONNECTING, Phase.DONE]
    assert phases.count(Phase.PLANNING) == gen.result.attempts


def test_cancel_between_phases():
    svc = _services()
    token = CancellationToken()
    it = LevelGenerator(LayoutConfig(seed=3), **svc).iter_phases(token)
    assert next(it) is Phase.PLANNING
    token.cancel()
    with pytest.raises(GenerationCancelled):
        next(it)
    assert svc["instantiator"].instances == []


def test_cancel_at_connecting_publishes_nothing():
    svc = _services()
    token = CancellationToken()
    it = LevelGenerator(LayoutConfig(seed=3), **svc).iter_phases(token)
    for phase in it:
        if phase is Phase.CONNECTING:
            token.cancel()
            break
    with pytest.raises(GenerationCancelled):
        next(it)
    assert svc["instantiator"].instances == []
    assert svc["navigation"].bakes == 0
    assert svc["player"].placements == 0


def test_cancel_at_yield_skips_that_phase(monkeypatch):
    ran = []
    real = pipeline.assemble

    def counting(*args, **kwargs):
        ran.append(1)
        return real(*args, **kwargs)

    monkeypatch.setattr(pipeline, "assemble", counting)
    token = CancellationToken()
    it = LevelGenerator(LayoutConfig(seed=3), **_services()).iter_phases(token)
    assert next(it) is Phase.PLANNING
    assert next(it) is Phase.ASSEMBLING
    token.cancel()
    with pytest.raises(GenerationCancelled):
        next(it)
    assert ran == []


def test_cancel_before_start():
    token = CancellationToken()
    token.cancel()
    with pytest.raises(GenerationCancelled):
        LevelGenerator(LayoutConfig(seed=3), **_services()).generate(token)


def test_single_room_is_an_invariant_violation():
    svc = _services()
    with pytest.raises(InvariantViolation):
        LevelGenerator(LayoutConfig(width=4, length=4, room_count=1, seed=1), **svc).generate()
    assert svc["fallback"].reasons == []


def test_configuration_error_is_not_retried():
    svc = _services()
    with pytest.raises(ConfigurationError):
        LevelGenerator(LayoutConfig(width=2, length=2, room_count=5, seed=1), **svc).generate()
    assert svc["fallback"].reasons == []


def test_regenerating_clears_previous_instances():
    svc = _services()
    gen = LevelGenerator(LayoutConfig(seed=11), **svc)
    gen.generate()
    second = gen.generate()
    ctx = second.context
    assert len(svc["instantiator"].under("level")) == len(ctx.rooms) + len(ctx.hallways)


def test_attempt_context_is_fresh_per_attempt(monkeypatch):
    calls = []

    def flaky(rooms):
        calls.append(len(rooms))
        return len(calls) == 1

    monkeypatch.setattr(pipeline, "has_conflict", flaky)
    result = LevelGenerator(LayoutConfig(seed=2), **_services()).generate()
    assert result.ok
    assert result.attempts >= 2
    assert calls[0] == calls[-1] == 14
    assert result.metrics["overlap_failures"] == 1


def test_seed_zero_is_kept_and_none_is_recorded():
    assert LevelGenerator(LayoutConfig(seed=0)).seed == 0
    gen = LevelGenerator(LayoutConfig(seed=None))
    assert isinstance(gen.seed, int)
    assert gen.config.seed == gen.seed


def test_caller_config_is_not_mutated():
    cfg = LayoutConfig(seed=None)
    gen = LevelGenerator(cfg)
    assert cfg.seed is None
    assert gen.config is not cfg
    assert isinstance(gen.seed, int)


def test_rerun_replays_the_same_layout():
    gen = LevelGenerator(LayoutConfig(seed=21))
    first = gen.generate()
    second = gen.generate()
    assert second.seed == first.seed == 21
    assert [r.to_dict() for r in second.context.rooms] == [r.to_dict() for r in first.context.rooms]
    assert [h.to_dict() for h in second.context.hallways] == [h.to_dict() for h in first.context.hallways]


def test_metrics_can_be_disabled():
    result = LevelGenerator(LayoutConfig(seed=4, enable_metrics=False)).generate()
    assert result.ok
    assert result.metrics == {}


def test_metrics_counts_match_layout():
    result = generate_layout(LayoutConfig(seed=17, special_room_count=2))
    m = result.metrics
    ctx = result.context
    assert m["rooms_placed"] == len(ctx.rooms) == 12 + 3
    assert m["special_rooms"] == len(ctx.rooms_of(RoomKind.SPECIAL)) == 2
    assert m["boss_rooms"] == 1
    assert m["hallways_placed"] == len(ctx.hallways)
    assert m["attempts"] == result.attempts
    assert set(m["phase_ms"]) >= {"planning", "assembling", "injecting", "validating", "connecting"}


def test_overlap_conflict_is_recoverable():
    assert issubclass(OverlapConflict, pipeline.RecoverableLayoutError)
