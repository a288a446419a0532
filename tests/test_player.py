import pytest

from algotrace.algorithms import generate_trace
from algotrace.engine import ManualScheduler, Player, PlayerState


TICK = 0.125     # player fixture runs at 125 ms


@pytest.fixture
def trace():
    # 5 steps: init, compare ×3, found
    return generate_trace("linear_search", [5, 3, 8, 1, 9], target=8)


@pytest.fixture
def loaded(player, trace):
    player.load(trace)
    return player


def test_new_player_is_idle(player):
    assert player.state is PlayerState.IDLE
    assert player.current_step is None
    player.start()
    player.step_forward()
    player.step_backward()
    player.seek(3)
    assert player.state is PlayerState.IDLE
    assert player.cursor == 0


def test_load_arms_cursor_zero(loaded, trace):
    assert loaded.state is PlayerState.PAUSED
    assert loaded.cursor == 0
    assert loaded.current_step is trace[0]
    assert not loaded.has_pending_tick


def test_step_forward_n_times(loaded):
    for _ in range(3):
        assert loaded.step_forward()
    assert loaded.cursor == 3
    assert loaded.step_backward()
    assert loaded.cursor == 2


def test_step_forward_at_last_index_is_a_noop(loaded, trace):
    loaded.seek(len(trace) - 1)
    assert loaded.state is PlayerState.FINISHED
    assert not loaded.step_forward()
    assert loaded.cursor == len(trace) - 1


def test_step_backward_at_zero_is_a_noop(loaded):
    assert not loaded.step_backward()
    assert loaded.cursor == 0


def test_playback_advances_one_step_per_tick(loaded, scheduler):
    loaded.start()
    assert loaded.state is PlayerState.PLAYING
    assert scheduler.pending == 1

    scheduler.advance(TICK)
    assert loaded.cursor == 1
    scheduler.advance(TICK * 2)
    assert loaded.cursor == 3
    assert scheduler.pending == 1


def test_playback_stops_at_the_end(loaded, scheduler, trace):
    loaded.start()
    scheduler.run_all()
    assert loaded.cursor == len(trace) - 1
    assert loaded.state is PlayerState.FINISHED
    assert scheduler.pending == 0
    assert not loaded.has_pending_tick


def test_pause_keeps_cursor_and_cancels_tick(loaded, scheduler):
    loaded.start()
    scheduler.advance(TICK)
    loaded.pause()
    assert loaded.state is PlayerState.PAUSED
    assert scheduler.pending == 0

    scheduler.advance(TICK * 10)
    assert loaded.cursor == 1


def test_pause_twice_is_same_as_once(loaded, scheduler):
    loaded.start()
    loaded.pause()
    snapshot = (loaded.state, loaded.cursor, scheduler.pending)
    loaded.pause()
    assert (loaded.state, loaded.cursor, scheduler.pending) == snapshot


def test_resume_continues_from_cursor(loaded, scheduler):
    loaded.step_forward()
    loaded.resume()
    assert loaded.state is PlayerState.PLAYING
    scheduler.advance(TICK)
    assert loaded.cursor == 2


def test_start_twice_never_double_schedules(loaded, scheduler):
    loaded.start()
    loaded.start()
    loaded.resume()
    assert scheduler.pending == 1
    scheduler.advance(TICK)
    assert loaded.cursor == 1


def test_step_forward_while_playing_cancels_the_timer(loaded, scheduler):
    loaded.start()
    assert loaded.step_forward()
    assert loaded.state is PlayerState.PAUSED
    assert scheduler.pending == 0
    scheduler.advance(TICK * 5)
    assert loaded.cursor == 1


def test_reset_returns_to_zero_and_cancels(loaded, scheduler):
    loaded.start()
    scheduler.advance(TICK * 2)
    loaded.reset()
    assert loaded.cursor == 0
    assert loaded.state is PlayerState.PAUSED
    assert scheduler.pending == 0


def test_seek_is_clamped_and_idempotent(loaded, trace):
    loaded.seek(2)
    loaded.seek(2)
    assert loaded.cursor == 2
    loaded.seek(99)
    assert loaded.cursor == len(trace) - 1
    loaded.seek(-5)
    assert loaded.cursor == 0


def test_seek_while_playing_keeps_one_pending_tick(loaded, scheduler):
    loaded.start()
    loaded.seek(2)
    assert loaded.state is PlayerState.PLAYING
    assert scheduler.pending == 1
    scheduler.advance(TICK)
    assert loaded.cursor == 3


def test_start_after_finish_replays_from_zero(loaded, scheduler):
    loaded.start()
    scheduler.run_all()
    loaded.start()
    assert loaded.cursor == 0
    assert loaded.state is PlayerState.PLAYING


def test_speed_is_clamped_and_applies_to_next_tick(scheduler, trace):
    player = Player(scheduler=scheduler, speed_ms=100, min_speed_ms=20, max_speed_ms=5000)
    player.load(trace)
    assert player.set_speed(1) == 20
    assert player.set_speed(10 ** 9) == 5000

    player.set_speed(125)
    player.start()
    player.set_speed(1000)
    # the already-scheduled tick keeps its 125 ms delay
    scheduler.advance(0.125)
    assert player.cursor == 1
    scheduler.advance(0.5)
    assert player.cursor == 1
    scheduler.advance(0.5)
    assert player.cursor == 2


def test_speed_preset(player):
    assert player.set_speed_preset("fast") == 150
    assert player.set_speed_preset("unknown") == 400


def test_on_step_fires_on_every_cursor_move(scheduler, trace):
    seen = []
    player = Player(scheduler=scheduler, on_step=lambda s: seen.append(s.step_number), speed_ms=50)
    player.load(trace)
    player.step_forward()
    player.step_backward()
    player.start()
    scheduler.run_all()
    assert seen == [0, 1, 0, 1, 2, 3, 4]


def test_loading_a_new_trace_drops_the_old_timer(loaded, scheduler, trace):
    loaded.start()
    loaded.load(trace[:2])
    assert scheduler.pending == 0
    assert loaded.cursor == 0
    assert loaded.total_steps == 2


def test_empty_trace_leaves_player_idle(player):
    player.load(())
    assert player.state is PlayerState.IDLE
    player.step_forward()
    assert player.cursor == 0


def test_single_step_trace_finishes_immediately(player, trace):
    player.load(trace[:1])
    player.start()
    assert player.state is PlayerState.FINISHED
    assert not player.has_pending_tick


def test_status(loaded):
    assert loaded.status() == {"state": "paused", "cursor": 0, "total_steps": 5, "speed_ms": 125}


def test_manual_scheduler_ignores_cancelled_callbacks():
    sched = ManualScheduler()
    fired = []
    handle = sched.call_later(1.0, lambda: fired.append("a"))
    sched.call_later(2.0, lambda: fired.append("b"))
    handle.cancel()
    assert sched.advance(5.0) == 1
    assert fired == ["b"]
    assert sched.now == 5.0
