from __future__ import annotations

from typing import List, Optional

import numpy as np
import pytest

from acoumon.analysis.classify import HealthStatus
from acoumon.analysis.spectrum import DisplayMode, TransformParameters
from acoumon.config.runtime import MonitorConfig
from acoumon.core.models import FrameResult
from acoumon.core.monitor import MonitorSession, MonitorState
from acoumon.core.pipeline import CallbackSink, LatestFrameSink
from acoumon.sources.base import DeviceUnavailable
from acoumon.sources.simulated import SimulatedSource

LIVE_PARAMS = TransformParameters(sample_rate=48000.0, transform_size=4096)


class FakeLiveSource:
    """Scriptable stand-in for the microphone source."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.frame = np.zeros(2048, dtype=np.uint8)
        self.opened = 0
        self.closed = 0
        self.captures = 0
        self.transform: Optional[TransformParameters] = None

    def open(self) -> None:
        if self.fail:
            raise DeviceUnavailable("permission denied")
        self.opened += 1
        self.transform = LIVE_PARAMS

    def close(self) -> None:
        self.closed += 1
        self.transform = None

    def capture(self) -> np.ndarray:
        self.captures += 1
        return self.frame.copy()


def _session(live: FakeLiveSource, **kwargs) -> MonitorSession:
    return MonitorSession(
        MonitorConfig(simulation_seed=11),
        live_factory=lambda: live,
        **kwargs,
    )


def test_start_opens_source_and_ticks_publish() -> None:
    live = FakeLiveSource()
    live.frame[10] = 120  # 10 * 11.71875 -> 117 Hz
    latest = LatestFrameSink()
    session = _session(live, sinks=[latest])

    assert session.tick() is None
    session.start()
    assert session.state is MonitorState.RUNNING
    frame = session.tick()

    assert frame is latest.latest()
    assert frame.dominant_hz == 117
    assert frame.classification.status is HealthStatus.OPERATING
    assert live.opened == 1


def test_start_failure_leaves_session_stopped() -> None:
    live = FakeLiveSource(fail=True)
    session = _session(live)
    with pytest.raises(DeviceUnavailable):
        session.start()
    assert session.state is MonitorState.STOPPED
    assert session.tick() is None


def test_start_is_noop_while_running() -> None:
    live = FakeLiveSource()
    session = _session(live)
    session.start()
    session.start()
    assert live.opened == 1


def test_pause_keeps_last_series_even_if_source_changes() -> None:
    live = FakeLiveSource()
    live.frame[60] = 200
    published: List[FrameResult] = []
    session = _session(live, sinks=[CallbackSink(published.append)])
    session.start()
    before = session.tick()

    session.pause()
    live.frame[:] = 0
    live.frame[200] = 255
    for _ in range(5):
        assert session.tick() is before

    assert published == [before]
    assert live.captures == 1

    session.resume()
    after = session.tick()
    assert after is not before
    assert after.series != before.series


def test_toggle_pause_round_trip() -> None:
    session = _session(FakeLiveSource())
    session.toggle_pause()
    assert session.state is MonitorState.STOPPED
    session.start()
    session.toggle_pause()
    assert session.is_paused
    session.toggle_pause()
    assert session.is_running


def test_mode_switch_applies_on_next_tick_without_restart() -> None:
    live = FakeLiveSource()
    session = _session(live)
    session.start()
    assert session.tick().window_size == 150

    session.set_display_mode(DisplayMode.ELEC)
    frame = session.tick()
    assert frame.window_size == 40
    assert frame.mode is DisplayMode.ELEC
    assert live.opened == 1
    assert live.closed == 0


def test_mode_accepts_names() -> None:
    session = _session(FakeLiveSource())
    session.set_display_mode("mech")
    assert session.display_mode is DisplayMode.MECH
    session.set_display_mode("nonsense")
    assert session.display_mode is DisplayMode.MECH


def test_stop_is_idempotent_and_releases_source() -> None:
    live = FakeLiveSource()
    session = _session(live)
    session.start()
    session.stop()
    session.stop()
    assert session.state is MonitorState.STOPPED
    assert live.closed == 1


def test_stop_from_sink_mid_tick() -> None:
    live = FakeLiveSource()
    seen: List[FrameResult] = []
    session = _session(live)

    session.add_sink(CallbackSink(lambda frame: session.stop()))
    session.add_sink(CallbackSink(seen.append))
    session.start()
    frame = session.tick()

    assert seen == [frame]
    assert session.state is MonitorState.STOPPED
    assert live.closed == 1
    assert session.tick() is frame
    assert live.captures == 1


def test_failing_sink_does_not_break_tick() -> None:
    live = FakeLiveSource()
    seen: List[FrameResult] = []

    def _boom(frame: FrameResult) -> None:
        raise RuntimeError("renderer crashed")

    session = _session(live, sinks=[CallbackSink(_boom), CallbackSink(seen.append)])
    session.start()
    frame = session.tick()
    assert seen == [frame]


def test_toggle_simulation_starts_without_microphone() -> None:
    live = FakeLiveSource(fail=True)
    session = _session(live)
    session.set_display_mode(DisplayMode.MECH)
    session.toggle_simulation()

    assert session.simulating
    assert session.is_running
    frame = session.tick()
    assert frame.simulating
    assert frame.peak.index == 240
    assert frame.dominant_hz == 2568
    assert frame.classification.status is HealthStatus.HIGH_FREQ_FAULT


def test_leaving_simulation_swaps_to_live_source() -> None:
    live = FakeLiveSource()
    session = _session(live)
    session.toggle_simulation()
    session.set_simulating(False)

    assert live.opened == 1
    frame = session.tick()
    assert frame.simulating is False
    assert frame.transform == LIVE_PARAMS


def test_leaving_simulation_without_device_keeps_simulating() -> None:
    live = FakeLiveSource(fail=True)
    session = _session(live)
    session.toggle_simulation()
    with pytest.raises(DeviceUnavailable):
        session.set_simulating(False)
    assert session.simulating
    assert session.is_running
    assert session.tick().simulating


def test_entering_simulation_closes_live_source() -> None:
    live = FakeLiveSource()
    session = _session(live)
    session.start()
    session.set_simulating(True)
    assert live.closed == 1
    assert session.tick().simulating


def test_set_simulating_while_stopped_only_sets_flag() -> None:
    created: List[SimulatedSource] = []

    def _factory() -> SimulatedSource:
        src = SimulatedSource(seed=0)
        created.append(src)
        return src

    session = MonitorSession(live_factory=FakeLiveSource, simulated_factory=_factory)
    session.set_simulating(True)
    assert session.state is MonitorState.STOPPED
    assert created == []
    session.start()
    assert len(created) == 1 and created[0].is_open


def test_frame_indices_increase() -> None:
    session = _session(FakeLiveSource())
    session.start()
    indices = [session.tick().frame_index for _ in range(3)]
    assert indices == [0, 1, 2]


def test_context_manager_stops_session() -> None:
    live = FakeLiveSource()
    with _session(live) as session:
        session.start()
    assert live.closed == 1
