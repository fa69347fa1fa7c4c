"""Unit tests for the stress accumulator and mood classifier."""

import numpy as np
import pytest

from noisecat.mood.base import MOOD_DESCRIPTORS, Mood
from noisecat.mood.machine import StateMachine, classify
from noisecat.mood.rates import BandRelativeRate, LinearExcessRate, band_for
from noisecat.mood.settings import Settings, Thresholds

FPS = 60
DURATION = 3.0


def _drive(machine: StateMachine, loudness: float, frames: int):
    reading = None
    for _ in range(frames):
        reading = machine.update(loudness)
    return reading


class TestClassify:
    @pytest.mark.parametrize(
        "stress, mood",
        [
            (0.0, Mood.SLEEPING),
            (9.99, Mood.SLEEPING),
            (10.0, Mood.CALM),
            (29.9, Mood.CALM),
            (30.0, Mood.ANXIOUS),
            (59.9, Mood.ANXIOUS),
            (60.0, Mood.IRRITATED),
            (90.0, Mood.PANICKED),
            (100.0, Mood.PANICKED),
        ],
    )
    def test_default_bands(self, stress, mood):
        assert classify(stress, Thresholds()) is mood

    def test_thresholds_default(self):
        assert classify(42.0) is Mood.ANXIOUS
        assert classify(5.0) is Mood.SLEEPING

    def test_deterministic(self):
        thresholds = Thresholds(5.0, 20.0, 40.0, 80.0)
        assert classify(42.0, thresholds) is classify(42.0, thresholds)

    def test_highest_band_wins_on_equal_bounds(self):
        thresholds = Thresholds(10.0, 30.0, 30.0, 60.0)
        assert classify(30.0, thresholds) is Mood.IRRITATED

    def test_method_uses_current_thresholds(self):
        machine = StateMachine()
        machine.set_settings(thresholds=(20.0, 40.0, 60.0, 80.0))
        assert machine.classify(15.0) is Mood.SLEEPING


class TestBands:
    def test_band_lookup(self):
        t = Thresholds()
        assert band_for(0.0, t) == (0.0, 10.0)
        assert band_for(50.0, t) == (30.0, 60.0)
        assert band_for(60.0, t) == (60.0, 90.0)

    def test_top_band_is_closed(self):
        assert band_for(100.0, Thresholds()) == (90.0, 100.0)

    def test_machine_band_tracks_current_stress(self):
        machine = StateMachine()
        assert machine.band() == (0.0, 10.0)
        while machine.stress < 50.0:
            machine.update(255.0)
        assert machine.band() == (30.0, 60.0)
        assert machine.band(95.0) == (90.0, 100.0)

    def test_degenerate_top_band_still_decays(self):
        machine = StateMachine(settings=Settings(thresholds=Thresholds(10.0, 30.0, 60.0, 100.0)))
        _drive(machine, 255.0, 2000)
        assert machine.stress == 100.0
        reading = machine.update(0.0)
        assert reading.stress < 100.0


class TestUpdate:
    def test_stress_always_bounded(self):
        machine = StateMachine()
        rng = np.random.default_rng(42)
        for loudness in rng.uniform(0.0, 255.0, 3000):
            reading = machine.update(loudness)
            assert 0.0 <= reading.stress <= 100.0

    def test_reaches_calm_after_one_transition_duration(self):
        machine = StateMachine()
        before = machine.stress
        reading = None
        frames = 0
        for frames in range(1, 1000):
            before = machine.stress
            reading = machine.update(255.0)
            if reading.mood is not Mood.SLEEPING:
                break
        assert reading.mood is Mood.CALM
        assert 179 <= frames <= 181
        assert before < 10.0 <= reading.stress

    def test_sustained_noise_panics(self):
        machine = StateMachine()
        reading = _drive(machine, 255.0, 1200)
        assert reading.stress == 100.0
        assert reading.mood is Mood.PANICKED

    def test_sustained_silence_sleeps(self):
        machine = StateMachine()
        _drive(machine, 255.0, 1200)
        # five bands, each DURATION seconds wide in time
        reading = _drive(machine, 0.0, int(5 * DURATION * FPS) + 30)
        assert reading.stress == 0.0
        assert reading.mood is Mood.SLEEPING

    def test_decay_rate_follows_current_band(self):
        machine = StateMachine()
        while machine.stress < 50.0:
            machine.update(255.0)
        start = machine.stress
        assert machine.mood is Mood.ANXIOUS

        machine.update(0.0)
        assert start - machine.stress == pytest.approx((60 - 30) / (DURATION * FPS))

        frames = 1
        while machine.stress >= 30.0:
            machine.update(0.0)
            frames += 1
        assert frames == pytest.approx((start - 30.0) * DURATION * FPS / 30.0, abs=2)

        before = machine.stress
        machine.update(0.0)
        assert before - machine.stress == pytest.approx((30 - 10) / (DURATION * FPS))

    def test_quiet_room_below_threshold_decays(self):
        machine = StateMachine()
        _drive(machine, 255.0, 10)
        before = machine.stress
        machine.update(10.0)  # not above the floor
        assert machine.stress < before

    @pytest.mark.parametrize("loudness", [float("nan"), float("inf"), -5.0])
    def test_bad_loudness_is_silence(self, loudness):
        machine = StateMachine()
        reading = machine.update(loudness)
        assert reading.stress == 0.0
        assert reading.mood is Mood.SLEEPING

    def test_reset(self):
        changes = []
        machine = StateMachine(on_state_change=changes.append)
        _drive(machine, 255.0, 400)
        n = len(changes)
        machine.reset()
        assert machine.stress == 0.0
        assert machine.mood is Mood.SLEEPING
        assert len(changes) == n


class TestNotification:
    def test_fires_once_per_transition(self):
        changes = []
        machine = StateMachine(on_state_change=changes.append)
        _drive(machine, 255.0, 1200)
        _drive(machine, 0.0, 1200)
        assert [d.mood for d in changes] == [
            Mood.CALM, Mood.ANXIOUS, Mood.IRRITATED, Mood.PANICKED,
            Mood.IRRITATED, Mood.ANXIOUS, Mood.CALM, Mood.SLEEPING,
        ]

    def test_silent_within_a_band(self):
        changes = []
        machine = StateMachine(on_state_change=changes.append)
        _drive(machine, 255.0, 10)
        assert machine.stress > 0.0
        assert changes == []

    def test_receives_descriptor_before_return(self):
        seen = []
        machine = StateMachine(on_state_change=lambda d: seen.append((d, machine.mood)))
        _drive(machine, 255.0, 200)
        descriptor, mood_at_call = seen[0]
        assert descriptor == MOOD_DESCRIPTORS[Mood.CALM]
        assert descriptor.text == "Meow"
        assert mood_at_call is Mood.CALM

    def test_threshold_change_alone_does_not_notify(self):
        changes = []
        machine = StateMachine(on_state_change=changes.append)
        _drive(machine, 255.0, 200)
        n = len(changes)
        machine.set_settings(thresholds=(50.0, 60.0, 70.0, 80.0))
        assert len(changes) == n
        machine.update(0.0)
        assert changes[-1].mood is Mood.SLEEPING


class TestSetSettings:
    def test_zero_duration_is_floored(self):
        machine = StateMachine()
        settings = machine.set_settings(transition_duration=0)
        assert settings.transition_duration == pytest.approx(0.1)
        reading = machine.update(255.0)
        assert reading.stress == pytest.approx(10.0 / (0.1 * FPS))

    def test_negative_duration_is_floored(self):
        machine = StateMachine()
        assert machine.set_settings(transition_duration=-4.0).transition_duration == pytest.approx(0.1)

    def test_partial_update_keeps_other_fields(self):
        machine = StateMachine()
        machine.set_settings(transition_duration=5.0)
        settings = machine.set_settings(sensitivity=2.0)
        assert settings.transition_duration == 5.0
        assert settings.sensitivity == 2.0
        assert settings.thresholds == Thresholds()

    def test_sensitivity_scales_rise(self):
        machine = StateMachine()
        machine.set_settings(sensitivity=2.0)
        reading = machine.update(255.0)
        assert reading.stress == pytest.approx(2.0 * 10.0 / (DURATION * FPS))

    def test_out_of_order_thresholds_are_clamped(self):
        machine = StateMachine()
        settings = machine.set_settings(thresholds=[50.0, 30.0, 60.0, 90.0])
        assert settings.thresholds == Thresholds(50.0, 50.0, 60.0, 90.0)

    def test_constructor_settings(self):
        machine = StateMachine(settings=Settings(sensitivity=3.0, transition_duration=0.0))
        assert machine.settings.sensitivity == 3.0
        assert machine.settings.transition_duration == pytest.approx(0.1)


class TestLinearExcessRate:
    def _machine(self) -> StateMachine:
        return StateMachine(rate_model=LinearExcessRate(frame_rate=FPS, volume_threshold=10.0, gain=0.005))

    def test_rise_proportional_to_excess(self):
        machine = self._machine()
        assert machine.update(110.0).stress == pytest.approx(0.5)

    def test_decay_from_full_scale(self):
        machine = self._machine()
        machine.set_settings(transition_duration=10.0)
        _drive(machine, 110.0, 2)
        assert machine.update(0.0).stress == pytest.approx(1.0 - 100.0 / (10.0 * FPS))

    def test_sustained_noise_panics(self):
        machine = self._machine()
        reading = _drive(machine, 255.0, 100)
        assert reading.stress == 100.0
        assert reading.mood is Mood.PANICKED

    def test_default_model_is_band_relative(self):
        assert isinstance(StateMachine().rate_model, BandRelativeRate)
