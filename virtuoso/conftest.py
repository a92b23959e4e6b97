"""Shared pytest fixtures."""

import pytest


class FakeDevice:
    """Playback device that records every call."""

    def __init__(self):
        self.calls = []

    def play_note(self, midi, velocity=None):
        self.calls.append(("play", midi, velocity))

    def stop_note(self, midi):
        self.calls.append(("stop", midi))

    def play_click(self, downbeat):
        self.calls.append(("click", downbeat))

    def close(self):
        self.calls.append(("close",))


class FakeClock:
    """Manually advanced clock, callable like time.perf_counter."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def tick(self, dt):
        self.now += dt


@pytest.fixture
def device():
    return FakeDevice()


@pytest.fixture
def clock():
    return FakeClock()
