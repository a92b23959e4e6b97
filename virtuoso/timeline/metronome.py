# virtuoso/timeline/metronome.py
from typing import List, Optional

from virtuoso.audio import PlaybackDevice


class Metronome:
    """Beat clock: one beat every 60/bpm seconds, downbeat every beats_per_bar."""
    def __init__(self, bpm: int = 100, beats_per_bar: int = 4, device: Optional[PlaybackDevice] = None):
        if bpm <= 0 or beats_per_bar <= 0:
            raise ValueError("bpm and beats_per_bar must be positive")
        self.bpm = bpm
        self.beats_per_bar = beats_per_bar
        self.device = device
        self.beat_count = 0
        self._until_next = 0.0  # first beat sounds immediately

    @property
    def interval(self) -> float:
        return 60.0 / self.bpm

    def advance(self, dt: float) -> List[bool]:
        beats: List[bool] = []
        self._until_next -= dt
        while self._until_next <= 0:
            downbeat = self.beat_count % self.beats_per_bar == 0
            if self.device is not None:
                self.device.play_click(downbeat)
            beats.append(downbeat)
            self.beat_count += 1
            self._until_next += self.interval
        return beats

    def reset(self):
        self.beat_count = 0
        self._until_next = 0.0
