# virtuoso/notes/recorder.py
import logging
import time
from typing import Callable, List, Optional

from virtuoso.audio import PlaybackDevice
from virtuoso.notes.model import Event

log = logging.getLogger(__name__)


class Recorder:
    """Live key edges -> events.

    Every edge is forwarded to the device; while recording it is also stamped
    with the seconds elapsed since start() and the sustain state at that edge.
    A release under sustain leaves the voice ringing.
    """
    def __init__(self, device: Optional[PlaybackDevice] = None,
                 clock: Callable[[], float] = time.perf_counter):
        self.device = device
        self.clock = clock
        self.events: List[Event] = []
        self.is_recording = False
        self._t0 = 0.0

    @property
    def elapsed(self) -> float:
        return self.clock() - self._t0 if self.is_recording else 0.0

    def start(self):
        self.events = []
        self._t0 = self.clock()
        self.is_recording = True
        log.info("Recording started")

    def stop(self) -> List[Event]:
        self.is_recording = False
        log.info("Recording stopped: %d event(s)", len(self.events))
        return list(self.events)

    def _record(self, kind: str, midi: int, sustain: bool):
        if self.is_recording:
            self.events.append(Event(time=self.clock() - self._t0, type=kind, midi=midi, sustain=sustain))

    def note_on(self, midi: int, sustain: bool = False, velocity: Optional[int] = None):
        if self.device is not None:
            self.device.play_note(midi, velocity)
        self._record("on", midi, sustain)

    def note_off(self, midi: int, sustain: bool = False):
        if self.device is not None and not sustain:
            self.device.stop_note(midi)
        self._record("off", midi, sustain)
