# virtuoso/timeline/player.py
import logging
import time
from typing import Callable, Dict, Iterable, List, Optional

from virtuoso.audio import PlaybackDevice
from virtuoso.config import PlaybackConfig
from virtuoso.notes.model import Event

log = logging.getLogger(__name__)

KeyCallback = Callable[[int, bool], None]


def format_time(seconds: Optional[float]) -> str:
    if seconds is None:
        return "00:00"
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins:02d}:{secs:02d}"


class Player:
    """Plays an event list on a device as song time advances.

    Time is pushed in from outside through advance(dt), so the caller owns
    the clock. Events before start_time are not sounded; they only update
    key state through on_key. A sustained off leaves its voice ringing.
    """
    def __init__(self, events: Iterable[Event], device: PlaybackDevice,
                 on_key: Optional[KeyCallback] = None,
                 on_complete: Optional[Callable[[], None]] = None,
                 start_time: float = 0.0, speed: Optional[float] = None,
                 velocity: Optional[int] = None,
                 cfg: Optional[PlaybackConfig] = None):
        self.cfg = cfg or PlaybackConfig()
        self.events: List[Event] = sorted(events, key=lambda e: e.time)
        self.device = device
        self.on_key = on_key
        self.on_complete = on_complete
        self.speed = speed if speed is not None else self.cfg.speed
        self.velocity = velocity if velocity is not None else self.cfg.velocity
        self.duration = self.events[-1].time + self.cfg.tail_seconds if self.events else 0.0

        self.time = start_time
        self.i = 0
        self.active: Dict[int, float] = {}  # midi -> start time
        self.is_playing = True
        self.finished = False

        # seek: reflect state up to start_time without sounding anything
        while self.i < len(self.events) and self.events[self.i].time < start_time:
            ev = self.events[self.i]
            if ev.type == "on":
                self.active[ev.midi] = ev.time
                self._key(ev.midi, True)
            else:
                if not ev.sustain:
                    self.active.pop(ev.midi, None)
                self._key(ev.midi, False)
            self.i += 1

    def _key(self, midi: int, on: bool):
        if self.on_key:
            self.on_key(midi, on)

    def _fire(self, ev: Event):
        if ev.type == "on":
            self.device.play_note(ev.midi, self.velocity)
            self.active[ev.midi] = ev.time
            self._key(ev.midi, True)
        else:
            if not ev.sustain:
                self.device.stop_note(ev.midi)
                self.active.pop(ev.midi, None)
            self._key(ev.midi, False)

    def advance(self, dt: float) -> List[Event]:
        """Move song time by dt * speed and fire everything that fell due."""
        if not self.is_playing:
            return []
        self.time += dt * self.speed
        fired: List[Event] = []
        while self.i < len(self.events) and self.events[self.i].time <= self.time:
            ev = self.events[self.i]
            self._fire(ev)
            fired.append(ev)
            self.i += 1
        if self.time >= self.duration:
            self.is_playing = False
            self.finished = True
            log.debug("Playback complete at %s", format_time(self.time))
            if self.on_complete:
                self.on_complete()
        return fired

    def stop(self):
        """Halt playback and release every voice still sounding, sustained ones too."""
        self.is_playing = False
        for midi in list(self.active):
            self.device.stop_note(midi)
        self.active.clear()

    @property
    def remaining(self) -> float:
        return max(0.0, (self.duration - self.time) / self.speed) if self.speed > 0 else 0.0

    def run(self, clock: Callable[[], float] = time.perf_counter,
            sleep: Callable[[float], None] = time.sleep,
            on_frame: Optional[Callable[[float], object]] = None):
        """Block until the song finishes, advancing from a real clock.

        on_frame receives the same wall-clock dt, e.g. to drive a Metronome.
        """
        frame = 1.0 / self.cfg.fps
        last = clock()
        while self.is_playing:
            sleep(frame)
            now = clock()
            self.advance(now - last)
            if on_frame:
                on_frame(now - last)
            last = now
