# virtuoso/notes/model.py
from dataclasses import dataclass, field
from typing import List, Optional

from virtuoso.errors import SongError

MIDI_LOW = 21    # A0
MIDI_HIGH = 108  # C8
DEFAULT_NOTE_SECONDS = 1.0


def in_piano_range(midi: int) -> bool:
    return MIDI_LOW <= midi <= MIDI_HIGH


@dataclass(frozen=True)
class Event:
    time: float     # seconds from stream start
    type: str       # "on" | "off"
    midi: int       # MIDI note number
    sustain: bool = False

    def to_dict(self) -> dict:
        return {"time": self.time, "type": self.type, "midi": self.midi, "sustain": self.sustain}

    @classmethod
    def from_dict(cls, obj: dict) -> "Event":
        try:
            kind = str(obj["type"])
            if kind not in ("on", "off"):
                raise SongError(f"Unknown event type: {kind}")
            t, midi = float(obj["time"]), int(obj["midi"])
        except (KeyError, TypeError, ValueError) as e:
            raise SongError(f"Malformed event: {obj!r}") from e
        if not t >= 0 or not 0 <= midi <= 127:
            raise SongError(f"Event out of range: {obj!r}")
        return cls(time=t, type=kind, midi=midi, sustain=obj.get("sustain") is True)


@dataclass(frozen=True)
class Note:
    start_time: float  # seconds
    end_time: float    # seconds
    midi: int
    sustain: bool = False

    def to_dict(self) -> dict:
        return {"startTime": self.start_time, "endTime": self.end_time,
                "midi": self.midi, "sustain": self.sustain}

    @classmethod
    def from_dict(cls, obj: dict) -> "Note":
        try:
            return cls(start_time=float(obj["startTime"]), end_time=float(obj["endTime"]),
                       midi=int(obj["midi"]), sustain=obj.get("sustain") is True)
        except (KeyError, TypeError, ValueError) as e:
            raise SongError(f"Malformed note: {obj!r}") from e


@dataclass
class Song:
    name: str
    data: List[Event] = field(default_factory=list)
    composer: Optional[str] = None
    description: Optional[str] = None

    @property
    def duration(self) -> float:
        return max((e.time for e in self.data), default=0.0)

    def to_dict(self) -> dict:
        out = {"name": self.name}
        if self.composer is not None:
            out["composer"] = self.composer
        if self.description is not None:
            out["description"] = self.description
        out["data"] = [e.to_dict() for e in self.data]
        return out

    @classmethod
    def from_dict(cls, obj: dict) -> "Song":
        if not isinstance(obj, dict):
            raise SongError("Song must be a JSON object")
        name = obj.get("name")
        data = obj.get("data")
        if not name or data is None:
            raise SongError("Name and data are required")
        if not isinstance(data, list):
            raise SongError("Song data must be a list of events")
        return cls(name=str(name),
                   data=[Event.from_dict(e) for e in data],
                   composer=obj.get("composer"),
                   description=obj.get("description"))
