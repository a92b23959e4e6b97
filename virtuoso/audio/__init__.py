# virtuoso/audio/__init__.py
from typing import Optional, Protocol


class PlaybackDevice(Protocol):
    """What the recorder and player need from a sound source."""

    def play_note(self, midi: int, velocity: Optional[int] = None): ...

    def stop_note(self, midi: int): ...

    def play_click(self, downbeat: bool): ...

    def close(self): ...


class NullDevice:
    """Silent device, used when no MIDI output is wanted."""

    def play_note(self, midi: int, velocity: Optional[int] = None):
        return None

    def stop_note(self, midi: int):
        pass

    def play_click(self, downbeat: bool):
        pass

    def close(self):
        pass
