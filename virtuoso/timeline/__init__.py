# virtuoso/timeline/__init__.py
from virtuoso.timeline.metronome import Metronome
from virtuoso.timeline.player import Player, format_time

__all__ = ["Metronome", "Player", "format_time"]
