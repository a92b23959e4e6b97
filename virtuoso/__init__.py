# virtuoso/__init__.py
"""Piano application core: MIDI import, event/note conversion, recording and playback."""

__version__ = "0.1.0"
