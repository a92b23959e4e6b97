"""
Tests for the event and song wire dicts.
"""

import pytest

from virtuoso.errors import SongError
from virtuoso.notes.model import Event, Note, Song


class TestEventFromDict:
    def test_wire_dict(self):
        ev = Event.from_dict({"time": 1, "type": "off", "midi": "60", "sustain": True})
        assert ev == Event(1.0, "off", 60, True)
        assert ev.to_dict() == {"time": 1.0, "type": "off", "midi": 60, "sustain": True}

    def test_sustain_must_be_true(self):
        assert Event.from_dict({"time": 0, "type": "on", "midi": 60, "sustain": "yes"}).sustain is False

    @pytest.mark.parametrize("obj", [
        {"time": 0, "type": "up", "midi": 60},
        {"time": 0, "type": "on"},
        {"time": "soon", "type": "on", "midi": 60},
        ["on", 60],
    ])
    def test_malformed(self, obj):
        with pytest.raises(SongError):
            Event.from_dict(obj)

    @pytest.mark.parametrize("time,midi", [
        (-0.5, 60),
        (float("nan"), 60),
        (0.0, 128),
        (0.0, -1),
    ])
    def test_out_of_range(self, time, midi):
        with pytest.raises(SongError):
            Event.from_dict({"time": time, "type": "on", "midi": midi})

    def test_whole_midi_range_accepted(self):
        assert Event.from_dict({"time": 0, "type": "on", "midi": 0}).midi == 0
        assert Event.from_dict({"time": 0, "type": "on", "midi": 127}).midi == 127


def test_note_wire_dict():
    note = Note.from_dict({"startTime": 0.5, "endTime": 1, "midi": 64})
    assert note == Note(0.5, 1.0, 64, False)
    assert note.to_dict() == {"startTime": 0.5, "endTime": 1.0, "midi": 64, "sustain": False}


class TestSongFromDict:
    def test_song(self):
        song = Song.from_dict({"name": "a", "composer": "b",
                               "data": [{"time": 2, "type": "on", "midi": 60}]})
        assert (song.name, song.composer, song.description) == ("a", "b", None)
        assert song.duration == 2.0

    @pytest.mark.parametrize("obj", [
        [],
        {"name": "a"},
        {"data": []},
        {"name": "a", "data": "nope"},
        {"name": "a", "data": [{"time": -1, "type": "on", "midi": 60}]},
    ])
    def test_rejected(self, obj):
        with pytest.raises(SongError):
            Song.from_dict(obj)
