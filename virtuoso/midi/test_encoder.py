"""
Tests for writing event lists out as MIDI files.
"""

import io

import mido
import pytest

from virtuoso.config import EncoderConfig
from virtuoso.errors import SongError
from virtuoso.midi.decoder import decode
from virtuoso.midi.encoder import encode, events_to_tick_notes, seconds_to_ticks
from virtuoso.notes.model import Event


def ev(t, kind, midi, sustain=False):
    return Event(time=t, type=kind, midi=midi, sustain=sustain)


def triples(events):
    return [(e.time, e.type, e.midi) for e in events]


class TestTicks:
    def test_seconds_to_ticks_at_120_bpm(self):
        cfg = EncoderConfig()
        assert seconds_to_ticks(0.5, cfg) == 480
        assert seconds_to_ticks(1.0, cfg) == 960
        assert seconds_to_ticks(0.0004, cfg) == 0

    def test_pairs_and_minimum_duration(self):
        cfg = EncoderConfig()
        notes = events_to_tick_notes([ev(0, "on", 60), ev(0, "off", 60)], cfg)
        assert notes == [(60, 0, 1)]

    def test_unclosed_note_rings_one_beat_past_last_event(self):
        cfg = EncoderConfig()
        events = [ev(0, "on", 60), ev(0.5, "on", 62), ev(1.0, "off", 62)]
        notes = events_to_tick_notes(events, cfg)
        assert notes == [(60, 0, 960 + 480), (62, 480, 480)]

    def test_orphan_off_ignored(self):
        cfg = EncoderConfig()
        assert events_to_tick_notes([ev(0.1, "off", 60)], cfg) == []


class TestEncode:
    def test_file_layout(self):
        data = encode([ev(0, "on", 60), ev(0.5, "off", 60)])
        mid = mido.MidiFile(file=io.BytesIO(data))
        assert mid.ticks_per_beat == 480
        assert len(mid.tracks) == 1
        tempos = [m.tempo for m in mid.tracks[0] if m.type == "set_tempo"]
        assert tempos == [500000]
        notes = [m for m in mid.tracks[0] if m.type in ("note_on", "note_off")]
        assert [(m.type, m.note) for m in notes] == [("note_on", 60), ("note_off", 60)]
        assert notes[0].velocity == 100

    def test_decodes_back_to_same_events(self):
        events = [
            ev(0.0, "on", 60), ev(0.0, "on", 64),
            ev(0.5, "off", 60), ev(0.5, "on", 60),
            ev(1.0, "off", 60), ev(1.25, "off", 64),
        ]
        song = decode(encode(events), "roundtrip.mid")
        assert triples(song.data) == [
            (0.0, "on", 60), (0.0, "on", 64),
            (0.5, "off", 60), (0.5, "on", 60),
            (1.0, "off", 60), (pytest.approx(1.25), "off", 64),
        ]

    def test_unsorted_input(self):
        events = [ev(1.0, "off", 72), ev(0.0, "on", 72)]
        song = decode(encode(events), "x.mid")
        assert triples(song.data) == [(0.0, "on", 72), (1.0, "off", 72)]

    def test_other_tempo(self):
        cfg = EncoderConfig(bpm=60, ticks_per_quarter=96)
        data = encode([ev(0, "on", 60), ev(2.0, "off", 60)], cfg)
        mid = mido.MidiFile(file=io.BytesIO(data))
        assert mid.ticks_per_beat == 96
        song = decode(data, "x.mid")
        assert song.data[-1].time == pytest.approx(2.0)

    def test_nothing_to_encode(self):
        with pytest.raises(SongError):
            encode([])
        with pytest.raises(SongError):
            encode([ev(0.5, "off", 60)])
