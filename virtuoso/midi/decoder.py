# virtuoso/midi/decoder.py
"""
Standard MIDI File decoder.

Reads the raw bytes of a format 0/1 SMF and flattens every track into one
time-ordered list of piano note on/off events in seconds. Only Note On,
Note Off and Set Tempo matter here; everything else is skipped. Malformed
input never raises: a truncated chunk ends early and whatever was decoded
so far is kept.
"""
import logging
import os
import re
from typing import List, Optional

from virtuoso.config import DecoderConfig
from virtuoso.notes.model import Event, Song

log = logging.getLogger(__name__)

HEADER_MAGIC = b"MThd"
TRACK_MAGIC = b"MTrk"
HEADER_LEN = 14

NOTE_OFF = 0x80
NOTE_ON = 0x90
POLY_PRESSURE = 0xA0
CONTROL_CHANGE = 0xB0
PROGRAM_CHANGE = 0xC0
CHANNEL_PRESSURE = 0xD0
PITCH_BEND = 0xE0
SYSTEM = 0xF0
META = 0xFF
META_SET_TEMPO = 0x51


class _Truncated(Exception):
    pass


class _TrackCursor:
    """Read position plus the per-track state threaded through the parse loop."""

    def __init__(self, data: bytes, pos: int, end: int):
        self.data = data
        self.pos = pos
        self.end = end
        self.ticks = 0
        self.running_status = 0

    def more(self) -> bool:
        return self.pos < self.end and self.pos < len(self.data) - 1

    def u8(self) -> int:
        if self.pos >= len(self.data):
            raise _Truncated()
        b = self.data[self.pos]
        self.pos += 1
        return b

    def skip(self, n: int):
        if self.pos + n > len(self.data):
            raise _Truncated()
        self.pos += n

    def vlq(self) -> int:
        # 7 bits per byte, high bit set means another byte follows
        byte = self.u8()
        value = byte & 0x7F
        while byte & 0x80 and self.pos < len(self.data):
            byte = self.u8()
            value = (value << 7) | (byte & 0x7F)
        return value


def _u16(data: bytes, pos: int) -> int:
    return (data[pos] << 8) | data[pos + 1]


def _u32(data: bytes, pos: int) -> int:
    return (data[pos] << 24) | (data[pos + 1] << 16) | (data[pos + 2] << 8) | data[pos + 3]


def read_division(data: bytes, cfg: Optional[DecoderConfig] = None) -> int:
    """Ticks per quarter note from the header, or the fallback when out of range."""
    cfg = cfg or DecoderConfig()
    division = _u16(data, 12)
    if division <= 0 or division > 32767:
        log.debug("Division %d out of range, using %d", division, cfg.fallback_division)
        return cfg.fallback_division
    return division


def ticks_to_seconds(ticks: int, tempo: int, division: int) -> float:
    return (ticks * tempo) / (division * 1_000_000)


class _Scan:
    """State shared by all tracks of one decode call."""

    def __init__(self, data: bytes, cfg: DecoderConfig):
        self.data = data
        self.cfg = cfg
        self.division = read_division(data, cfg)
        self.tempo = cfg.default_tempo
        self.events: List[Event] = []

    def emit(self, cur: _TrackCursor, kind: str, note: int):
        if not (self.cfg.midi_low <= note <= self.cfg.midi_high):
            return
        t = ticks_to_seconds(cur.ticks, self.tempo, self.division)
        self.events.append(Event(time=t, type=kind, midi=note, sustain=True))

    def track(self, cur: _TrackCursor):
        try:
            while cur.more():
                cur.ticks += cur.vlq()
                if cur.pos >= len(self.data):
                    break
                status = cur.u8()
                if status < 0x80:
                    if not cur.running_status:
                        log.debug("Data byte 0x%02X at %d without running status", status, cur.pos - 1)
                        continue
                    status = cur.running_status
                    cur.pos -= 1
                else:
                    cur.running_status = status
                self.message(cur, status)
        except _Truncated:
            log.debug("Track chunk truncated at offset %d", cur.pos)

    def message(self, cur: _TrackCursor, status: int):
        kind = status & 0xF0
        if kind == NOTE_ON:
            note, velocity = cur.u8(), cur.u8()
            # velocity 0 is a note off
            self.emit(cur, "on" if velocity > 0 else "off", note)
        elif kind == NOTE_OFF:
            note = cur.u8()
            cur.u8()  # release velocity
            self.emit(cur, "off", note)
        elif status == META:
            meta_type = cur.u8()
            length = cur.u8()
            if meta_type == META_SET_TEMPO and length == 3:
                self.tempo = (cur.u8() << 16) | (cur.u8() << 8) | cur.u8()
            else:
                cur.skip(length)
        elif kind in (PROGRAM_CHANGE, CHANNEL_PRESSURE):
            cur.skip(1)
        elif kind in (PITCH_BEND, CONTROL_CHANGE):
            cur.skip(2)
        elif kind in (POLY_PRESSURE, SYSTEM):
            # length-prefixed, best effort
            cur.skip(cur.u8())

    def run(self) -> List[Event]:
        data = self.data
        i = HEADER_LEN
        tracks = 0
        while i < len(data) - 8:
            if data[i:i + 4] != TRACK_MAGIC:
                i += 1
                continue
            length = _u32(data, i + 4)
            start = i + 8
            end = start + length
            self.track(_TrackCursor(data, start, end))
            tracks += 1
            i = end
        log.debug("Scanned %d track chunk(s), %d event(s)", tracks, len(self.events))
        # list.sort is stable: ties keep emission order
        self.events.sort(key=lambda e: e.time)
        return self.events


def song_name(source_name: str) -> str:
    return re.sub(r"\.[^/.]+$", "", source_name)


def decode(data: bytes, source_name: str, cfg: Optional[DecoderConfig] = None) -> Optional[Song]:
    cfg = cfg or DecoderConfig()
    if len(data) < HEADER_LEN:
        log.warning("MIDI data too short (%d bytes): %s", len(data), source_name)
        return None
    if bytes(data[:4]) != HEADER_MAGIC:
        log.warning("Invalid MIDI header: %s", source_name)
        return None

    events = _Scan(bytes(data), cfg).run()
    if not events:
        log.warning("No events found in MIDI file: %s", source_name)
        return None
    return Song(name=song_name(source_name), composer="Unknown",
                description="Converted from MIDI", data=events)


def decode_file(path: str, cfg: Optional[DecoderConfig] = None) -> Optional[Song]:
    with open(path, "rb") as f:
        data = f.read()
    return decode(data, os.path.basename(path), cfg)
