# virtuoso/midi/encoder.py
import io
import logging
from typing import Dict, Iterable, List, Optional, Tuple

import mido

from virtuoso.config import EncoderConfig
from virtuoso.errors import SongError
from virtuoso.notes.model import Event

log = logging.getLogger(__name__)


def seconds_to_ticks(t: float, cfg: EncoderConfig) -> int:
    return int(round(t * cfg.ticks_per_quarter * cfg.bpm / 60.0))


def events_to_tick_notes(events: Iterable[Event], cfg: EncoderConfig) -> List[Tuple[int, int, int]]:
    """(midi, start_tick, duration_ticks) per paired note, sorted by start tick."""
    ordered = sorted(events, key=lambda e: e.time)
    pending: Dict[int, int] = {}  # midi -> start tick
    notes: List[Tuple[int, int, int]] = []

    for ev in ordered:
        tick = seconds_to_ticks(ev.time, cfg)
        if ev.type == "on":
            pending[ev.midi] = tick
        elif ev.type == "off":
            start = pending.pop(ev.midi, None)
            if start is not None:
                notes.append((ev.midi, start, max(1, tick - start)))

    # unclosed notes ring one beat past the last event
    last_tick = seconds_to_ticks(ordered[-1].time, cfg) if ordered else 0
    for midi, start in pending.items():
        notes.append((midi, start, max(1, last_tick - start + cfg.ticks_per_quarter)))

    notes.sort(key=lambda n: n[1])
    return notes


def build_midi_file(events: Iterable[Event], cfg: Optional[EncoderConfig] = None) -> mido.MidiFile:
    cfg = cfg or EncoderConfig()
    notes = events_to_tick_notes(events, cfg)
    if not notes:
        raise SongError("No events to save")

    # (tick, order, message): offs sort before ons on the same tick
    timeline = []
    for midi, start, dur in notes:
        timeline.append((start, 1, mido.Message("note_on", note=midi, velocity=cfg.velocity, channel=cfg.channel)))
        timeline.append((start + dur, 0, mido.Message("note_off", note=midi, velocity=0, channel=cfg.channel)))
    timeline.sort(key=lambda x: (x[0], x[1]))

    mid = mido.MidiFile(type=0, ticks_per_beat=cfg.ticks_per_quarter)
    track = mido.MidiTrack()
    mid.tracks.append(track)
    track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(cfg.bpm), time=0))

    last = 0
    for tick, _, msg in timeline:
        track.append(msg.copy(time=tick - last))
        last = tick
    track.append(mido.MetaMessage("end_of_track", time=0))
    log.debug("Encoded %d note(s) into %d message(s)", len(notes), len(track))
    return mid


def encode(events: Iterable[Event], cfg: Optional[EncoderConfig] = None) -> bytes:
    mid = build_midi_file(events, cfg)
    buf = io.BytesIO()
    mid.save(file=buf)
    return buf.getvalue()
