# virtuoso/notes/convert.py
from typing import Dict, Iterable, List, Tuple

from virtuoso.notes.model import DEFAULT_NOTE_SECONDS, Event, Note


def events_to_notes(events: Iterable[Event]) -> List[Note]:
    """Pair on/off events into notes.

    One pending slot per pitch: a second "on" before its "off" replaces the
    pending start, an "off" with nothing pending is dropped, and an "on" that
    is never closed lasts DEFAULT_NOTE_SECONDS.
    """
    pending: Dict[int, Tuple[float, bool]] = {}  # midi -> (start, sustain)
    notes: List[Note] = []

    for ev in sorted(events, key=lambda e: e.time):
        if ev.type == "on":
            pending[ev.midi] = (ev.time, ev.sustain)
        elif ev.type == "off":
            slot = pending.pop(ev.midi, None)
            if slot is not None:
                start, sustain = slot
                notes.append(Note(start_time=start, end_time=ev.time, midi=ev.midi, sustain=sustain))

    for midi, (start, sustain) in pending.items():
        notes.append(Note(start_time=start, end_time=start + DEFAULT_NOTE_SECONDS,
                          midi=midi, sustain=sustain))

    notes.sort(key=lambda n: n.start_time)
    return notes


def notes_to_events(notes: Iterable[Note]) -> List[Event]:
    events: List[Event] = []
    for n in sorted(notes, key=lambda n: n.start_time):
        events.append(Event(time=n.start_time, type="on", midi=n.midi, sustain=n.sustain))
        events.append(Event(time=n.end_time, type="off", midi=n.midi, sustain=n.sustain))
    events.sort(key=lambda e: e.time)
    return events
