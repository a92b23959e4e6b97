# virtuoso/notes/editor.py
from dataclasses import replace
from typing import Iterable, List, Optional

from virtuoso.notes.convert import events_to_notes, notes_to_events
from virtuoso.notes.model import Event, Note, in_piano_range

PASTE_OFFSET = 1.0  # seconds after the scroll position


class NoteEditor:
    """Piano-roll editing on plain note data.

    Notes are immutable, so every edit swaps in a new Note; selection is kept
    by identity so two notes with equal fields stay distinct. Edits that would
    make end <= start, push a start below zero or leave the 88-key range are
    ignored rather than clamped.
    """

    def __init__(self, notes: Iterable[Note] = ()):
        self.notes: List[Note] = sorted(notes, key=lambda n: n.start_time)
        self.selected: List[Note] = []
        self.clipboard: List[Note] = []
        self.scroll_x = 0.0

    @classmethod
    def from_events(cls, events: Iterable[Event]) -> "NoteEditor":
        return cls(events_to_notes(events))

    def to_events(self) -> List[Event]:
        return notes_to_events(self.notes)

    # ---------- helpers ----------
    def _index(self, seq: List[Note], note: Note) -> Optional[int]:
        for i, n in enumerate(seq):
            if n is note:
                return i
        return None

    def _swap(self, old: Note, new: Note) -> Note:
        i = self._index(self.notes, old)
        if i is None:
            raise KeyError("note is not part of this editor")
        self.notes[i] = new
        j = self._index(self.selected, old)
        if j is not None:
            self.selected[j] = new
        return new

    def _sort(self):
        self.notes.sort(key=lambda n: n.start_time)

    def is_selected(self, note: Note) -> bool:
        return self._index(self.selected, note) is not None

    # ---------- notes ----------
    def add_note(self, start_time: float, end_time: float, midi: int, sustain: bool = False) -> Note:
        if start_time < 0 or end_time <= start_time:
            raise ValueError(f"Invalid note span {start_time}..{end_time}")
        if not in_piano_range(midi):
            raise ValueError(f"MIDI note {midi} outside the piano range")
        note = Note(start_time=start_time, end_time=end_time, midi=midi, sustain=sustain)
        self.notes.append(note)
        self._sort()
        return note

    # ---------- selection ----------
    def select(self, note: Note, extend: bool = False):
        if not extend:
            self.selected.clear()
        if not self.is_selected(note):
            self.selected.append(note)

    def clear_selection(self):
        self.selected.clear()

    def select_box(self, t0: float, t1: float, midi_lo: int, midi_hi: int, extend: bool = False) -> List[Note]:
        """Select notes overlapping the time window within the pitch band."""
        t0, t1 = min(t0, t1), max(t0, t1)
        midi_lo, midi_hi = min(midi_lo, midi_hi), max(midi_lo, midi_hi)
        if not extend:
            self.selected.clear()
        for n in self.notes:
            if not (midi_lo <= n.midi <= midi_hi):
                continue
            overlaps = (t0 <= n.start_time <= t1) or (t0 <= n.end_time <= t1) \
                or (n.start_time <= t0 and n.end_time >= t1)
            if overlaps and not self.is_selected(n):
                self.selected.append(n)
        return list(self.selected)

    # ---------- drag edits ----------
    def move_selected(self, dt: float, dmidi: int = 0):
        for n in list(self.selected):
            start, end, midi = n.start_time, n.end_time, n.midi
            if start + dt >= 0:
                start, end = start + dt, end + dt
            if dmidi and in_piano_range(midi + dmidi):
                midi += dmidi
            self._swap(n, replace(n, start_time=start, end_time=end, midi=midi))
        self._sort()

    def resize_start(self, note: Note, t: float) -> Note:
        if 0 <= t < note.end_time:
            note = self._swap(note, replace(note, start_time=t))
            self._sort()
        return note

    def resize_end(self, note: Note, t: float) -> Note:
        if t > note.start_time:
            note = self._swap(note, replace(note, end_time=t))
        return note

    # ---------- clipboard ----------
    def copy_selected(self):
        self.clipboard = list(self.selected)

    def paste(self) -> List[Note]:
        if not self.clipboard:
            return []
        first = min(n.start_time for n in self.clipboard)
        offset = self.scroll_x + PASTE_OFFSET - first
        pasted = [replace(n, start_time=n.start_time + offset, end_time=n.end_time + offset)
                  for n in self.clipboard]
        self.notes.extend(pasted)
        self.selected = list(pasted)
        self._sort()
        return pasted

    def delete_selected(self) -> int:
        before = len(self.notes)
        self.notes = [n for n in self.notes if not self.is_selected(n)]
        self.selected.clear()
        return before - len(self.notes)
