# virtuoso/notes/__init__.py
from virtuoso.notes.model import Event, Note, Song
from virtuoso.notes.convert import events_to_notes, notes_to_events

__all__ = ["Event", "Note", "Song", "events_to_notes", "notes_to_events"]
