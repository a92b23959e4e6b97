# virtuoso/songs/__init__.py
from virtuoso.songs.store import JsonSongStore, MidiSongStore, SongStore, sanitize_name

__all__ = ["JsonSongStore", "MidiSongStore", "SongStore", "sanitize_name"]
