# virtuoso/songs/store.py
"""
Song persistence.

Two stores share the list/save/delete shape the player and editor expect:

- JsonSongStore keeps every song, events included, in one JSON array file.
- MidiSongStore keeps one .mid file per song plus a manifest.json listing
  them; songs are decoded on list() and encoded on save().
"""
import json
import logging
import re
from pathlib import Path
from typing import List, Optional, Protocol, Union

from virtuoso.config import DecoderConfig, EncoderConfig
from virtuoso.errors import SongError, StoreError
from virtuoso.midi.decoder import decode
from virtuoso.midi.encoder import encode
from virtuoso.notes.model import Song

log = logging.getLogger(__name__)

MANIFEST = "manifest.json"
MIDI_SUFFIXES = (".mid", ".midi")


class SongStore(Protocol):
    def list(self) -> List[Song]: ...

    def save(self, song: Song): ...

    def delete(self, index: int): ...


def sanitize_name(name: str) -> str:
    """'My Song!' -> 'my-song'"""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class JsonSongStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> List[dict]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                obj = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(obj, list):
            raise StoreError(f"{self.path} does not hold a JSON array")
        return obj

    def _write(self, items: List[dict]):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e

    def list(self) -> List[Song]:
        return [Song.from_dict(obj) for obj in self._read()]

    def save(self, song: Song) -> int:
        items = self._read()
        items.append(song.to_dict())
        self._write(items)
        return len(items) - 1

    def update(self, index: int, song: Song):
        items = self._read()
        if not 0 <= index < len(items):
            raise IndexError(f"No song at index {index}")
        items[index] = song.to_dict()
        self._write(items)

    def delete(self, index: int):
        items = self._read()
        if not 0 <= index < len(items):
            raise IndexError(f"No song at index {index}")
        del items[index]
        self._write(items)


class MidiSongStore:
    def __init__(self, directory: Union[str, Path],
                 decoder_cfg: Optional[DecoderConfig] = None,
                 encoder_cfg: Optional[EncoderConfig] = None):
        self.directory = Path(directory)
        self.decoder_cfg = decoder_cfg or DecoderConfig()
        self.encoder_cfg = encoder_cfg or EncoderConfig()

    @property
    def manifest_path(self) -> Path:
        return self.directory / MANIFEST

    def files(self) -> List[str]:
        if not self.manifest_path.exists():
            return []
        try:
            with open(self.manifest_path, "r", encoding="utf-8") as f:
                manifest = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read {self.manifest_path}: {e}") from e
        return list(manifest.get("songs") or [])

    def _write_manifest(self, files: List[str]):
        with open(self.manifest_path, "w", encoding="utf-8") as f:
            json.dump({"songs": files}, f, indent=2)

    def list(self) -> List[Song]:
        songs: List[Song] = []
        for name in self.files():
            path = self.directory / name
            if not path.exists():
                log.warning("Manifest entry missing on disk: %s", name)
                continue
            if not name.lower().endswith(MIDI_SUFFIXES):
                log.warning("Skipping unsupported file format: %s", name)
                continue
            try:
                data = path.read_bytes()
            except OSError as e:
                log.error("Error reading MIDI file %s: %s", name, e)
                continue
            log.debug("Parsing MIDI file: %s, size: %d bytes", name, len(data))
            song = decode(data, name, self.decoder_cfg)
            if song is None:
                log.error("Failed to parse MIDI file: %s", name)
                continue
            log.info("Parsed %s: %d events", name, len(song.data))
            songs.append(song)
        return songs

    def save(self, song: Song) -> str:
        stem = sanitize_name(song.name)
        if not stem:
            raise SongError(f"Song name {song.name!r} has no usable characters")
        if not song.data:
            raise SongError("No events to save")
        file_name = f"{stem}.mid"
        payload = encode(song.data, self.encoder_cfg)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / file_name).write_bytes(payload)
            files = self.files()
            if file_name not in files:
                files.append(file_name)
                self._write_manifest(files)
        except OSError as e:
            raise StoreError(f"Cannot save {file_name}: {e}") from e
        log.info("Saved %s (%d bytes)", file_name, len(payload))
        return file_name

    def delete(self, index: int):
        files = self.files()
        if not 0 <= index < len(files):
            raise IndexError(f"No song at index {index}")
        name = files.pop(index)
        try:
            (self.directory / name).unlink(missing_ok=True)
            self._write_manifest(files)
        except OSError as e:
            raise StoreError(f"Cannot delete {name}: {e}") from e
