"""
Tests for the JSON and MIDI-file song stores.
Uses pytest's tmp_path for all file system work.
"""

import json

import pytest

from virtuoso.errors import SongError, StoreError
from virtuoso.notes.model import Event, Song
from virtuoso.songs.store import JsonSongStore, MidiSongStore, sanitize_name


def make_song(name="Recording 1", composer=None):
    return Song(name=name, composer=composer, data=[
        Event(0.0, "on", 60, False), Event(0.5, "off", 60, False),
        Event(0.5, "on", 67, True), Event(1.0, "off", 67, True),
    ])


class TestSanitizeName:
    def test_examples(self):
        assert sanitize_name("My Song!") == "my-song"
        assert sanitize_name("  --Für Elise-- ") == "f-r-elise"
        assert sanitize_name("Take 2 (final)") == "take-2-final"
        assert sanitize_name("???") == ""


class TestJsonSongStore:
    def test_missing_file_is_empty(self, tmp_path):
        assert JsonSongStore(tmp_path / "songs.json").list() == []

    def test_save_and_list(self, tmp_path):
        store = JsonSongStore(tmp_path / "songs.json")
        assert store.save(make_song("a")) == 0
        assert store.save(make_song("b", composer="Me")) == 1

        songs = store.list()
        assert [s.name for s in songs] == ["a", "b"]
        assert songs[1].composer == "Me"
        assert songs[0].data == make_song().data

    def test_file_is_json_array_of_wire_dicts(self, tmp_path):
        path = tmp_path / "songs.json"
        JsonSongStore(path).save(make_song("a"))
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw[0]["data"][0] == {"time": 0.0, "type": "on", "midi": 60, "sustain": False}

    def test_update_and_delete(self, tmp_path):
        store = JsonSongStore(tmp_path / "songs.json")
        for name in ("a", "b", "c"):
            store.save(make_song(name))
        store.update(1, make_song("B"))
        store.delete(0)
        assert [s.name for s in store.list()] == ["B", "c"]

        with pytest.raises(IndexError):
            store.delete(5)
        with pytest.raises(IndexError):
            store.update(-1, make_song())

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "songs.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreError):
            JsonSongStore(path).list()

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "songs.json"
        path.write_text('{"songs": []}', encoding="utf-8")
        with pytest.raises(StoreError):
            JsonSongStore(path).list()


class TestMidiSongStore:
    def test_save_writes_file_and_manifest(self, tmp_path):
        store = MidiSongStore(tmp_path)
        assert store.save(make_song("My Song")) == "my-song.mid"
        assert (tmp_path / "my-song.mid").read_bytes()[:4] == b"MThd"
        manifest = json.loads((tmp_path / "manifest.json").read_text())
        assert manifest == {"songs": ["my-song.mid"]}

    def test_save_twice_keeps_one_entry(self, tmp_path):
        store = MidiSongStore(tmp_path)
        store.save(make_song("x"))
        store.save(make_song("x"))
        assert store.files() == ["x.mid"]

    def test_list_decodes_saved_songs(self, tmp_path):
        store = MidiSongStore(tmp_path)
        store.save(make_song("Night Piece"))
        songs = store.list()
        assert len(songs) == 1
        song = songs[0]
        assert song.name == "night-piece"
        assert song.composer == "Unknown"
        assert [(e.time, e.type, e.midi) for e in song.data] == [
            (0.0, "on", 60), (0.5, "off", 60), (0.5, "on", 67), (1.0, "off", 67),
        ]

    def test_list_skips_bad_entries(self, tmp_path):
        store = MidiSongStore(tmp_path)
        store.save(make_song("good"))
        (tmp_path / "notes.txt").write_text("hello")
        (tmp_path / "broken.mid").write_bytes(b"not a midi file")
        files = store.files() + ["missing.mid", "notes.txt", "broken.mid"]
        (tmp_path / "manifest.json").write_text(json.dumps({"songs": files}))

        assert [s.name for s in store.list()] == ["good"]

    def test_list_skips_unreadable_file(self, tmp_path):
        store = MidiSongStore(tmp_path)
        store.save(make_song("good"))
        (tmp_path / "folder.mid").mkdir()
        files = ["folder.mid"] + store.files()
        (tmp_path / "manifest.json").write_text(json.dumps({"songs": files}))

        assert [s.name for s in store.list()] == ["good"]

    def test_empty_store(self, tmp_path):
        assert MidiSongStore(tmp_path / "nowhere").list() == []

    def test_save_rejects_empty_song(self, tmp_path):
        store = MidiSongStore(tmp_path)
        with pytest.raises(SongError):
            store.save(Song(name="empty", data=[]))
        with pytest.raises(SongError):
            store.save(make_song("!!!"))

    def test_delete(self, tmp_path):
        store = MidiSongStore(tmp_path)
        store.save(make_song("a"))
        store.save(make_song("b"))
        store.delete(0)
        assert store.files() == ["b.mid"]
        assert not (tmp_path / "a.mid").exists()
        with pytest.raises(IndexError):
            store.delete(3)
