# virtuoso/main.py
import argparse
import json
import logging
import sys
from typing import List, Optional

from virtuoso.config import AppConfig
from virtuoso.errors import SongError, VirtuosoError
from virtuoso.midi.decoder import decode_file
from virtuoso.notes.convert import events_to_notes, notes_to_events
from virtuoso.notes.model import Note, Song
from virtuoso.timeline.metronome import Metronome
from virtuoso.timeline.player import Player, format_time
from virtuoso.utils.logs import init_logging, log_exception

log = logging.getLogger("virtuoso")


def _write_json(obj, out: Optional[str]):
    text = json.dumps(obj, ensure_ascii=False, indent=2)
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)


def _read_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_song(path: str, cfg: AppConfig) -> Song:
    if path.lower().endswith((".mid", ".midi")):
        song = decode_file(path, cfg.decoder)
        if song is None:
            raise SongError(f"Could not parse MIDI file: {path}")
        return song
    return Song.from_dict(_read_json(path))


def cmd_import(args, cfg: AppConfig) -> int:
    song = decode_file(args.file, cfg.decoder)
    if song is None:
        log.error("Could not parse %s", args.file)
        return 1
    log.info("Imported %s: %d events, %s", song.name, len(song.data), format_time(song.duration))
    _write_json(song.to_dict(), args.output)
    return 0


def cmd_to_notes(args, cfg: AppConfig) -> int:
    song = load_song(args.file, cfg)
    _write_json([n.to_dict() for n in events_to_notes(song.data)], args.output)
    return 0


def cmd_to_events(args, cfg: AppConfig) -> int:
    notes = [Note.from_dict(obj) for obj in _read_json(args.file)]
    _write_json([e.to_dict() for e in notes_to_events(notes)], args.output)
    return 0


def cmd_play(args, cfg: AppConfig) -> int:
    from virtuoso.audio.synth import Synth

    song = load_song(args.file, cfg)
    synth = Synth(cfg.audio)
    player = Player(song.data, synth, start_time=args.start, velocity=args.velocity, cfg=cfg.playback)
    metronome = None
    if args.metronome is not None:
        metronome = Metronome(cfg.metronome.bpm, cfg.metronome.beats_per_bar, device=synth)
    log.info("Playing %s (%s)", song.name, format_time(player.duration))
    try:
        player.run(on_frame=metronome.advance if metronome else None)
    except KeyboardInterrupt:
        log.info("Stopped at %s", format_time(player.time))
    finally:
        player.stop()
        synth.close()
    return 0


def cmd_serve(args, cfg: AppConfig) -> int:
    from virtuoso.songs.store import MidiSongStore
    from virtuoso.webui.app import create_app

    store = MidiSongStore(args.songs_dir, cfg.decoder, cfg.encoder) if args.songs_dir else None
    app = create_app(args.env, store=store)
    app.run(host=args.host, port=args.port or app.config["PORT"])
    return 0


def apply_args(cfg: AppConfig, args):
    """Copy CLI overrides onto the config; flags left unset keep the config values."""
    if getattr(args, "speed", None) is not None:
        cfg.playback.speed = args.speed
    if getattr(args, "metronome", None):
        cfg.metronome.bpm = args.metronome
    if getattr(args, "beats", None) is not None:
        cfg.metronome.beats_per_bar = args.beats


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="virtuoso", description="Piano song tools")
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("import", help="decode a .mid file into song JSON")
    p.add_argument("file")
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("to-notes", help="song JSON or .mid -> note intervals")
    p.add_argument("file")
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_to_notes)

    p = sub.add_parser("to-events", help="note intervals JSON -> event list")
    p.add_argument("file")
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_to_events)

    p = sub.add_parser("play", help="play a song on the system MIDI output")
    p.add_argument("file")
    p.add_argument("--speed", type=float, default=None)
    p.add_argument("--start", type=float, default=0.0, help="seconds into the song")
    p.add_argument("--velocity", type=int, default=None)
    p.add_argument("--metronome", type=int, nargs="?", const=0, default=None, metavar="BPM",
                   help="click along, at BPM if given")
    p.add_argument("--beats", type=int, default=None, help="beats per bar")
    p.set_defaults(func=cmd_play)

    p = sub.add_parser("serve", help="run the songs API")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=None)
    p.add_argument("--songs-dir", default=None)
    p.add_argument("--env", default=None, choices=["development", "production", "testing"])
    p.set_defaults(func=cmd_serve)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    init_logging(logging.DEBUG if args.verbose else logging.INFO)
    cfg = AppConfig()
    apply_args(cfg, args)
    try:
        return args.func(args, cfg)
    except (VirtuosoError, OSError, json.JSONDecodeError) as e:
        log_exception(args.command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
