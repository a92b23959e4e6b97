# virtuoso/midi/__init__.py
from virtuoso.midi.decoder import decode, decode_file
from virtuoso.midi.encoder import encode

__all__ = ["decode", "decode_file", "encode"]
