# ========================= virtuoso/config.py =========================
from dataclasses import dataclass, field
from typing import Optional

@dataclass
class DecoderConfig:
    fallback_division: int = 480   # ticks per quarter when the header is bad
    default_tempo: int = 500000    # µs per quarter, 120 bpm
    midi_low: int = 21             # A0
    midi_high: int = 108           # C8

@dataclass
class EncoderConfig:
    bpm: int = 120
    ticks_per_quarter: int = 480
    velocity: int = 100
    channel: int = 0

@dataclass
class PlaybackConfig:
    speed: float = 1.0
    velocity: Optional[int] = None
    tail_seconds: float = 0.5      # silence kept after the last event
    fps: int = 200                 # Player.run tick rate

@dataclass
class MetronomeConfig:
    bpm: int = 100
    beats_per_bar: int = 4

@dataclass
class AudioConfig:
    program: int = 0               # GM Acoustic Grand
    default_velocity: int = 100
    click_hi: int = 76             # GM Hi Wood Block
    click_lo: int = 77             # GM Low Wood Block

@dataclass
class AppConfig:
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    metronome: MetronomeConfig = field(default_factory=MetronomeConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
