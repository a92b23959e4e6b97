# virtuoso/audio/synth.py
import logging
from typing import Optional

import pygame
import pygame.midi

from virtuoso.config import AudioConfig
from virtuoso.notes.model import MIDI_HIGH, MIDI_LOW

log = logging.getLogger(__name__)

DRUM_CH = 9  # GM channel 10 (index 9) is percussion, kept for the metronome


class Synth:
    """
    System MIDI output with simple voice allocation:
    - play_note(p, v) -> token, round-robin over the melodic channels
    - stop_note(p) releases the most recent voice of that pitch
    - play_click(downbeat) hits a wood block on the drum channel
    Without an output device every call is a silent no-op.
    """
    def __init__(self, cfg: Optional[AudioConfig] = None, device_id: Optional[int] = None):
        self.cfg = cfg or AudioConfig()
        self.midi_out = None
        self.use_midi_out = False

        self.channels = [ch for ch in range(16) if ch != DRUM_CH]
        self._rr_index = 0
        self._next_token = 1
        self._token_map = {}              # token -> (ch, pitch)
        self._active_stack_by_pitch = {}  # pitch -> [token1, token2, ...]

        try:
            pygame.midi.init()
            dev = pygame.midi.get_default_output_id() if device_id is None else device_id
            if dev != -1:
                self.midi_out = pygame.midi.Output(dev)
                for ch in self.channels:
                    self.midi_out.set_instrument(self.cfg.program, ch)
                self.use_midi_out = True
                log.info("Using system MIDI out (device %s)", dev)
            else:
                log.warning("No MIDI output device found, playback is silent")
        except (pygame.midi.MidiException, pygame.error, ImportError) as e:
            log.warning("MIDI init failed: %s", e)

    def close(self):
        if self.midi_out:
            self.all_notes_off()
            self.midi_out.close()
        pygame.midi.quit()
        self.midi_out = None
        self.use_midi_out = False

    def _alloc_channel(self) -> int:
        ch = self.channels[self._rr_index % len(self.channels)]
        self._rr_index += 1
        return ch

    def _new_token(self, ch: int, pitch: int) -> int:
        t = self._next_token; self._next_token += 1
        self._token_map[t] = (ch, pitch)
        self._active_stack_by_pitch.setdefault(pitch, []).append(t)
        return t

    def play_note(self, midi: int, velocity: Optional[int] = None):
        if not (self.use_midi_out and self.midi_out): return None
        vel = self.cfg.default_velocity if velocity is None else velocity
        ch = self._alloc_channel()
        v = max(1, min(int(vel), 127))
        self.midi_out.note_on(int(midi), v, ch)
        return self._new_token(ch, int(midi))

    def stop_note(self, midi: int):
        if not (self.use_midi_out and self.midi_out): return
        stack = self._active_stack_by_pitch.get(int(midi))
        if stack:
            t = stack.pop()
            ch, p = self._token_map.pop(t, (None, None))
            if ch is not None:
                self.midi_out.note_off(p, 0, ch)
            if not stack:
                self._active_stack_by_pitch.pop(int(midi), None)
            return
        # unknown voice: silence the pitch everywhere
        for ch in self.channels:
            self.midi_out.note_off(int(midi), 0, ch)

    def play_click(self, downbeat: bool):
        if not (self.use_midi_out and self.midi_out): return
        note = self.cfg.click_hi if downbeat else self.cfg.click_lo
        self.midi_out.note_on(note, 110 if downbeat else 80, DRUM_CH)
        self.midi_out.note_off(note, 0, DRUM_CH)

    def all_notes_off(self):
        if not (self.use_midi_out and self.midi_out): return
        for ch in self.channels:
            for p in range(MIDI_LOW, MIDI_HIGH + 1):
                self.midi_out.note_off(p, 0, ch)
        self._token_map.clear()
        self._active_stack_by_pitch.clear()
