"""
Generative audio through pygame.mixer.

A low drone, three harmonics that fade in as the caravan flows, and two
one-shot tones. If the mixer cannot start, every call is a no-op.
"""
import array
import logging
import math
from typing import Dict, List, Optional

import pygame

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
MASTER_VOLUME = 0.3
HARMONIC_FREQUENCIES = (220.0, 330.0, 440.0)   # A3, E4, A4


def sine(t: float, freq: float) -> float:
    """Sine wave oscillator."""
    return math.sin(2 * math.pi * freq * t)


def _loop_samples(freq: float, amplitude: float, seconds: float = 1.0) -> array.array:
    """Whole number of cycles so the loop has no click."""
    cycles = max(1, round(freq * seconds))
    length = int(SAMPLE_RATE * cycles / freq)
    samples = array.array('h')
    for i in range(length):
        samples.append(int(sine(i / SAMPLE_RATE, freq) * amplitude * 32767))
    return samples


def harmonic_target(flow_multiplier: float, index: int) -> float:
    """Volume a harmonic should fade toward for the given flow."""
    if flow_multiplier > 1.5:
        # Bright major intervals when the caravan is tight
        return min(0.1, (flow_multiplier - 1.5) * 0.05)
    if flow_multiplier < 1.2 and index == 0:
        return 0.05
    return 0.0


class AudioEngine:
    """
    Implements the game's AudioOutput.

    activate() must follow a user action (the first start press).
    """

    def __init__(self):
        self._initialized = False
        self._failed = False
        self._sounds: Dict[str, pygame.mixer.Sound] = {}
        self._drone_channel: Optional[pygame.mixer.Channel] = None
        self._harmonic_channels: List[pygame.mixer.Channel] = []
        self._harmonic_volumes: List[float] = [0.0 for _ in HARMONIC_FREQUENCIES]

    @property
    def initialized(self) -> bool:
        return self._initialized

    def activate(self) -> None:
        if self._initialized or self._failed:
            return
        try:
            pygame.mixer.pre_init(SAMPLE_RATE, -16, 2, 1024)
            pygame.mixer.init()
            pygame.mixer.set_num_channels(8)
            self._generate_sounds()
            self._start_loops()
            self._initialized = True
            logger.info("Audio engine initialized")
        except Exception as e:
            # Stay silent for the rest of the session
            self._failed = True
            logger.error(f"Failed to initialize audio: {e}")

    def _create_sound(self, samples: array.array) -> pygame.mixer.Sound:
        """Create a pygame Sound from mono samples (auto-converted to stereo)."""
        stereo = array.array('h')
        for s in samples:
            stereo.append(s)
            stereo.append(s)
        return pygame.mixer.Sound(buffer=stereo)

    def _generate_sounds(self) -> None:
        self._sounds["drone"] = self._create_sound(_loop_samples(110.0, 0.5))
        for i, freq in enumerate(HARMONIC_FREQUENCIES):
            self._sounds[f"harmonic_{i}"] = self._create_sound(_loop_samples(freq, 0.5))
        self._gen_tap()
        self._gen_failure()

    def _gen_tap(self) -> None:
        """Short A5 pluck."""
        samples = array.array('h')
        for i in range(int(SAMPLE_RATE * 0.1)):
            t = i / SAMPLE_RATE
            env = max(0.0, 1 - t * 10)
            samples.append(int(sine(t, 880) * env * 0.2 * 32767))
        self._sounds["tap"] = self._create_sound(samples)

    def _gen_failure(self) -> None:
        """Gentle slide from A4 down to A3."""
        samples = array.array('h')
        phase = 0.0
        for i in range(int(SAMPLE_RATE * 0.5)):
            t = i / SAMPLE_RATE
            freq = 440 * (0.5 ** (t / 0.5))
            phase += 2 * math.pi * freq / SAMPLE_RATE
            env = max(0.0, 1 - t * 2)
            samples.append(int(math.sin(phase) * env * 0.15 * 32767))
        self._sounds["failure"] = self._create_sound(samples)

    def _start_loops(self) -> None:
        self._drone_channel = self._sounds["drone"].play(loops=-1)
        if self._drone_channel is not None:
            self._drone_channel.set_volume(0.15 * MASTER_VOLUME)

        self._harmonic_channels = []
        for i in range(len(HARMONIC_FREQUENCIES)):
            channel = self._sounds[f"harmonic_{i}"].play(loops=-1)
            if channel is not None:
                channel.set_volume(0.0)
                self._harmonic_channels.append(channel)

    def update_flow(self, flow_multiplier: float) -> None:
        if not self._initialized:
            return
        for i, channel in enumerate(self._harmonic_channels):
            target = harmonic_target(flow_multiplier, i)
            # Ease toward the target instead of jumping
            self._harmonic_volumes[i] += (target - self._harmonic_volumes[i]) * 0.2
            channel.set_volume(self._harmonic_volumes[i] * MASTER_VOLUME * 4)

    def play_tap(self) -> None:
        if not self._initialized:
            return
        self._sounds["tap"].play()

    def play_failure(self) -> None:
        if not self._initialized:
            return
        self._sounds["failure"].play()

    def stop(self) -> None:
        if not self._initialized:
            return
        pygame.mixer.stop()
        self._drone_channel = None
        self._harmonic_channels = []
