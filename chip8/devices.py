import os
from array import array

os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_1, K_2, K_3, K_4,
    K_q, K_w, K_e, K_r,
    K_a, K_s, K_d, K_f,
    K_z, K_x, K_c, K_v,
)

from .debug import log
from .errors import DisplayError
from .machine import SCREEN_HEIGHT, SCREEN_WIDTH


# ******************** STATIC SECTION
# the 4x4 hex keypad of the COSMAC VIP laid over the left side of a qwerty keyboard
#   1 2 3 C        1 2 3 4
#   4 5 6 D   ->   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
KEY_MAPPINGS = {
    K_1: 0x1, K_2: 0x2, K_3: 0x3, K_4: 0xC,
    K_q: 0x4, K_w: 0x5, K_e: 0x6, K_r: 0xD,
    K_a: 0x7, K_s: 0x8, K_d: 0x9, K_f: 0xE,
    K_z: 0xA, K_x: 0x0, K_c: 0xB, K_v: 0xF,
}

SCALE = 15
BACK_COLOR = pygame.Color(0x0E, 0x0F, 0x12)
FORE_COLOR = pygame.Color(0x35, 0xD6, 0x2F)
TONE_FREQUENCY = 440
SAMPLE_RATE = 44100


# ******************** I/O SECTION
class Screen:
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT, s=SCALE, bg_color=BACK_COLOR, fg_color=FORE_COLOR, caption=None):
        self.w, self.h, self.scale = w, h, s
        self.background = bg_color
        self.foreground = fg_color
        try:
            self.surface = pygame.display.set_mode((w * self.scale, h * self.scale))
            if caption:
                pygame.display.set_caption(caption)
        except pygame.error as e:
            raise DisplayError(f"cannot open a {w * s}x{h * s} window: {e}") from e
        self.surface.fill(self.background)

    def __str__(self):
        return f"{self.w}x{self.h}@{self.scale}x"

    def render(self, framebuffer):
        """draw every ON pixel of the framebuffer and flip, the whole frame is redrawn each time"""
        try:
            self.surface.fill(self.background)
            for x, y in framebuffer.lit():
                pygame.draw.rect(
                    self.surface,
                    self.foreground,
                    (x * self.scale, y * self.scale, self.scale, self.scale)
                )
            pygame.display.flip()
        except pygame.error as e:
            raise DisplayError(str(e)) from e


class Keypad:
    """
    tracks the single key currently held
    CHIP-8 programs can only ever see one key at a time here: pressing a second key replaces the first
    """
    def __init__(self, mappings=KEY_MAPPINGS):
        self.mappings = mappings
        self.pressed = None

    def __str__(self):
        return "-" if self.pressed is None else f"{self.pressed:X}"

    def press(self, key):
        self.pressed = key

    def release(self, key):
        """releasing a key that is not the one held leaves the state alone"""
        if self.pressed == key:
            self.pressed = None

    def handle_event(self, event):
        """update the state from a pygame KEYDOWN/KEYUP event, return True if the event was a keypad key"""
        if event.type not in (pygame.KEYDOWN, pygame.KEYUP) or event.key not in self.mappings:
            return False
        key = self.mappings[event.key]
        if event.type == pygame.KEYDOWN:
            self.press(key)
        else:
            self.release(key)
        return True


def square_wave(frequency=TONE_FREQUENCY, sample_rate=SAMPLE_RATE, channels=1, volume=0.2):
    """one period of a signed 16-bit square wave, samples interleaved for every channel"""
    period = max(sample_rate // frequency, 2)
    amplitude = int(32767 * volume)
    samples = array('h')
    for i in range(period):
        samples.extend([amplitude if i < period // 2 else -amplitude] * channels)
    return samples


class Buzzer:
    """audio cue sink: a looping tone turned on and off by the timer driver"""
    def __init__(self, frequency=TONE_FREQUENCY):
        self.playing = False
        self.sound = None
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
            sample_rate, _, channels = pygame.mixer.get_init()
            self.sound = pygame.mixer.Sound(buffer=square_wave(frequency, sample_rate, channels).tobytes())
        except pygame.error as e:
            # no audio device, the emulator keeps running silently
            log(f"audio disabled: {e}")

    def __str__(self):
        if self.sound is None:
            return "disabled"
        return "on" if self.playing else "off"

    def set_tone(self, on):
        if self.sound is None or on == self.playing:
            return
        if on:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()
        self.playing = on
