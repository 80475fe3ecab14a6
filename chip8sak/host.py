# Host collaborators
#
# The cpu and scheduler know nothing about windows, speakers or keyboards.  Each frame the
# scheduler asks a HostInput for the keypad state, gives a HostRenderer the display
# snapshot, and tells a HostAudio when the buzzer turns on or off.  The base classes
# below define those interfaces; the rest of the module provides headless
# implementations for tools and tests.

import matplotlib.image
import numpy as np

from chip8sak import constants
from chip8sak.display import pixels_to_rgba, pixels_to_text
from chip8sak.errors import Chip8SAKNotImplemented, Chip8SAKValueError


def keys_from_logical(pressed):
    """
    Key-state snapshot from a collection of logical keys (0-F)

    :param pressed: logical keys that are down
    :type pressed: iterable of int
    :return: 16 key states
    :rtype: tuple of bool
    """
    pressed = set(pressed)
    for k in pressed:
        if not 0 <= k < constants.NUMBER_OF_KEYS:
            raise Chip8SAKValueError("Error: no such key %s" % k)
    return tuple(k in pressed for k in range(constants.NUMBER_OF_KEYS))


def keys_from_physical(pressed):
    """
    Key-state snapshot from keyboard characters, using KEYPAD_LAYOUT.  Characters
    outside the layout are ignored.

    :param pressed: keyboard characters that are down, e.g. 'qw'
    :type pressed: iterable of str
    :return: 16 key states
    :rtype: tuple of bool
    """
    return keys_from_logical(constants.KEYPAD_LAYOUT[c] for c in (c.lower() for c in pressed)
                             if c in constants.KEYPAD_LAYOUT)


class HostInput:
    def poll(self):
        """
        Non-blocking read of the keypad

        :return: (16 key states, exit requested)
        :rtype: tuple
        """
        raise Chip8SAKNotImplemented("Not implemented")


class HostRenderer:
    def present(self, pixels):
        """
        Show a frame.  Only called for frames in which the display changed.  The pixels
        must be treated as read-only.

        :param pixels: (height, width) bool array, indexed [y, x]
        :type pixels: numpy.ndarray
        """
        raise Chip8SAKNotImplemented("Not implemented")


class HostAudio:
    def set_tone(self, on):
        """
        Start or stop the buzzer

        :param on: True to start the tone
        :type on: bool
        """
        raise Chip8SAKNotImplemented("Not implemented")


class ScriptedInput(HostInput):
    """
    Replays a list of per-frame key snapshots.  Each entry is a collection of logical
    keys that are down during that frame.  Once the script runs out, either no keys are
    down, or (exit_when_done=True) an exit is requested.
    """

    def __init__(self, script=(), exit_when_done=False):
        self.script = [keys_from_logical(frame_keys) for frame_keys in script]
        self.exit_when_done = exit_when_done
        self.frame_num = 0

    def poll(self):
        if self.frame_num < len(self.script):
            keys = self.script[self.frame_num]
            self.frame_num += 1
            return keys, False
        return keys_from_logical(()), self.exit_when_done


class NullRenderer(HostRenderer):
    def __init__(self):
        self.frames_presented = 0
        self.last_frame = None

    def present(self, pixels):
        self.frames_presented += 1
        self.last_frame = pixels


class TextRenderer(NullRenderer):
    """
    Prints frames as text, every 'every' frames
    """

    def __init__(self, every=1, on='#', off='.'):
        NullRenderer.__init__(self)
        self.every = every
        self.on = on
        self.off = off

    def present(self, pixels):
        NullRenderer.present(self, pixels)
        if self.frames_presented % self.every == 0:
            print('frame %d' % self.frames_presented)
            print(pixels_to_text(pixels, self.on, self.off))


class ImageRenderer(NullRenderer):
    """
    Keeps the latest frame and writes it out as an image file on save()
    """

    def __init__(self, fg=constants.DEFAULT_FOREGROUND, bg=constants.DEFAULT_BACKGROUND,
                 scale=constants.DEFAULT_SCALE):
        NullRenderer.__init__(self)
        self.fg = fg
        self.bg = bg
        self.scale = scale

    def to_rgba(self, pixels):
        rgba = pixels_to_rgba(pixels, self.fg, self.bg)
        return rgba.repeat(self.scale, axis=0).repeat(self.scale, axis=1)

    def save(self, filename):
        if self.last_frame is None:
            raise Chip8SAKValueError("Error: no frame to save")
        matplotlib.image.imsave(filename, self.to_rgba(self.last_frame))


class RecordingAudio(HostAudio):
    """
    Records the buzzer on/off transitions it is given
    """

    def __init__(self):
        self.transitions = []

    @property
    def tone_on(self):
        return bool(self.transitions) and self.transitions[-1]

    def set_tone(self, on):
        self.transitions.append(bool(on))


class SquareWaveAudio(RecordingAudio):
    """
    Generates square-wave buzzer samples.  Whoever owns the audio device pulls samples
    with render(); silence is returned while the tone is off.
    """

    def __init__(self, pitch=constants.DEFAULT_PITCH, sample_rate=44100, volume=0.25):
        RecordingAudio.__init__(self)
        if not constants.MIN_PITCH <= pitch <= constants.MAX_PITCH:
            raise Chip8SAKValueError("Error: pitch %s Hz out of range" % pitch)
        self.phase_inc = pitch / sample_rate
        self.phase = 0.0
        self.volume = volume

    def render(self, sample_count):
        if not self.tone_on:
            return np.zeros(sample_count, dtype=np.float32)
        phases = (self.phase + self.phase_inc * np.arange(sample_count)) % 1.0
        self.phase = (self.phase + self.phase_inc * sample_count) % 1.0
        return np.where(phases <= 0.5, self.volume, -self.volume).astype(np.float32)

