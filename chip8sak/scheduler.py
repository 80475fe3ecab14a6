# Frame scheduler
#
# One tick (frame):
#   1. take the keypad snapshot for this frame
#   2. re-arm a cpu that was waiting on a key or on the next frame
#   3. execute up to ipf instructions, stopping early if the cpu blocks or halts
#   4. decrement the delay and sound timers exactly once
#   5. hand the display snapshot and the sound on/off state to the host
#
# run() only presents frames in which the display changed, and clears the display's
# updated flag once it has.
#
# Timers are tied to ticks, never to instructions executed, so changing ipf changes how
# fast programs run but not how fast their timers count down.

import collections
import time

from chip8sak import constants
from chip8sak import cpu as chip8_cpu
from chip8sak.errors import Chip8SAKValueError

Frame = collections.namedtuple('Frame', ['pixels', 'sound_on'])


class Scheduler:
    def __init__(self, cpu, fps=constants.DEFAULT_FPS, ipf=constants.DEFAULT_IPF,
                 clock=time.perf_counter, sleep=time.sleep):
        if fps < 1:
            raise Chip8SAKValueError("Error: fps must be at least 1, got %s" % fps)
        if ipf < 1:
            raise Chip8SAKValueError("Error: ipf must be at least 1, got %s" % ipf)
        self.cpu = cpu
        self.fps = fps
        self.ipf = ipf
        self.clock = clock
        self.sleep = sleep
        self.frame_count = 0
        self.stop_requested = False

    @property
    def seconds_per_frame(self):
        return 1.0 / self.fps

    def stop(self):
        """
        Ask run() to finish after the tick in progress
        """
        self.stop_requested = True

    def tick(self, keys=None):
        """
        Run a single frame

        :param keys: key states for this frame (None = same as the previous frame)
        :type keys: sequence of 16 bool
        :return: display snapshot and sound state after the frame
        :rtype: Frame
        :raises Chip8SAKRuntimeError: if the program hits a fatal error
        """
        cpu = self.cpu
        cpu.set_keys(cpu.keys if keys is None else keys)
        cpu.resume()

        for _ in range(self.ipf):
            if not cpu.step():
                break

        cpu.tick_timers()
        self.frame_count += 1
        return Frame(cpu.display.snapshot(), cpu.sound_on)

    def run(self, host_input, renderer, audio, frames=None):
        """
        Run frames in real time until the host asks to exit, stop() is called, the cpu
        halts, or (if given) the frame limit is reached

        :param host_input: keypad source, see host.HostInput
        :param renderer: frame sink, see host.HostRenderer
        :param audio: buzzer, see host.HostAudio
        :param frames: maximum number of frames to run (None = no limit)
        :type frames: int
        :return: number of frames run
        :rtype: int
        :raises Chip8SAKRuntimeError: if the program hits a fatal error
        """
        self.stop_requested = False
        sound_on = False
        frames_run = 0
        next_frame = self.clock()

        try:
            while frames is None or frames_run < frames:
                keys, exit_requested = host_input.poll()
                if exit_requested or self.stop_requested:
                    self.cpu.halt()
                if self.cpu.state == chip8_cpu.HALTED:
                    break

                frame = self.tick(keys)
                frames_run += 1

                display = self.cpu.display
                if display.updated:
                    renderer.present(frame.pixels)
                    display.updated = False
                if frame.sound_on != sound_on:
                    sound_on = frame.sound_on
                    audio.set_tone(sound_on)

                next_frame += self.seconds_per_frame
                delay = next_frame - self.clock()
                if delay > 0:
                    self.sleep(delay)
                else:
                    # running behind; don't try to catch up with a burst of frames
                    next_frame = self.clock()
        finally:
            if sound_on:
                audio.set_tone(False)

        return frames_run
