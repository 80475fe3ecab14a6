import itertools
import unittest

from chip8sak import cpu as chip8_cpu
from chip8sak.errors import Chip8SAKUnknownOpcode, Chip8SAKValueError
from chip8sak.host import NullRenderer, RecordingAudio, ScriptedInput, keys_from_logical
from chip8sak.scheduler import Scheduler
from chip8sak.testing_tools import make_cpu


class FakeClock:
    """
    Clock and sleep for the scheduler that only move when slept on
    """

    def __init__(self):
        self.now = 0.0
        self.sleeps = 0

    def clock(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps += 1
        self.now += seconds


class StoppingRenderer(NullRenderer):
    def __init__(self, scheduler, stop_after):
        NullRenderer.__init__(self)
        self.scheduler = scheduler
        self.stop_after = stop_after

    def present(self, pixels):
        NullRenderer.present(self, pixels)
        if self.frames_presented == self.stop_after:
            self.scheduler.stop()


class SchedulerTestCase(unittest.TestCase):
    def make_scheduler(self, *opcodes, fps=60, ipf=10):
        self.fake_clock = FakeClock()
        return Scheduler(make_cpu(*opcodes), fps=fps, ipf=ipf,
                         clock=self.fake_clock.clock, sleep=self.fake_clock.sleep)

    def test_instructions_per_frame(self):
        scheduler = self.make_scheduler(0x1200, ipf=7)
        frame = scheduler.tick()
        self.assertEqual(scheduler.cpu.instruction_count, 7)
        self.assertEqual(frame.pixels.shape, (32, 64))
        self.assertFalse(frame.sound_on)
        scheduler.tick()
        self.assertEqual(scheduler.cpu.instruction_count, 14)
        self.assertEqual(scheduler.frame_count, 2)

    def test_timers_tied_to_frames(self):
        program = (0x60FF, 0xF015, 0x1204)

        fast = self.make_scheduler(*program, ipf=200)
        for _ in range(100):
            fast.tick()
        self.assertEqual(fast.cpu.dt, 155)

        # one instruction per frame: the timer is only set during the second frame
        slow = self.make_scheduler(*program, ipf=1)
        for _ in range(100):
            slow.tick()
        self.assertEqual(slow.cpu.dt, 156)

    def test_keys_carry_over(self):
        scheduler = self.make_scheduler(0x1200)
        scheduler.tick(keys_from_logical([4]))
        scheduler.tick()
        self.assertTrue(scheduler.cpu.keys[4])
        self.assertEqual(scheduler.cpu.newly_pressed_keys(), [])

    def test_waiting_does_not_execute(self):
        scheduler = self.make_scheduler(0xF00A, ipf=1)
        scheduler.tick()
        scheduler.tick()
        self.assertEqual(scheduler.cpu.instruction_count, 0)
        self.assertEqual(scheduler.cpu.state, chip8_cpu.WAITING_FOR_KEY)

        scheduler.tick(keys_from_logical([0xB]))
        self.assertEqual(scheduler.cpu.v[0], 0xB)
        self.assertEqual(scheduler.cpu.pc, 0x202)

    def test_pacing(self):
        scheduler = self.make_scheduler(0x1200)
        renderer = NullRenderer()
        frames_run = scheduler.run(ScriptedInput(), renderer, RecordingAudio(), frames=60)
        self.assertEqual(frames_run, 60)
        # nothing is ever drawn
        self.assertEqual(renderer.frames_presented, 0)
        self.assertAlmostEqual(self.fake_clock.now, 1.0)
        self.assertEqual(self.fake_clock.sleeps, 60)

    def test_presents_changed_frames_only(self):
        scheduler = self.make_scheduler(0xA050, 0xD015, 0x1204)
        renderer = NullRenderer()
        scheduler.run(ScriptedInput(), renderer, RecordingAudio(), frames=5)
        self.assertEqual(renderer.frames_presented, 1)
        self.assertEqual(renderer.last_frame.sum(), 14)
        self.assertFalse(scheduler.cpu.display.updated)

    def test_running_behind_does_not_sleep(self):
        # every frame takes a whole second
        seconds = itertools.count()
        sleeps = []
        scheduler = Scheduler(make_cpu(0x1200), fps=60, ipf=1, clock=lambda: float(next(seconds)),
                              sleep=sleeps.append)
        frames_run = scheduler.run(ScriptedInput(), NullRenderer(), RecordingAudio(), frames=3)
        self.assertEqual(frames_run, 3)
        self.assertEqual(sleeps, [])

    def test_sound_transitions(self):
        scheduler = self.make_scheduler(0x6003, 0xF018, 0x1204)
        audio = RecordingAudio()
        scheduler.run(ScriptedInput(), NullRenderer(), audio, frames=5)
        self.assertEqual(audio.transitions, [True, False])
        self.assertFalse(audio.tone_on)

    def test_exit_requested(self):
        scheduler = self.make_scheduler(0x1200)
        renderer = NullRenderer()
        frames_run = scheduler.run(ScriptedInput(exit_when_done=True), renderer, RecordingAudio())
        self.assertEqual(frames_run, 0)
        self.assertEqual(renderer.frames_presented, 0)
        self.assertEqual(scheduler.cpu.state, chip8_cpu.HALTED)

    def test_exit_after_script(self):
        scheduler = self.make_scheduler(0x1200)
        frames_run = scheduler.run(ScriptedInput([[], [], []], exit_when_done=True), NullRenderer(),
                                   RecordingAudio())
        self.assertEqual(frames_run, 3)

    def test_stop(self):
        # redraws the glyph every frame, so every frame is presented
        scheduler = self.make_scheduler(0xA050, 0xD015, 0x1202)
        frames_run = scheduler.run(ScriptedInput(), StoppingRenderer(scheduler, 3), RecordingAudio())
        self.assertEqual(frames_run, 3)

    def test_fatal_error_silences_audio(self):
        scheduler = self.make_scheduler(0x6005, 0xF018, 0xF10A, 0x5001)
        audio = RecordingAudio()
        with self.assertRaises(Chip8SAKUnknownOpcode):
            scheduler.run(ScriptedInput([[], [3]]), NullRenderer(), audio)
        self.assertEqual(scheduler.cpu.state, chip8_cpu.HALTED)
        self.assertEqual(scheduler.cpu.v[1], 3)
        self.assertEqual(audio.transitions, [True, False])

    def test_key_press_satisfies_one_wait(self):
        scheduler = self.make_scheduler(0xF00A, 0x7101, 0x1200)
        scheduler.tick()
        scheduler.tick(keys_from_logical([5]))
        self.assertEqual(scheduler.cpu.v[1], 1)
        self.assertEqual(scheduler.cpu.state, chip8_cpu.WAITING_FOR_KEY)

        # still held: no new press
        scheduler.tick(keys_from_logical([5]))
        self.assertEqual(scheduler.cpu.v[1], 1)

        # released, then pressed again
        scheduler.tick(keys_from_logical([]))
        scheduler.tick(keys_from_logical([5]))
        self.assertEqual(scheduler.cpu.v[1], 2)

    def test_bad_rates(self):
        with self.assertRaises(Chip8SAKValueError):
            Scheduler(make_cpu(0x1200), fps=0)
        with self.assertRaises(Chip8SAKValueError):
            Scheduler(make_cpu(0x1200), ipf=0)


if __name__ == '__main__':
    unittest.main()
