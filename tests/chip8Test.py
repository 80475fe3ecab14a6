import contextlib
import io
import os
import tempfile
import unittest

from parameterized import parameterized

from chip8sak import constants
from chip8sak.chip8 import Chip8
from chip8sak.errors import Chip8SAKIOError, Chip8SAKRomTooLarge, Chip8SAKUnknownOpcode, Chip8SAKValueError
from chip8sak.host import NullRenderer, RecordingAudio, ScriptedInput
from chip8sak.testing_tools import FixedRandom, opcodes_to_rom

DRAW_ZERO = constants.project_to_absolute_path('tests/data/draw_zero.ch8')


class Chip8TestCase(unittest.TestCase):
    def setUp(self):
        self.chip8 = Chip8()

    def test_defaults(self):
        self.assertEqual(self.chip8.get_option('fps'), 60)
        self.assertEqual(self.chip8.get_option('IPF'), 10)
        self.assertEqual(self.chip8.get_option('foreground'), 0xFFFFFFFF)
        self.assertEqual(self.chip8.get_option('quirks'), 'MODERN')
        self.assertEqual(self.chip8.get_quirks(), constants.Quirks())
        self.assertEqual(Chip8.cts_type(), 'Chip8')

    def test_unknown_option(self):
        with self.assertRaises(Chip8SAKValueError):
            self.chip8.set_options(turbo=True)

    @parameterized.expand([
        ("zero fps", dict(fps=0)),
        ("string ipf", dict(ipf='10')),
        ("bool scale", dict(scale=True)),
        ("low pitch", dict(pitch=5)),
        ("string pitch", dict(pitch='440')),
        ("bad color", dict(foreground='nothex')),
        ("color too big", dict(background=0x100000000)),
        ("bad preset", dict(quirks='SCHIP')),
    ])
    def test_invalid_options(self, name, options):
        with self.assertRaises(Chip8SAKValueError):
            self.chip8.set_options(**options)

    def test_colors(self):
        self.chip8.set_options(foreground='#FF00FFFF', background='0x000000ff')
        self.assertEqual(self.chip8.get_option('foreground'), 0xFF00FFFF)
        self.assertEqual(self.chip8.get_option('background'), 0x000000FF)

    def test_quirk_presets(self):
        self.chip8.set_options(quirks='COSMAC-VIP')
        quirks = self.chip8.get_quirks()
        self.assertTrue(quirks.vf_reset)
        self.assertTrue(quirks.memory_increment)
        self.assertTrue(quirks.display_wait)
        self.assertFalse(quirks.shift)

        # individual flags override the preset; None defers to it
        self.chip8.set_options(vf_reset=False, shift=1)
        quirks = self.chip8.get_quirks()
        self.assertFalse(quirks.vf_reset)
        self.assertTrue(quirks.shift)
        self.assertTrue(quirks.memory_increment)
        self.assertEqual(quirks.names, ['memory_increment', 'shift', 'display_wait'])

        self.chip8.set_options(quirks='MODERN', vf_reset=None, shift=None)
        self.assertEqual(self.chip8.get_quirks(), constants.QUIRKS['MODERN'])

    def test_load_bytes(self):
        scheduler = self.chip8.load(opcodes_to_rom(0x6005, 0x1202), ipf=3, wrap=True)
        self.assertIs(scheduler, self.chip8.scheduler)
        self.assertEqual(scheduler.ipf, 3)
        self.assertTrue(self.chip8.cpu.quirks.wrap)
        self.assertEqual(self.chip8.cpu.memory.get_be_word(0x200), 0x6005)

    def test_load_file(self):
        self.chip8.load(DRAW_ZERO)
        self.assertEqual(len(self.chip8.rom), 10)

        with tempfile.TemporaryDirectory() as tmp_dir:
            filename = os.path.join(tmp_dir, 'rnd.ch8')
            with open(filename, 'wb') as out_file:
                out_file.write(opcodes_to_rom(0xC0FF))
            self.chip8.load(filename, rng=FixedRandom(0x5A))
        self.chip8.scheduler.tick()
        self.assertEqual(self.chip8.cpu.v[0], 0x5A)

    def test_load_errors(self):
        with self.assertRaises(Chip8SAKIOError):
            self.chip8.load('no/such/program.ch8')
        with self.assertRaises(Chip8SAKValueError):
            self.chip8.load(b'')
        with self.assertRaises(Chip8SAKRomTooLarge):
            self.chip8.load(bytes(3585))

    def test_disassemble(self):
        with self.assertRaises(Chip8SAKValueError):
            self.chip8.disassemble()
        self.assertEqual(self.chip8.disassemble(opcodes_to_rom(0x00E0)), ['0x0200: CLS'])

        self.chip8.load(DRAW_ZERO)
        lines = self.chip8.disassemble()
        self.assertEqual(lines[3], '0x0206: DRAW  V0, V1, 0x5')
        self.assertEqual(lines[4], '0x0208: JMP   0x208')

    def test_run(self):
        with self.assertRaises(Chip8SAKValueError):
            self.chip8.run(ScriptedInput(), NullRenderer(), RecordingAudio())

        self.chip8.load(DRAW_ZERO, fps=1000)
        renderer = NullRenderer()
        frames_run = self.chip8.run(ScriptedInput(), renderer, RecordingAudio(), frames=3)
        self.assertEqual(frames_run, 3)
        # the glyph is drawn once, then the program loops without drawing
        self.assertEqual(renderer.frames_presented, 1)
        self.assertEqual(renderer.last_frame.sum(), 14)
        self.assertTrue(renderer.last_frame[0, :4].all())

    def test_run_fatal_error(self):
        self.chip8.load(opcodes_to_rom(0x6001, 0x5001), fps=1000)
        with self.assertRaises(Chip8SAKUnknownOpcode):
            self.chip8.run(ScriptedInput(), NullRenderer(), RecordingAudio(), frames=3)
        self.assertIsInstance(self.chip8.cpu.fault, Chip8SAKUnknownOpcode)

    def test_verbose(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            self.chip8.load(DRAW_ZERO, verbose=True, disasm=True, quirks='COSMAC-VIP', fps=1000)
            self.chip8.run(ScriptedInput(exit_when_done=True), NullRenderer(), RecordingAudio())
        lines = out.getvalue().splitlines()
        self.assertEqual(lines[0], 'Loading 10 byte program, quirks: vf_reset, memory_increment, display_wait')
        self.assertEqual(lines[1], '0x0200: LDB   V0, 0x00')
        self.assertEqual(lines[-1], 'Ran 0 frames, 0 instructions')

    def test_quiet(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            self.chip8.load(DRAW_ZERO)
        self.assertEqual(out.getvalue(), '')


if __name__ == '__main__':
    unittest.main()
