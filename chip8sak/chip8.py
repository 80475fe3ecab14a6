from chip8sak import constants
from chip8sak.base import Chip8SAKBase
from chip8sak.byte_util import parse_color, read_binary_file
from chip8sak.cpu import Chip8Cpu
from chip8sak.disassembler import disassemble
from chip8sak.errors import Chip8SAKIOError, Chip8SAKRuntimeError, Chip8SAKValueError
from chip8sak.scheduler import Scheduler


class Chip8(Chip8SAKBase):

    """
    Front end for running and disassembling CHIP-8 programs.

    Options are the run-time configuration a host (such as a command-line tool) hands to
    the interpreter: frame rate, instructions per frame, display and buzzer settings, and
    the quirk flags.  Quirks can be taken from a named preset (see constants.QUIRKS) and
    individually overridden; an override of None defers to the preset.

    load() builds a fresh cpu and scheduler for a program, run() drives it with host
    collaborators from host.py.
    """

    @classmethod
    def cts_type(cls):
        return 'Chip8'

    options_with_defaults = dict(
        fps=constants.DEFAULT_FPS,                # frames per second (timer rate)
        ipf=constants.DEFAULT_IPF,                # instructions per frame
        scale=constants.DEFAULT_SCALE,            # display scale factor for renderers
        foreground=constants.DEFAULT_FOREGROUND,  # RGBA8888 color of set pixels
        background=constants.DEFAULT_BACKGROUND,  # RGBA8888 color of unset pixels
        pitch=constants.DEFAULT_PITCH,            # buzzer pitch in Hz
        quirks=constants.DEFAULT_QUIRKS,          # name of a quirk preset
        vf_reset=None,
        memory_increment=None,
        wrap=None,
        shift=None,
        jump=None,
        display_wait=None,
        disasm=False,                             # print a disassembly when loading
        verbose=False,                            # False = suppress stdout details
    )

    def __init__(self):
        Chip8SAKBase.__init__(self)
        self.cpu = None
        self.scheduler = None
        self.rom = None

    def validate_option(self, op, val):
        if op in ('fps', 'ipf', 'scale'):
            if isinstance(val, bool) or not isinstance(val, int) or val < 1:
                raise Chip8SAKValueError('Error: option "%s" must be a positive integer, got %s' % (op, val))
        elif op in ('foreground', 'background'):
            val = parse_color(val)
        elif op == 'pitch':
            if isinstance(val, bool) or not isinstance(val, (int, float)) \
                    or not constants.MIN_PITCH <= val <= constants.MAX_PITCH:
                raise Chip8SAKValueError('Error: pitch must be between %d and %d Hz, got %s'
                                         % (constants.MIN_PITCH, constants.MAX_PITCH, val))
        elif op == 'quirks':
            if val not in constants.QUIRKS:
                raise Chip8SAKValueError('Error: unknown quirks preset "%s", expected one of %s'
                                         % (val, ', '.join(constants.QUIRKS)))
        elif op in constants.QUIRK_NAMES:
            if val is not None:
                val = bool(val)
        return val

    def get_quirks(self):
        """
        Quirks in effect: the preset, with any individual overrides applied

        :rtype: constants.Quirks
        """
        preset = constants.QUIRKS[self.get_option('quirks')]
        flags = {}
        for name in constants.QUIRK_NAMES:
            override = self.get_option(name)
            flags[name] = getattr(preset, name) if override is None else override
        return constants.Quirks(**flags)

    def load(self, rom, rng=None, **kwargs):
        """
        Loads a program, building a new cpu and scheduler for it

        :param rom: program bytes, or the name of a file holding them
        :type rom: bytes or str
        :param rng: random source for RND (default: the random module)
        :return: the scheduler that will drive the program
        :rtype: Scheduler
        :raises Chip8SAKRomTooLarge: if the program doesn't fit in memory

        :keyword options: see options_with_defaults
        """
        self.set_options(**kwargs)

        if isinstance(rom, str):
            filename = rom
            rom = read_binary_file(filename)
            if rom is None:
                raise Chip8SAKIOError('Error: cannot find "%s"' % filename)
        rom = bytes(rom)
        if len(rom) == 0:
            raise Chip8SAKValueError("Error: not a valid CHIP-8 program: it is empty")

        quirks = self.get_quirks()
        if self.get_option('verbose'):
            print("Loading %d byte program, quirks: %s" % (len(rom), ', '.join(quirks.names) or 'none'))
        if self.get_option('disasm'):
            for line in disassemble(rom):
                print(line)

        self.rom = rom
        self.cpu = Chip8Cpu(rom, quirks=quirks, rng=rng)
        self.scheduler = Scheduler(self.cpu, fps=self.get_option('fps'), ipf=self.get_option('ipf'))
        return self.scheduler

    def disassemble(self, rom=None, with_descriptions=False):
        """
        Disassembly listing of the given program, or of the loaded one
        """
        if rom is None:
            rom = self.rom
        if rom is None:
            raise Chip8SAKValueError("Error: no program to disassemble")
        return disassemble(rom, with_descriptions)

    def run(self, host_input, renderer, audio, frames=None):
        """
        Runs the loaded program until the host asks to exit, the program halts, or
        frames (if given) frames have been run

        :return: number of frames run
        :rtype: int
        :raises Chip8SAKRuntimeError: if the program hits a fatal error
        """
        if self.scheduler is None:
            raise Chip8SAKValueError("Error: no program loaded")
        try:
            frames_run = self.scheduler.run(host_input, renderer, audio, frames=frames)
        except Chip8SAKRuntimeError as e:
            if self.get_option('verbose'):
                print("Program halted after %d instructions: %s" % (self.cpu.instruction_count, e))
            raise
        if self.get_option('verbose'):
            print("Ran %d frames, %d instructions" % (frames_run, self.cpu.instruction_count))
        return frames_run
