# CHIP-8 instruction-level emulation
#
# Chip8Cpu owns all interpreter state (memory, registers, stack, timers, display and the
# current keypad snapshot).  step() runs one fetch/decode/execute cycle.  The Scheduler in
# scheduler.py drives step() at a fixed number of instructions per frame and decrements
# the timers once per frame.
#
# Blocking instructions never block the caller.  LDK (FX0A) with no new key press, and a
# second DRAW in one frame when the display_wait quirk is on, leave the PC on the
# instruction and switch the cpu into a waiting state.  The scheduler calls resume() at
# the next frame boundary, and the instruction is simply executed again.
#
# Fatal errors (unknown opcode, out-of-bounds access, stack overflow/underflow) halt the
# cpu, are kept in self.fault, and are re-raised to the caller.

import random

from chip8sak import constants
from chip8sak.display import DisplayBuffer
from chip8sak.errors import Chip8SAKRuntimeError, Chip8SAKStackOverflow, Chip8SAKStackUnderflow, \
    Chip8SAKValueError
from chip8sak.instruction import decode, format_instruction
from chip8sak.memory import Memory

# cpu states
RUNNING = 'running'
WAITING_FOR_KEY = 'waiting for key'
WAITING_FOR_FRAME = 'waiting for frame'
HALTED = 'halted'

NO_KEYS = (False,) * constants.NUMBER_OF_KEYS


class Chip8Cpu:
    def __init__(self, rom=b'', quirks=None, rng=None):
        if quirks is None:
            quirks = constants.QUIRKS[constants.DEFAULT_QUIRKS]
        self.quirks = quirks                 # read-only for the lifetime of the cpu
        self.rng = rng if rng is not None else random  # anything with randint()

        self.memory = Memory()
        self.memory.load_rom(rom)
        self.display = DisplayBuffer()

        self.v = [0] * constants.NUMBER_OF_REGISTERS  # V0-VF (bytes)
        self.i = 0                           # index register (16-bit)
        self.pc = constants.PROGRAM_START    # program counter (16-bit)
        self.stack = []                      # return addresses, at most STACK_SIZE deep
        self.dt = 0                          # delay timer (byte)
        self.st = 0                          # sound timer (byte)

        self.keys = NO_KEYS                  # key states for the frame in progress
        self.prev_keys = NO_KEYS             # key states for the previous frame
        self.drew_this_frame = False

        self.state = RUNNING
        self.fault = None                    # the error that halted the cpu, if any
        self.instruction_count = 0
        self.last_instruction = None
        self.debug = False

        self.handlers = {
            'SYS': self.SYS,
            'CLS': self.CLS,
            'RET': self.RET,
            'JMP': self.JMP,
            'CALL': self.CALL,
            'SKEB': self.SKEB,
            'SKNEB': self.SKNEB,
            'SKE': self.SKE,
            'LDB': self.LDB,
            'ADDB': self.ADDB,
            'LD': self.LD,
            'OR': self.OR,
            'AND': self.AND,
            'XOR': self.XOR,
            'ADD': self.ADD,
            'SUB': self.SUB,
            'SHR': self.SHR,
            'SUBR': self.SUBR,
            'SHL': self.SHL,
            'SKNE': self.SKNE,
            'LDI': self.LDI,
            'JMPZ': self.JMPZ,
            'RND': self.RND,
            'DRAW': self.DRAW,
            'SKP': self.SKP,
            'SKNP': self.SKNP,
            'LDFT': self.LDFT,
            'LDK': self.LDK,
            'LDDT': self.LDDT,
            'LDST': self.LDST,
            'ADDI': self.ADDI,
            'FONT': self.FONT,
            'BCD': self.BCD,
            'SREG': self.SREG,
            'LREG': self.LREG,
        }

    @property
    def sound_on(self):
        return self.st > 0

    def set_keys(self, keys):
        """
        Supply the keypad snapshot for a new frame

        :param keys: 16 key states, indexed by logical key 0-F
        :type keys: sequence of bool
        """
        keys = tuple(bool(k) for k in keys)
        if len(keys) != constants.NUMBER_OF_KEYS:
            raise Chip8SAKValueError("Error: expected %d key states, got %d"
                                     % (constants.NUMBER_OF_KEYS, len(keys)))
        self.prev_keys = self.keys
        self.keys = keys

    def newly_pressed_keys(self):
        return [k for k in range(constants.NUMBER_OF_KEYS) if self.keys[k] and not self.prev_keys[k]]

    def resume(self):
        """
        Called at each frame boundary: re-arms a waiting cpu so that the blocked
        instruction gets another try
        """
        self.drew_this_frame = False
        if self.state in (WAITING_FOR_KEY, WAITING_FOR_FRAME):
            self.state = RUNNING

    def halt(self):
        self.state = HALTED

    def tick_timers(self):
        if self.dt > 0:
            self.dt -= 1
        if self.st > 0:
            self.st -= 1

    def fetch(self):
        return self.memory.get_be_word(self.pc)

    def step(self):
        """
        Fetch, decode and execute one instruction

        :return: True if the cpu is still running afterwards
        :rtype: bool
        :raises Chip8SAKRuntimeError: on any fatal error (the cpu is halted first)
        """
        if self.state != RUNNING:
            return False

        try:
            instr = decode(self.fetch())
            if self.debug:
                print("%04X: %04X  %-18s I=%03X %s" % (
                    self.pc, instr.opcode, format_instruction(instr), self.i,
                    ' '.join('%02X' % r for r in self.v)))
            self.last_instruction = instr

            # Advance past the instruction before executing it, so jump and call
            # targets are absolute, and skips just add another 2
            self.pc = (self.pc + 2) & 0xffff
            self.handlers[instr.op](instr)
        except Chip8SAKRuntimeError as e:
            self.state = HALTED
            self.fault = e
            raise

        self.instruction_count += 1
        return self.state == RUNNING

    def push(self, addr):
        if len(self.stack) >= constants.STACK_SIZE:
            raise Chip8SAKStackOverflow(
                "Error: stack overflow calling from $%03X (depth %d)" % (self.pc - 2, len(self.stack)))
        self.stack.append(addr)

    def pop(self):
        if not self.stack:
            raise Chip8SAKStackUnderflow("Error: return with empty stack at $%03X" % (self.pc - 2))
        return self.stack.pop()

    def skip_if(self, condition):
        if condition:
            self.pc = (self.pc + 2) & 0xffff

    def block(self, state):
        # Rewind so the blocked instruction executes again once resumed
        self.pc = (self.pc - 2) & 0xffff
        self.state = state

    # ---- instruction handlers, one per decoded op ----

    # 0nnn: machine code routines don't exist here
    def SYS(self, instr):
        pass

    def CLS(self, instr):
        self.display.clear()

    def RET(self, instr):
        self.pc = self.pop()

    def JMP(self, instr):
        self.pc = instr.nnn

    def CALL(self, instr):
        self.push(self.pc)
        self.pc = instr.nnn

    def SKEB(self, instr):
        self.skip_if(self.v[instr.x] == instr.nn)

    def SKNEB(self, instr):
        self.skip_if(self.v[instr.x] != instr.nn)

    def SKE(self, instr):
        self.skip_if(self.v[instr.x] == self.v[instr.y])

    def SKNE(self, instr):
        self.skip_if(self.v[instr.x] != self.v[instr.y])

    def LDB(self, instr):
        self.v[instr.x] = instr.nn

    def ADDB(self, instr):
        self.v[instr.x] = (self.v[instr.x] + instr.nn) & 0xff

    def LD(self, instr):
        self.v[instr.x] = self.v[instr.y]

    # For the bitwise ops the result is written first; VF is then cleared only when the
    # vf_reset quirk is on, otherwise whatever VF held (including this result) stays.
    def OR(self, instr):
        self.v[instr.x] |= self.v[instr.y]
        if self.quirks.vf_reset:
            self.v[0xf] = 0

    def AND(self, instr):
        self.v[instr.x] &= self.v[instr.y]
        if self.quirks.vf_reset:
            self.v[0xf] = 0

    def XOR(self, instr):
        self.v[instr.x] ^= self.v[instr.y]
        if self.quirks.vf_reset:
            self.v[0xf] = 0

    # For the arithmetic ops the flag is computed from the operands, then the result is
    # written, then VF.  With x == F the flag wins.
    def ADD(self, instr):
        total = self.v[instr.x] + self.v[instr.y]
        self.v[instr.x] = total & 0xff
        self.v[0xf] = 1 if total > 0xff else 0

    def SUB(self, instr):
        vx, vy = self.v[instr.x], self.v[instr.y]
        self.v[instr.x] = (vx - vy) & 0xff
        self.v[0xf] = 1 if vx >= vy else 0

    def SUBR(self, instr):
        vx, vy = self.v[instr.x], self.v[instr.y]
        self.v[instr.x] = (vy - vx) & 0xff
        self.v[0xf] = 1 if vy >= vx else 0

    def shift_source(self, instr):
        if self.quirks.shift:
            return self.v[instr.x]
        return self.v[instr.y]

    def SHR(self, instr):
        src = self.shift_source(instr)
        self.v[instr.x] = src >> 1
        self.v[0xf] = src & 0x01

    def SHL(self, instr):
        src = self.shift_source(instr)
        self.v[instr.x] = (src << 1) & 0xff
        self.v[0xf] = (src & 0x80) >> 7

    def LDI(self, instr):
        self.i = instr.nnn

    def JMPZ(self, instr):
        if self.quirks.jump:
            # BXNN: jump to XNN + VX
            self.pc = instr.nnn + self.v[instr.x]
        else:
            self.pc = instr.nnn + self.v[0]

    def RND(self, instr):
        self.v[instr.x] = self.rng.randint(0, 255) & instr.nn

    def DRAW(self, instr):
        if self.quirks.display_wait and self.drew_this_frame:
            self.block(WAITING_FOR_FRAME)
            return
        sprite = self.memory.get_bytes(self.i, instr.n)
        collision = self.display.draw(self.v[instr.x], self.v[instr.y], sprite, wrap=self.quirks.wrap)
        self.v[0xf] = 1 if collision else 0
        self.drew_this_frame = True

    def SKP(self, instr):
        self.skip_if(self.keys[self.v[instr.x] & 0xf])

    def SKNP(self, instr):
        self.skip_if(not self.keys[self.v[instr.x] & 0xf])

    def LDFT(self, instr):
        self.v[instr.x] = self.dt

    def LDK(self, instr):
        pressed = self.newly_pressed_keys()
        if not pressed:
            self.block(WAITING_FOR_KEY)
            return
        key = pressed[0]
        self.v[instr.x] = key
        # a press only satisfies one wait
        self.prev_keys = tuple(held or k == key for k, held in enumerate(self.prev_keys))

    def LDDT(self, instr):
        self.dt = self.v[instr.x]

    def LDST(self, instr):
        self.st = self.v[instr.x]

    def ADDI(self, instr):
        self.i = (self.i + self.v[instr.x]) & 0xffff

    def FONT(self, instr):
        self.i = Memory.font_address(self.v[instr.x])

    def BCD(self, instr):
        val = self.v[instr.x]
        self.memory.set_mem(self.i, val // 100)
        self.memory.set_mem(self.i + 1, (val // 10) % 10)
        self.memory.set_mem(self.i + 2, val % 10)

    def SREG(self, instr):
        for r in range(instr.x + 1):
            self.memory.set_mem(self.i + r, self.v[r])
        if self.quirks.memory_increment:
            self.i = (self.i + instr.x + 1) & 0xffff

    def LREG(self, instr):
        for r in range(instr.x + 1):
            self.v[r] = self.memory.get_mem(self.i + r)
        if self.quirks.memory_increment:
            self.i = (self.i + instr.x + 1) & 0xffff

    # ---- debugging ----

    def print_registers(self):
        """
        Utility for debugging: print registers, timers and state
        """
        print(' '.join('V%X=%02X' % (r, val) for r, val in enumerate(self.v)))
        print('I=%03X PC=%03X DT=%02X ST=%02X state=%s' % (self.i, self.pc, self.dt, self.st, self.state))

    def print_stack(self):
        """
        Utility for debugging: print the call stack, innermost return address last
        """
        print('stack depth %d: %s' % (len(self.stack), ' '.join('$%03X' % a for a in self.stack)))
