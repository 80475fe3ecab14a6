# CHIP-8 instruction decoding
#
# OPCODE_TABLE is the single description of the instruction set.  decode() uses it to
# turn a 16-bit opcode into an Instruction, and format_instruction() uses the same entry
# to produce the mnemonic, so the execution and disassembly paths cannot disagree.
#
# Operand naming (as in most CHIP-8 references):
#   nnn - lowest 12 bits of the opcode (an address)
#   nn  - lowest 8 bits (a byte immediate)
#   n   - lowest 4 bits
#   x   - lower nibble of the high byte (a register index)
#   y   - upper nibble of the low byte (a register index)

import collections
from functools import lru_cache

from chip8sak.errors import Chip8SAKUnknownOpcode

Instruction = collections.namedtuple('Instruction', ['op', 'opcode', 'x', 'y', 'n', 'nn', 'nnn'])

OpcodeEntry = collections.namedtuple('OpcodeEntry', ['mask', 'pattern', 'op', 'operands', 'description'])

# Entries are tried in order; more specific masks come before the catch-alls they overlap
OPCODE_TABLE = [
    OpcodeEntry(0xFFFF, 0x00E0, 'CLS', '', 'Clear the display'),
    OpcodeEntry(0xFFFF, 0x00EE, 'RET', '', 'Return from a subroutine'),
    OpcodeEntry(0xF000, 0x0000, 'SYS', 'nnn', 'Call machine code routine at nnn (ignored)'),
    OpcodeEntry(0xF000, 0x1000, 'JMP', 'nnn', 'Jump to nnn'),
    OpcodeEntry(0xF000, 0x2000, 'CALL', 'nnn', 'Call subroutine at nnn'),
    OpcodeEntry(0xF000, 0x3000, 'SKEB', 'x,nn', 'Skip next instruction if Vx == nn'),
    OpcodeEntry(0xF000, 0x4000, 'SKNEB', 'x,nn', 'Skip next instruction if Vx != nn'),
    OpcodeEntry(0xF00F, 0x5000, 'SKE', 'x,y', 'Skip next instruction if Vx == Vy'),
    OpcodeEntry(0xF000, 0x6000, 'LDB', 'x,nn', 'Vx = nn'),
    OpcodeEntry(0xF000, 0x7000, 'ADDB', 'x,nn', 'Vx = Vx + nn, no carry'),
    OpcodeEntry(0xF00F, 0x8000, 'LD', 'x,y', 'Vx = Vy'),
    OpcodeEntry(0xF00F, 0x8001, 'OR', 'x,y', 'Vx = Vx | Vy'),
    OpcodeEntry(0xF00F, 0x8002, 'AND', 'x,y', 'Vx = Vx & Vy'),
    OpcodeEntry(0xF00F, 0x8003, 'XOR', 'x,y', 'Vx = Vx ^ Vy'),
    OpcodeEntry(0xF00F, 0x8004, 'ADD', 'x,y', 'Vx = Vx + Vy, VF = carry'),
    OpcodeEntry(0xF00F, 0x8005, 'SUB', 'x,y', 'Vx = Vx - Vy, VF = not borrow'),
    OpcodeEntry(0xF00F, 0x8006, 'SHR', 'x,y', 'Vx = Vy >> 1, VF = bit shifted out'),
    OpcodeEntry(0xF00F, 0x8007, 'SUBR', 'x,y', 'Vx = Vy - Vx, VF = not borrow'),
    OpcodeEntry(0xF00F, 0x800E, 'SHL', 'x,y', 'Vx = Vy << 1, VF = bit shifted out'),
    OpcodeEntry(0xF00F, 0x9000, 'SKNE', 'x,y', 'Skip next instruction if Vx != Vy'),
    OpcodeEntry(0xF000, 0xA000, 'LDI', 'nnn', 'I = nnn'),
    OpcodeEntry(0xF000, 0xB000, 'JMPZ', 'nnn', 'Jump to nnn + V0'),
    OpcodeEntry(0xF000, 0xC000, 'RND', 'x,nn', 'Vx = random byte & nn'),
    OpcodeEntry(0xF000, 0xD000, 'DRAW', 'x,y,n', 'Draw n-byte sprite from I at (Vx, Vy), VF = collision'),
    OpcodeEntry(0xF0FF, 0xE09E, 'SKP', 'x', 'Skip next instruction if key Vx is pressed'),
    OpcodeEntry(0xF0FF, 0xE0A1, 'SKNP', 'x', 'Skip next instruction if key Vx is not pressed'),
    OpcodeEntry(0xF0FF, 0xF007, 'LDFT', 'x', 'Vx = delay timer'),
    OpcodeEntry(0xF0FF, 0xF00A, 'LDK', 'x', 'Wait for a key press, Vx = key'),
    OpcodeEntry(0xF0FF, 0xF015, 'LDDT', 'x', 'Delay timer = Vx'),
    OpcodeEntry(0xF0FF, 0xF018, 'LDST', 'x', 'Sound timer = Vx'),
    OpcodeEntry(0xF0FF, 0xF01E, 'ADDI', 'x', 'I = I + Vx'),
    OpcodeEntry(0xF0FF, 0xF029, 'FONT', 'x', 'I = address of font glyph for digit Vx'),
    OpcodeEntry(0xF0FF, 0xF033, 'BCD', 'x', 'Store decimal digits of Vx at I, I+1, I+2'),
    OpcodeEntry(0xF0FF, 0xF055, 'SREG', 'x', 'Store V0 through Vx at I'),
    OpcodeEntry(0xF0FF, 0xF065, 'LREG', 'x', 'Load V0 through Vx from I'),
]

OPS = tuple(entry.op for entry in OPCODE_TABLE)

# How each operand layout renders after the (5 column) mnemonic
OPERAND_FORMATS = {
    '': '',
    'nnn': ' 0x{nnn:03X}',
    'x,nn': ' V{x:X}, 0x{nn:02X}',
    'x,y': ' V{x:X}, V{y:X}',
    'x,y,n': ' V{x:X}, V{y:X}, 0x{n:X}',
    'x': ' V{x:X}',
}

_ENTRY_BY_OP = {entry.op: entry for entry in OPCODE_TABLE}


@lru_cache(maxsize=None)
def decode(opcode):
    """
    Decodes a 16-bit opcode into an Instruction

    Decoding is a pure function of the opcode, so results are cached.

    :param opcode: big-endian instruction word
    :type opcode: int
    :return: decoded instruction
    :rtype: Instruction
    :raises Chip8SAKUnknownOpcode: if the bit pattern is not in the instruction set
    """
    if not (0 <= opcode <= 0xFFFF):
        raise Chip8SAKUnknownOpcode(opcode & 0xFFFF)
    for entry in OPCODE_TABLE:
        if opcode & entry.mask == entry.pattern:
            return Instruction(op=entry.op,
                               opcode=opcode,
                               x=(opcode & 0x0F00) >> 8,
                               y=(opcode & 0x00F0) >> 4,
                               n=opcode & 0x000F,
                               nn=opcode & 0x00FF,
                               nnn=opcode & 0x0FFF)
    raise Chip8SAKUnknownOpcode(opcode)


def format_instruction(instr):
    """
    Renders an Instruction as assembly text, e.g. ``LDB   V0, 0x05``

    :param instr: decoded instruction
    :type instr: Instruction
    :return: mnemonic and operands
    :rtype: str
    """
    entry = _ENTRY_BY_OP[instr.op]
    operands = OPERAND_FORMATS[entry.operands].format(**instr._asdict())
    return ('%-5s%s' % (instr.op, operands)).rstrip()


def describe(op):
    """
    One line summary of what an operation does
    """
    return _ENTRY_BY_OP[op].description
