# Disassembler for CHIP-8 programs
#
# Walks the program two bytes at a time from the load address.  It decodes with the same
# table the cpu executes from, so listings always agree with what would run.  Nothing is
# executed, so data mixed into the code shows up as whatever it happens to decode to (or
# as ERR for words that aren't instructions).

import more_itertools as moreit

from chip8sak import constants
from chip8sak.byte_util import big_endian_int
from chip8sak.errors import Chip8SAKUnknownOpcode
from chip8sak.instruction import decode, describe, format_instruction


class Disassembler:
    """
    Iterable of (address, text) pairs for a program image.

    Each iteration starts again from the first word, and words are only decoded as they
    are requested.  An odd trailing byte is padded with $00 to make a full word.
    """

    def __init__(self, rom, start=constants.PROGRAM_START):
        self.rom = bytes(rom)
        self.start = start

    def __len__(self):
        return (len(self.rom) + 1) // 2

    def __iter__(self):
        return self.words()

    def words(self, with_descriptions=False):
        addr = self.start
        for hi, lo in moreit.grouper(self.rom, 2, fillvalue=0):
            opcode = big_endian_int([hi, lo])
            try:
                instr = decode(opcode)
            except Chip8SAKUnknownOpcode:
                yield addr, '%-5s 0x%04X' % ('ERR', opcode)
            else:
                text = format_instruction(instr)
                if with_descriptions:
                    text = '%-18s ; %s' % (text, describe(instr.op))
                yield addr, text
            addr += 2


def disassemble(rom, with_descriptions=False):
    """
    Disassembles a program image into listing lines, e.g. ``0x0200: CLS``

    :param rom: program bytes, as loaded at $200
    :type rom: bytes
    :param with_descriptions: append a short comment describing each instruction
    :type with_descriptions: bool
    :return: listing
    :rtype: list of str
    """
    return ['0x%04X: %s' % (addr, text)
            for addr, text in Disassembler(rom).words(with_descriptions=with_descriptions)]


def print_disassembly(rom, with_descriptions=False):
    for line in disassemble(rom, with_descriptions):
        print(line)
