# CHIP-8 memory: a flat 4K byte store holding the font and the loaded program
#
# $000-$04F  unused (the original interpreter lived here)
# $050-$09F  hexadecimal font, 16 glyphs of 5 bytes
# $0A0-$1FF  unused
# $200-$FFF  program and data
#
# There is no address wraparound: any access outside $000-$FFF is fatal.

from chip8sak import constants
from chip8sak.byte_util import big_endian_int, hexdump_lines
from chip8sak.errors import Chip8SAKAddressOutOfBounds, Chip8SAKRomTooLarge, Chip8SAKValueError


class Memory:
    def __init__(self, size=constants.MEMORY_SIZE):
        self.size = size
        self.memory = bytearray(size)
        self.rom_size = 0
        self.inject_bytes(constants.FONT_START, constants.FONT_DATA)

    def check_address(self, loc):
        if not (0 <= loc < self.size):
            raise Chip8SAKAddressOutOfBounds(loc)

    def get_mem(self, loc):
        self.check_address(loc)
        return self.memory[loc]

    def set_mem(self, loc, val):
        self.check_address(loc)
        self.memory[loc] = val & 0xff

    def get_bytes(self, loc, count):
        """
        Get a run of bytes, e.g. sprite data

        :param loc: first address
        :type loc: int
        :param count: number of bytes
        :type count: int
        :return: bytes read
        :rtype: bytes
        """
        if count == 0:
            return b''
        self.check_address(loc)
        self.check_address(loc + count - 1)
        return bytes(self.memory[loc:loc + count])

    def get_be_word(self, loc):
        """
        Get a big-endian 16-bit value (i.e. an opcode) from a given memory loc

        :param loc: location of the high byte
        :type loc: int
        :return: 16-bit value
        :rtype: int
        """
        return big_endian_int(self.get_bytes(loc, 2))

    def inject_bytes(self, loc, bytes):
        """
        Puts bytes directly into memory

        :param loc: starting memory location
        :type loc: int
        :param bytes: bytes to inject
        :type bytes: bytes or list of int
        """
        if len(bytes) == 0:
            return
        self.check_address(loc)
        self.check_address(loc + len(bytes) - 1)
        for i, a_byte in enumerate(bytes):
            if not (0 <= a_byte <= 255):
                raise Chip8SAKValueError("Error: byte value %d out of range" % a_byte)
            self.memory[loc + i] = a_byte

    def load_rom(self, rom):
        """
        Copies a program image to the program start address

        :param rom: raw program bytes
        :type rom: bytes
        :raises Chip8SAKRomTooLarge: if the program does not fit in memory
        """
        if len(rom) > constants.MAX_ROM_SIZE:
            raise Chip8SAKRomTooLarge(
                "Error: ROM is %d bytes, but only %d bytes fit after $%03X"
                % (len(rom), constants.MAX_ROM_SIZE, constants.PROGRAM_START))
        self.inject_bytes(constants.PROGRAM_START, rom)
        self.rom_size = len(rom)

    def get_rom(self):
        """
        Returns the program region that was loaded by load_rom()
        """
        return bytes(self.memory[constants.PROGRAM_START:constants.PROGRAM_START + self.rom_size])

    @staticmethod
    def font_address(digit):
        return constants.FONT_START + (digit & 0xf) * constants.FONT_GLYPH_SIZE

    def hexdump(self, start=0, end=None):
        """
        Utility for debugging: hexdump lines for a memory range
        """
        if end is None:
            end = self.size
        return hexdump_lines(self.memory[start:end], start)
