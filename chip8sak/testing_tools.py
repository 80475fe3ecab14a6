from chip8sak import constants
from chip8sak.byte_util import big_endian_bytes
from chip8sak.cpu import Chip8Cpu


class FixedRandom:
    """
    Stand-in for the random module that always "rolls" the same byte
    """

    def __init__(self, value):
        self.value = value

    def randint(self, a, b):
        return self.value


def opcodes_to_rom(*opcodes):
    """
    Program image from a list of 16-bit opcodes
    """
    rom = bytearray()
    for opcode in opcodes:
        rom.extend(big_endian_bytes(opcode, 2))
    return bytes(rom)


def make_cpu(*opcodes, rng=None, **quirk_flags):
    """
    A cpu with the given opcodes loaded at $200 and the given quirks turned on
    """
    return Chip8Cpu(opcodes_to_rom(*opcodes), quirks=constants.Quirks(**quirk_flags), rng=rng)


def run_steps(cpu, count):
    for _ in range(count):
        cpu.step()
    return cpu
