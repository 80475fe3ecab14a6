# Disassemble a CHIP-8 program to stdout

from os import path
import argparse
from chip8sak.byte_util import read_binary_file
from chip8sak.constants import MAX_ROM_SIZE
from chip8sak.disassembler import print_disassembly


def main():
    parser = argparse.ArgumentParser(description="Disassemble a CHIP-8 program.")
    parser.add_argument('program', help='CHIP-8 program to disassemble')
    parser.add_argument('-d', '--describe', action='store_true',
                        help='add a comment describing each instruction')

    args = parser.parse_args()

    if not path.exists(args.program):
        parser.error('Cannot find "%s"' % args.program)

    rom = read_binary_file(args.program)
    if len(rom) == 0:
        parser.error('"%s" is not a valid CHIP-8 program: file is empty' % args.program)
    if len(rom) > MAX_ROM_SIZE:
        print("Warning: %d bytes is more than fits in memory" % len(rom))

    print_disassembly(rom, with_descriptions=args.describe)


if __name__ == "__main__":
    main()
