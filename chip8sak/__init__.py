
from .chip8 import Chip8
from .cpu import Chip8Cpu
from .scheduler import Scheduler, Frame
from .display import DisplayBuffer
from .memory import Memory
from .instruction import Instruction, decode, format_instruction
from .disassembler import Disassembler, disassemble
from .constants import Quirks, QUIRKS
