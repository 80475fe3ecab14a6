'''
Exceptions for chip8sak library
'''


class Chip8SAKException(Exception):
    """
    Generic base class for chip8sak exceptions
    """
    pass


class Chip8SAKIOError(Chip8SAKException, IOError):
    """
    IO error
    """
    pass


class Chip8SAKValueError(Chip8SAKException, ValueError):
    """
    Value error
    """
    pass


class Chip8SAKNotImplemented(Chip8SAKException):
    """
    Not implemented error
    """
    pass


class Chip8SAKRomTooLarge(Chip8SAKValueError):
    """
    ROM image does not fit between the program start and the end of memory
    """
    pass


class Chip8SAKRuntimeError(Chip8SAKException):
    """
    Base class for errors that halt a running program.  There is no recovery from these.
    """
    pass


class Chip8SAKUnknownOpcode(Chip8SAKRuntimeError):
    """
    Opcode bit pattern is not part of the instruction set
    """
    def __init__(self, opcode, address=None):
        self.opcode = opcode
        self.address = address
        if address is None:
            msg = "Error: unknown opcode 0x%04X" % opcode
        else:
            msg = "Error: unknown opcode 0x%04X at 0x%04X" % (opcode, address)
        super().__init__(msg)


class Chip8SAKAddressOutOfBounds(Chip8SAKRuntimeError):
    """
    Memory access outside of the address space
    """
    def __init__(self, address):
        self.address = address
        super().__init__("Error: address 0x%X out of bounds" % address)


class Chip8SAKStackOverflow(Chip8SAKRuntimeError):
    """
    Subroutine call with a full call stack
    """
    pass


class Chip8SAKStackUnderflow(Chip8SAKRuntimeError):
    """
    Subroutine return with an empty call stack
    """
    pass
