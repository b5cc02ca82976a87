class Chip8Error(Exception):
    """base class for every fault raised by the interpreter"""


class StackUnderflow(Chip8Error):
    def __init__(self):
        super().__init__("Stack Underflow: RET executed with an empty stack")


class StackOverflow(Chip8Error):
    def __init__(self, depth):
        self.depth = depth
        super().__init__(f"Stack Overflow: the CHIP-8 stack can contain at most {depth} addresses")


class InvalidInstruction(Chip8Error):
    def __init__(self, opcode, pc=None):
        self.opcode = opcode
        self.pc = pc
        where = "" if pc is None else f" @ PC: 0x{pc:04x}"
        super().__init__(f"Invalid Instruction 0x{opcode:04x}{where}")


class InvalidRegister(Chip8Error):
    """raised when an instruction names a register outside V0-VF, unreachable for decoded opcodes"""
    def __init__(self, register):
        self.register = register
        super().__init__(f"Invalid Register: {register}")


class RomTooLarge(Chip8Error):
    def __init__(self, size, limit):
        self.size, self.limit = size, limit
        super().__init__(f"ROM of {size} bytes does not fit in the {limit} bytes available from 0x200")


class DisplayError(Chip8Error):
    pass
