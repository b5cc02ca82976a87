# CHIP-8 INSTRUCTION SET
# http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#3.1
#
# every opcode is decoded exactly once into an Instruction, a closed set of
# variants tagged by Op, and anything that is not a standard CHIP-8 opcode
# raises InvalidInstruction instead of falling through to a default


from enum import Enum, unique
from typing import NamedTuple

from .errors import InvalidInstruction
from .opcode import OpCode


@unique
class Op(Enum):
    """instruction tags, the value of each member is its assembly template"""
    CLEAR_DISPLAY = "CLS"                               # 00E0
    RETURN = "RET"                                      # 00EE
    JUMP = "JP 0x{nnn:03x}"                             # 1NNN
    CALL = "CALL 0x{nnn:03x}"                           # 2NNN
    SKIP_EQUAL = "SE V{x:X}, 0x{nn:02x}"                # 3XNN
    SKIP_NOT_EQUAL = "SNE V{x:X}, 0x{nn:02x}"           # 4XNN
    SKIP_EQUAL_XY = "SE V{x:X}, V{y:X}"                 # 5XY0
    LOAD = "LD V{x:X}, 0x{nn:02x}"                      # 6XNN
    ADD = "ADD V{x:X}, 0x{nn:02x}"                      # 7XNN
    MOVE = "LD V{x:X}, V{y:X}"                          # 8XY0
    OR = "OR V{x:X}, V{y:X}"                            # 8XY1
    AND = "AND V{x:X}, V{y:X}"                          # 8XY2
    XOR = "XOR V{x:X}, V{y:X}"                          # 8XY3
    ADD_XY = "ADD V{x:X}, V{y:X}"                       # 8XY4
    SUB_XY = "SUB V{x:X}, V{y:X}"                       # 8XY5
    SHIFT_RIGHT = "SHR V{x:X}"                          # 8XY6
    SUB_YX = "SUBN V{x:X}, V{y:X}"                      # 8XY7
    SHIFT_LEFT = "SHL V{x:X}"                           # 8XYE
    SKIP_NOT_EQUAL_XY = "SNE V{x:X}, V{y:X}"            # 9XY0
    LOAD_I = "LD I, 0x{nnn:03x}"                        # ANNN
    JUMP_V0 = "JP V0, 0x{nnn:03x}"                      # BNNN
    RANDOM = "RND V{x:X}, 0x{nn:02x}"                   # CXNN
    DRAW = "DRW V{x:X}, V{y:X}, {n}"                    # DXYN
    SKIP_KEY_PRESSED = "SKP V{x:X}"                     # EX9E
    SKIP_KEY_NOT_PRESSED = "SKNP V{x:X}"                # EXA1
    LOAD_DELAY = "LD V{x:X}, DT"                        # FX07
    WAIT_KEY_PRESS = "LD V{x:X}, K"                     # FX0A
    SET_DELAY = "LD DT, V{x:X}"                         # FX15
    SET_SOUND = "LD ST, V{x:X}"                         # FX18
    ADD_I = "ADD I, V{x:X}"                             # FX1E
    LOAD_FONT = "LD F, V{x:X}"                          # FX29
    STORE_BCD = "LD B, V{x:X}"                          # FX33
    STORE_REGISTERS = "LD [I], V{x:X}"                  # FX55
    LOAD_MEMORY = "LD V{x:X}, [I]"                      # FX65


class Instruction(NamedTuple):
    """
    a decoded instruction: the Op tag plus its operands
    `value` holds the immediate byte, the address or the sprite height depending on the tag
    """
    op: Op
    x: int = 0
    y: int = 0
    value: int = 0

    def __str__(self):
        return self.op.value.format(x=self.x, y=self.y, n=self.value, nn=self.value, nnn=self.value)


# ********** DISPATCH TABLES
# opcodes fully identified by their high nibble, mapped to the operands they carry
_ADDRESS_OPS = {0x1: Op.JUMP, 0x2: Op.CALL, 0xA: Op.LOAD_I, 0xB: Op.JUMP_V0}
_BYTE_OPS = {0x3: Op.SKIP_EQUAL, 0x4: Op.SKIP_NOT_EQUAL, 0x6: Op.LOAD, 0x7: Op.ADD, 0xC: Op.RANDOM}
_XY_OPS = {0x5: Op.SKIP_EQUAL_XY, 0x9: Op.SKIP_NOT_EQUAL_XY}

# families sharing a high nibble, told apart by their low nibble / low byte
_SYSTEM_OPS = {0xE0: Op.CLEAR_DISPLAY, 0xEE: Op.RETURN}
_ALU_OPS = {
    0x0: Op.MOVE,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_XY,
    0x5: Op.SUB_XY,
    0x6: Op.SHIFT_RIGHT,
    0x7: Op.SUB_YX,
    0xE: Op.SHIFT_LEFT,
}
_KEY_OPS = {0x9E: Op.SKIP_KEY_PRESSED, 0xA1: Op.SKIP_KEY_NOT_PRESSED}
_MISC_OPS = {
    0x07: Op.LOAD_DELAY,
    0x0A: Op.WAIT_KEY_PRESS,
    0x15: Op.SET_DELAY,
    0x18: Op.SET_SOUND,
    0x1E: Op.ADD_I,
    0x29: Op.LOAD_FONT,
    0x33: Op.STORE_BCD,
    0x55: Op.STORE_REGISTERS,
    0x65: Op.LOAD_MEMORY,
}


def decode(word, pc=None) -> Instruction:
    """decode a raw 16-bit word, raise InvalidInstruction (carrying word and pc) if it is not a CHIP-8 opcode"""
    opcode = word if isinstance(word, OpCode) else OpCode(word)
    family = opcode.family

    if family in _ADDRESS_OPS:
        return Instruction(_ADDRESS_OPS[family], value=opcode.nnn)
    if family in _BYTE_OPS:
        return Instruction(_BYTE_OPS[family], x=opcode.x, value=opcode.nn)
    if family in _XY_OPS and opcode.n == 0x0:
        return Instruction(_XY_OPS[family], x=opcode.x, y=opcode.y)
    if family == 0xD:
        return Instruction(Op.DRAW, x=opcode.x, y=opcode.y, value=opcode.n)
    # only 00E0 and 00EE are valid, 0NNN (SYS addr) calls machine code and is not supported
    if family == 0x0 and opcode.x == 0x0 and opcode.nn in _SYSTEM_OPS:
        return Instruction(_SYSTEM_OPS[opcode.nn])
    if family == 0x8 and opcode.n in _ALU_OPS:
        return Instruction(_ALU_OPS[opcode.n], x=opcode.x, y=opcode.y)
    if family == 0xE and opcode.nn in _KEY_OPS:
        return Instruction(_KEY_OPS[opcode.nn], x=opcode.x)
    if family == 0xF and opcode.nn in _MISC_OPS:
        return Instruction(_MISC_OPS[opcode.nn], x=opcode.x)
    raise InvalidInstruction(opcode.word, pc)


def disassemble(data, origin=0x200):
    """
    walk a ROM two bytes at a time and yield (address, word, asm) tuples
    words that do not decode (usually sprite data) are listed as DW
    """
    for offset in range(0, len(data) - 1, 2):
        word = data[offset] << 8 | data[offset + 1]
        try:
            text = str(decode(word))
        except InvalidInstruction:
            text = f"DW 0x{word:04x}"
        yield origin + offset, word, text
    if len(data) % 2:
        yield origin + len(data) - 1, data[-1], f"DB 0x{data[-1]:02x}"
