# NNN or addr   - a 12-bit value, the lowest 12 bits of the instruction
# NN or byte    - an 8-bit value, the lowest 8 bits of the instruction
# N or nibble   - a 4-bit value, the lowest 4 bits of the instruction
# X             - a 4-bit value, the lower 4 bits of the high byte of the instruction
# Y             - a 4-bit value, the upper 4 bits of the low byte of the instruction


class OpCode:
    """read-only view of a raw 16-bit instruction word split into its named bit fields"""
    __slots__ = ("word",)

    def __init__(self, word: int):
        self.word = word & 0xFFFF

    def __int__(self):
        return self.word

    def __eq__(self, other):
        if isinstance(other, OpCode):
            return self.word == other.word
        return self.word == other

    def __hash__(self):
        return hash(self.word)

    def __repr__(self):
        return f"OpCode(0x{self.word:04x})"

    @property
    def family(self) -> int:
        """0xF000"""
        return (self.word & 0xF000) >> 12

    @property
    def x(self) -> int:
        """0x0X00"""
        return (self.word & 0x0F00) >> 8

    @property
    def y(self) -> int:
        """0x00Y0"""
        return (self.word & 0x00F0) >> 4

    @property
    def n(self) -> int:
        """0x000N"""
        return self.word & 0x000F

    @property
    def nn(self) -> int:
        """0x00NN"""
        return self.word & 0x00FF

    @property
    def nnn(self) -> int:
        """0x0NNN"""
        return self.word & 0x0FFF
