import unittest

from chip8.errors import InvalidInstruction
from chip8.instructions import Instruction, Op, decode, disassemble
from chip8.opcode import OpCode


class TestOpCode(unittest.TestCase):
    def test_fields(self):
        op = OpCode(0xD3A7)
        self.assertEqual(op.family, 0xD)
        self.assertEqual(op.x, 0x3)
        self.assertEqual(op.y, 0xA)
        self.assertEqual(op.n, 0x7)
        self.assertEqual(op.nn, 0xA7)
        self.assertEqual(op.nnn, 0x3A7)

    def test_equality(self):
        self.assertEqual(OpCode(0x00E0), 0x00E0)
        self.assertEqual(OpCode(0x00E0), OpCode(0x00E0))
        self.assertEqual(int(OpCode(0x1234)), 0x1234)


class TestDecoding(unittest.TestCase):
    def test_every_op(self):
        cases = {
            0x00E0: Instruction(Op.CLEAR_DISPLAY),
            0x00EE: Instruction(Op.RETURN),
            0x1ABC: Instruction(Op.JUMP, value=0xABC),
            0x2ABC: Instruction(Op.CALL, value=0xABC),
            0x3A12: Instruction(Op.SKIP_EQUAL, x=0xA, value=0x12),
            0x4A12: Instruction(Op.SKIP_NOT_EQUAL, x=0xA, value=0x12),
            0x5AB0: Instruction(Op.SKIP_EQUAL_XY, x=0xA, y=0xB),
            0x6A12: Instruction(Op.LOAD, x=0xA, value=0x12),
            0x7A12: Instruction(Op.ADD, x=0xA, value=0x12),
            0x8AB0: Instruction(Op.MOVE, x=0xA, y=0xB),
            0x8AB1: Instruction(Op.OR, x=0xA, y=0xB),
            0x8AB2: Instruction(Op.AND, x=0xA, y=0xB),
            0x8AB3: Instruction(Op.XOR, x=0xA, y=0xB),
            0x8AB4: Instruction(Op.ADD_XY, x=0xA, y=0xB),
            0x8AB5: Instruction(Op.SUB_XY, x=0xA, y=0xB),
            0x8AB6: Instruction(Op.SHIFT_RIGHT, x=0xA, y=0xB),
            0x8AB7: Instruction(Op.SUB_YX, x=0xA, y=0xB),
            0x8ABE: Instruction(Op.SHIFT_LEFT, x=0xA, y=0xB),
            0x9AB0: Instruction(Op.SKIP_NOT_EQUAL_XY, x=0xA, y=0xB),
            0xAABC: Instruction(Op.LOAD_I, value=0xABC),
            0xBABC: Instruction(Op.JUMP_V0, value=0xABC),
            0xCA12: Instruction(Op.RANDOM, x=0xA, value=0x12),
            0xDAB5: Instruction(Op.DRAW, x=0xA, y=0xB, value=0x5),
            0xEA9E: Instruction(Op.SKIP_KEY_PRESSED, x=0xA),
            0xEAA1: Instruction(Op.SKIP_KEY_NOT_PRESSED, x=0xA),
            0xFA07: Instruction(Op.LOAD_DELAY, x=0xA),
            0xFA0A: Instruction(Op.WAIT_KEY_PRESS, x=0xA),
            0xFA15: Instruction(Op.SET_DELAY, x=0xA),
            0xFA18: Instruction(Op.SET_SOUND, x=0xA),
            0xFA1E: Instruction(Op.ADD_I, x=0xA),
            0xFA29: Instruction(Op.LOAD_FONT, x=0xA),
            0xFA33: Instruction(Op.STORE_BCD, x=0xA),
            0xFA55: Instruction(Op.STORE_REGISTERS, x=0xA),
            0xFA65: Instruction(Op.LOAD_MEMORY, x=0xA),
        }
        self.assertEqual({i.op for i in cases.values()}, set(Op))
        for word, expected in cases.items():
            with self.subTest(word=hex(word)):
                self.assertEqual(decode(word), expected)

    def test_invalid_words(self):
        for word in (0x0000, 0x0123, 0x01E0, 0x00E1, 0x5001, 0x9AB1, 0x8AB8, 0x8ABF, 0xEA9F, 0xFA00, 0xFA66):
            with self.subTest(word=hex(word)):
                with self.assertRaises(InvalidInstruction):
                    decode(word)

    def test_decode_failure_carries_word_and_pc(self):
        with self.assertRaises(InvalidInstruction) as ctx:
            decode(0x5001, pc=0x2A4)
        self.assertEqual(ctx.exception.opcode, 0x5001)
        self.assertEqual(ctx.exception.pc, 0x2A4)
        self.assertIn("0x5001", str(ctx.exception))
        self.assertIn("0x02a4", str(ctx.exception))

    def test_accepts_opcode_view(self):
        self.assertEqual(decode(OpCode(0x6A12)), Instruction(Op.LOAD, x=0xA, value=0x12))


class TestDisassembly(unittest.TestCase):
    def test_mnemonics(self):
        self.assertEqual(str(decode(0x00E0)), "CLS")
        self.assertEqual(str(decode(0x2ABC)), "CALL 0xabc")
        self.assertEqual(str(decode(0x8AB4)), "ADD VA, VB")
        self.assertEqual(str(decode(0xDAB5)), "DRW VA, VB, 5")
        self.assertEqual(str(decode(0xF355)), "LD [I], V3")

    def test_listing(self):
        listing = list(disassemble(bytes([0x60, 0x0A, 0xF0, 0x29, 0x50, 0x01, 0xFF])))
        self.assertEqual(listing, [
            (0x200, 0x600A, "LD V0, 0x0a"),
            (0x202, 0xF029, "LD F, V0"),
            (0x204, 0x5001, "DW 0x5001"),
            (0x206, 0xFF, "DB 0xff"),
        ])


if __name__ == "__main__":
    unittest.main()
