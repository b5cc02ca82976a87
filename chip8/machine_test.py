import unittest

from chip8.errors import RomTooLarge, StackOverflow, StackUnderflow
from chip8.machine import C8_FONTS, MAX_ROM_SIZE, ROM_START_ADDRESS, Framebuffer, Machine, Memory, Stack


class TestMemory(unittest.TestCase):
    def test_fonts_loaded_at_start(self):
        mem = Memory()
        self.assertEqual(mem.read(0, 80), bytes(C8_FONTS))

    def test_addresses_wrap(self):
        mem = Memory()
        mem[0x1005] = 0xAB
        self.assertEqual(mem[0x005], 0xAB)
        mem.write(0xFFE, [1, 2, 3])
        self.assertEqual(mem.read(0xFFE, 3), bytes([1, 2, 3]))
        self.assertEqual(mem[0x000], 3)

    def test_read_word(self):
        mem = Memory()
        mem.write(0x300, [0x12, 0x34])
        self.assertEqual(mem.read_word(0x300), 0x1234)

    def test_load_rom(self):
        mem = Memory()
        mem.load_rom(b"\x00\xe0")
        self.assertEqual(mem.read_word(ROM_START_ADDRESS), 0x00E0)

    def test_largest_rom(self):
        mem = Memory()
        mem.load_rom(bytes([0x11]) * MAX_ROM_SIZE)
        self.assertEqual(mem[0xFFF], 0x11)
        with self.assertRaises(RomTooLarge):
            mem.load_rom(bytes(MAX_ROM_SIZE + 1))


class TestStack(unittest.TestCase):
    def test_bounds(self):
        stack = Stack()
        with self.assertRaises(StackUnderflow):
            stack.pop()
        for addr in range(16):
            stack.append(addr)
        with self.assertRaises(StackOverflow):
            stack.append(0x300)
        self.assertEqual(stack.sp, 16)
        self.assertEqual(stack.pop(), 15)


class TestFramebuffer(unittest.TestCase):
    def test_collision_only_when_pixel_turned_off(self):
        fb = Framebuffer()
        self.assertFalse(fb.draw_sprite(0, 0, [0xF0]))
        self.assertFalse(fb.draw_sprite(4, 0, [0xF0]))
        self.assertTrue(fb.draw_sprite(2, 0, [0x80]))
        self.assertEqual(fb[2, 0], 0)

    def test_empty_sprite(self):
        fb = Framebuffer()
        fb.dirty = False
        self.assertFalse(fb.draw_sprite(10, 10, b""))
        self.assertTrue(fb.dirty)
        self.assertFalse(any(fb.buffer))

    def test_str(self):
        fb = Framebuffer(w=4, h=2)
        fb.draw_sprite(1, 1, [0x80])
        self.assertEqual(str(fb), "....\n.#..")


class TestMachine(unittest.TestCase):
    def test_initial_state(self):
        m = Machine()
        self.assertEqual(m.pc, 0x200)
        self.assertEqual(m.v_regs, [0] * 16)
        self.assertIsNone(m.key)
        self.assertFalse(m.sound_active)

    def test_resets_are_independent(self):
        m = Machine()
        m.load_rom(b"\x12\x34")
        m.v_regs[3], m.idx, m.pc = 9, 0x300, 0x400
        m.stack.append(0x202)
        m.dt, m.st = 10, 20

        m.reset_timers()
        self.assertEqual((m.dt, m.st), (0, 0))
        self.assertEqual(m.stack.sp, 1)

        m.reset_stack()
        self.assertEqual(m.stack.sp, 0)
        self.assertEqual(m.v_regs[3], 9)

        m.reset_registers()
        self.assertEqual((m.v_regs[3], m.idx, m.pc), (0, 0, 0x200))
        self.assertEqual(m.mem.read_word(0x200), 0x1234)

        m.reset_memory()
        self.assertEqual(m.mem.read_word(0x200), 0)
        self.assertEqual(m.mem.read(0, 80), bytes(C8_FONTS))

    def test_full_reset(self):
        m = Machine()
        m.load_rom(b"\x12\x34")
        m.v_regs[0xF], m.idx, m.pc, m.dt, m.st, m.key = 1, 0x300, 0x400, 3, 4, 0x7
        m.stack.append(0x202)
        m.screen.draw_sprite(0, 0, [0xFF])
        m.screen.dirty = False
        m.reset()
        self.assertEqual(m.v_regs, [0] * 16)
        self.assertEqual((m.idx, m.pc, m.dt, m.st), (0, 0x200, 0, 0))
        self.assertIsNone(m.key)
        self.assertEqual(m.stack.sp, 0)
        self.assertFalse(any(m.screen.buffer))
        self.assertTrue(m.screen.dirty)
        self.assertEqual(m.mem.read_word(0x200), 0)
        self.assertEqual(m.mem.read(0, 80), bytes(C8_FONTS))

    def test_str_dumps_state(self):
        m = Machine()
        m.v_regs[0xA] = 0x42
        dump = str(m)
        self.assertIn("PC_REGISTER:0x0200", dump)
        self.assertIn("VA:0x42", dump)


if __name__ == "__main__":
    unittest.main()
