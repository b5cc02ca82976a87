# MEMORY LAYOUT
# 0x000 - 0x04F: built-in 4x5 font set (0-F), 5 bytes per glyph
# 0x050 - 0x1FF: reserved for the interpreter
# 0x200 - 0xFFF: program ROM and work RAM
#
# every address wraps around modulo 4096, so no instruction can read or write past 0xFFF


from .errors import RomTooLarge, StackOverflow, StackUnderflow


# ******************** STATIC SECTION
C8_FONTS = [0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
            0x20, 0x60, 0x20, 0x20, 0x70,  # 1
            0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
            0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
            0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
            0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
            0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
            0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
            0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
            0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
            0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
            0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
            0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
            0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
            0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
            0xF0, 0x80, 0xF0, 0x80, 0x80]  # F

FONT_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5
MEMORY_SIZE = 4096
ADDRESS_MASK = MEMORY_SIZE - 1
ROM_START_ADDRESS = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - ROM_START_ADDRESS
STACK_SIZE = 16
NUM_REGISTERS = 16
FLAG_REGISTER = 0xF
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32


# ******************** MEMORY SECTION
# ********** WRAPS A LIST TO REPRESENT A STACK WITH A LIMITED SIZE OF 16 ADDRESSES
class Stack:
    def __init__(self, capacity=STACK_SIZE):
        self.capacity = capacity
        self.addr_list = []

    def __len__(self):
        return len(self.addr_list)

    def __repr__(self):
        return "[" + ", ".join(f"0x{addr:04x}" for addr in self.addr_list) + "]"

    @property
    def sp(self):
        """stack pointer, the number of addresses currently held"""
        return len(self.addr_list)

    def append(self, address):
        if len(self.addr_list) >= self.capacity:
            raise StackOverflow(self.capacity)
        self.addr_list.append(address)

    def pop(self):
        if not self.addr_list:
            raise StackUnderflow()
        return self.addr_list.pop()

    def clear(self):
        self.addr_list.clear()


# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
class Memory:
    def __init__(self):
        self.inner = bytearray(MEMORY_SIZE)
        self.load_fonts()

    def __len__(self):
        return MEMORY_SIZE

    def __getitem__(self, address):
        return self.inner[address & ADDRESS_MASK]

    def __setitem__(self, address, value):
        self.inner[address & ADDRESS_MASK] = value & 0xFF

    def read(self, address, length):
        """return `length` bytes starting at address, wrapping past 0xFFF"""
        return bytes(self[address + i] for i in range(length))

    def write(self, address, data):
        for i, byte in enumerate(data):
            self[address + i] = byte

    def read_word(self, address):
        """read a big endian 16-bit word"""
        return self[address] << 8 | self[address + 1]

    def load_fonts(self):
        self.inner[FONT_ADDRESS:FONT_ADDRESS+len(C8_FONTS)] = bytes(C8_FONTS)

    def load_rom(self, rom):
        """copy the ROM bytes verbatim starting at 0x200"""
        if len(rom) > MAX_ROM_SIZE:
            raise RomTooLarge(len(rom), MAX_ROM_SIZE)
        self.inner[ROM_START_ADDRESS:ROM_START_ADDRESS+len(rom)] = bytes(rom)

    def clear(self):
        self.inner[:] = bytes(MEMORY_SIZE)


# ******************** DISPLAY SECTION
class Framebuffer:
    """64x32 monochrome pixels plus the dirty flag the display collaborator consumes"""
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT):
        self.w, self.h = w, h
        self.buffer = [0] * h * w
        self.dirty = True

    def __getitem__(self, xy):
        x, y = xy
        return self.buffer[(y % self.h) * self.w + (x % self.w)]

    def __str__(self):
        rows = []
        for y in range(self.h):
            rows.append("".join("#" if p else "." for p in self.buffer[y * self.w:(y + 1) * self.w]))
        return "\n".join(rows)

    def clear(self):
        self.buffer = [0] * self.h * self.w
        self.dirty = True

    def draw_sprite(self, x, y, sprite):
        """
        XOR the sprite rows onto the screen at (x, y), each byte is 8 pixels MSB first
        coordinates wrap around the screen edges
        return True if any pixel was turned off (collision)
        """
        collision = False
        for row, sprite_byte in enumerate(sprite):
            y_coordinate = (y + row) % self.h
            for col in range(8):
                if not sprite_byte & (0x80 >> col):
                    continue
                x_coordinate = (x + col) % self.w
                idx = y_coordinate * self.w + x_coordinate
                # the only case when a pixel gets erased is when it was ON and is turned ON again
                if self.buffer[idx]:
                    collision = True
                self.buffer[idx] ^= 1
        self.dirty = True
        return collision

    def lit(self):
        """yield the (x, y) coordinates of every pixel that is ON"""
        for idx, pixel in enumerate(self.buffer):
            if pixel:
                yield idx % self.w, idx // self.w


# ******************** MACHINE STATE SECTION
class Machine:
    """
    the mutable state instructions act on
    it is owned by a single Chip8 cpu, devices read from it or feed it but never mutate registers
    """
    def __init__(self):
        self.mem = Memory()
        self.stack = Stack()
        self.screen = Framebuffer()
        self.v_regs = [0] * NUM_REGISTERS
        self.pc = ROM_START_ADDRESS
        self.idx = 0    # I register, only the low 12 bits address memory
        self.dt = 0     # delay timer, active when non-zero
        self.st = 0     # sound timer, active when non-zero
        self.key = None # key currently held on the hex keypad, if any

    def __str__(self):
        registers = " ".join(f"V{i:X}:0x{v:02x}" for i, v in enumerate(self.v_regs))
        return (f"PC_REGISTER:0x{self.pc:04x} | IDX_REGISTER:0x{self.idx:04x} | DT:{self.dt} | ST:{self.st}\n"
                f"VARIABLE_REGISTERS:{registers}\n"
                f"STACK:{self.stack}\n"
                f"KEY:{self.key} | DRAW:{self.screen.dirty}")

    @property
    def sound_active(self):
        return self.st > 0

    def load_rom(self, rom):
        self.mem.load_rom(rom)

    def reset_memory(self):
        """wipe the memory, the font set is loaded again since every ROM expects it"""
        self.mem.clear()
        self.mem.load_fonts()

    def reset_registers(self):
        self.v_regs = [0] * NUM_REGISTERS
        self.idx = 0
        self.pc = ROM_START_ADDRESS

    def reset_stack(self):
        self.stack.clear()

    def reset_timers(self):
        self.dt = 0
        self.st = 0

    def reset(self):
        self.reset_memory()
        self.reset_registers()
        self.reset_stack()
        self.reset_timers()
        self.screen.clear()
        self.key = None
