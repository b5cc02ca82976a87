# CHIP-8 INFO
# https://chip-8.github.io/extensions/#chip-8
# https://chip-8.github.io/links/
#
# MASTERING CHIP-8
# https://github.com/mattmikolay/chip-8/wiki/Mastering-CHIP%E2%80%908
#
# TEST SUITE
# https://github.com/Timendus/chip8-test-suite


import random
from enum import Enum

from .debug import log
from .errors import InvalidRegister
from .instructions import Instruction, Op, decode
from .machine import FLAG_REGISTER, FONT_ADDRESS, FONT_GLYPH_SIZE, NUM_REGISTERS, Machine


class Flow(Enum):
    """what the program counter does once an instruction has been executed"""
    NEXT = "next"   # advance to the following instruction
    SKIP = "skip"   # jump over the following instruction
    JUMP = "jump"   # the instruction already set the program counter
    WAIT = "wait"   # stay put, the same instruction is fetched again on the next cycle


INSTRUCTION_SIZE = 0x2


# ******************** CPU SECTION
class Chip8:
    def __init__(self, machine=None, rng=None):
        self.m = machine if machine is not None else Machine()
        self.rng = rng if rng is not None else random.Random()
        self.instructions = {
            Op.CLEAR_DISPLAY: self._clear_screen,
            Op.RETURN: self._return,
            Op.JUMP: self._jump,
            Op.CALL: self._call_addr,
            Op.SKIP_EQUAL: self._skip_if_eq,
            Op.SKIP_NOT_EQUAL: self._skip_if_not_eq,
            Op.SKIP_EQUAL_XY: self._skip_if_eq_regs,
            Op.LOAD: self._set_vx,
            Op.ADD: self._add_to_vx,
            Op.MOVE: self._set_vx_to_vy,
            Op.OR: self._set_vx_or_vy,
            Op.AND: self._set_vx_and_vy,
            Op.XOR: self._set_vx_xor_vy,
            Op.ADD_XY: self._add_vx_vy,
            Op.SUB_XY: self._sub_vx_vy,
            Op.SHIFT_RIGHT: self._shr,
            Op.SUB_YX: self._subn_vx_vy,
            Op.SHIFT_LEFT: self._shl,
            Op.SKIP_NOT_EQUAL_XY: self._skip_if_not_eq_regs,
            Op.LOAD_I: self._set_idx,
            Op.JUMP_V0: self._jump_plus,
            Op.RANDOM: self._random_byte_and,
            Op.DRAW: self._to_screen,
            Op.SKIP_KEY_PRESSED: self._skip_if_pressed,
            Op.SKIP_KEY_NOT_PRESSED: self._skip_if_not_pressed,
            Op.LOAD_DELAY: self._set_vx_dt,
            Op.WAIT_KEY_PRESS: self._wait_keypress,
            Op.SET_DELAY: self._set_dt_vx,
            Op.SET_SOUND: self._set_st,
            Op.ADD_I: self._add_to_idx,
            Op.LOAD_FONT: self._select_char,
            Op.STORE_BCD: self._bcd_repr,
            Op.STORE_REGISTERS: self._store_vregs,
            Op.LOAD_MEMORY: self._load_vregs,
        }

    def __str__(self):
        return str(self.m)

    # ********** FETCH / DECODE / EXECUTE
    def fetch(self) -> Instruction:
        """read the two bytes at PC and decode them, PC is not moved"""
        opcode = self.m.mem.read_word(self.m.pc)
        return decode(opcode, self.m.pc)

    def execute(self, instruction: Instruction) -> Flow:
        """apply one instruction to the machine state and move the program counter accordingly"""
        for register in (instruction.x, instruction.y):
            if not 0 <= register < NUM_REGISTERS:
                raise InvalidRegister(register)
        log(f"mem_addr: 0x{self.m.pc:04x}    instruction: {instruction}")
        flow = self.instructions[instruction.op](instruction)
        if flow is Flow.NEXT:
            self.m.pc = (self.m.pc + INSTRUCTION_SIZE) & 0xFFFF
        elif flow is Flow.SKIP:
            self.m.pc = (self.m.pc + 2 * INSTRUCTION_SIZE) & 0xFFFF
        return flow

    def cycle(self) -> Flow:
        """emulate one machine cycle: fetch, decode and execute a single instruction"""
        return self.execute(self.fetch())

    def _skip_if(self, condition):
        return Flow.SKIP if condition else Flow.NEXT

    # ********** SYSTEM AND FLOW CONTROL
    def _clear_screen(self, ins):
        self.m.screen.clear()
        return Flow.NEXT

    def _return(self, ins):
        """return from a subroutine"""
        self.m.pc = self.m.stack.pop()
        return Flow.JUMP

    def _jump(self, ins):
        self.m.pc = ins.value
        return Flow.JUMP

    def _jump_plus(self, ins):
        self.m.pc = (ins.value + self.m.v_regs[0x0]) & 0xFFFF
        return Flow.JUMP

    def _call_addr(self, ins):
        """push the address of the instruction after the call, then jump"""
        self.m.stack.append((self.m.pc + INSTRUCTION_SIZE) & 0xFFFF)
        self.m.pc = ins.value
        return Flow.JUMP

    def _skip_if_eq(self, ins):
        return self._skip_if(self.m.v_regs[ins.x] == ins.value)

    def _skip_if_not_eq(self, ins):
        return self._skip_if(self.m.v_regs[ins.x] != ins.value)

    def _skip_if_eq_regs(self, ins):
        return self._skip_if(self.m.v_regs[ins.x] == self.m.v_regs[ins.y])

    def _skip_if_not_eq_regs(self, ins):
        return self._skip_if(self.m.v_regs[ins.x] != self.m.v_regs[ins.y])

    # ********** REGISTERS AND ALU
    def _set_vx(self, ins):
        """set the value of one of the 16 variable registers, Vx"""
        self.m.v_regs[ins.x] = ins.value
        return Flow.NEXT

    def _add_to_vx(self, ins):
        """add to the value already present in Vx, VF is left untouched"""
        self.m.v_regs[ins.x] = (self.m.v_regs[ins.x] + ins.value) & 0xFF
        return Flow.NEXT

    def _set_vx_to_vy(self, ins):
        self.m.v_regs[ins.x] = self.m.v_regs[ins.y]
        return Flow.NEXT

    def _set_vx_or_vy(self, ins):
        self.m.v_regs[ins.x] |= self.m.v_regs[ins.y]
        return Flow.NEXT

    def _set_vx_and_vy(self, ins):
        self.m.v_regs[ins.x] &= self.m.v_regs[ins.y]
        return Flow.NEXT

    def _set_vx_xor_vy(self, ins):
        self.m.v_regs[ins.x] ^= self.m.v_regs[ins.y]
        return Flow.NEXT

    # the flag is always written last: when Vx is VF the flag wins over the result
    def _add_vx_vy(self, ins):
        """set Vx = Vx + Vy, VF = carry"""
        total = self.m.v_regs[ins.x] + self.m.v_regs[ins.y]
        self.m.v_regs[ins.x] = total & 0xFF
        self.m.v_regs[FLAG_REGISTER] = 1 if total > 0xFF else 0
        return Flow.NEXT

    def _sub_vx_vy(self, ins):
        """set Vx = Vx - Vy, VF = NOT borrow"""
        vx, vy = self.m.v_regs[ins.x], self.m.v_regs[ins.y]
        self.m.v_regs[ins.x] = (vx - vy) & 0xFF
        self.m.v_regs[FLAG_REGISTER] = 1 if vx >= vy else 0
        return Flow.NEXT

    def _subn_vx_vy(self, ins):
        """set Vx = Vy - Vx, VF = NOT borrow"""
        vx, vy = self.m.v_regs[ins.x], self.m.v_regs[ins.y]
        self.m.v_regs[ins.x] = (vy - vx) & 0xFF
        self.m.v_regs[FLAG_REGISTER] = 1 if vy >= vx else 0
        return Flow.NEXT

    def _shr(self, ins):
        """set Vx = Vx SHR 1, VF = the bit shifted out"""
        vx = self.m.v_regs[ins.x]
        self.m.v_regs[ins.x] = vx >> 1
        self.m.v_regs[FLAG_REGISTER] = vx & 0x1
        return Flow.NEXT

    def _shl(self, ins):
        """set Vx = Vx SHL 1, VF = the bit shifted out"""
        vx = self.m.v_regs[ins.x]
        self.m.v_regs[ins.x] = (vx << 1) & 0xFF
        self.m.v_regs[FLAG_REGISTER] = (vx & 0x80) >> 7
        return Flow.NEXT

    def _random_byte_and(self, ins):
        self.m.v_regs[ins.x] = self.rng.randint(0, 255) & ins.value
        return Flow.NEXT

    # ********** INDEX REGISTER AND MEMORY
    def _set_idx(self, ins):
        self.m.idx = ins.value
        return Flow.NEXT

    def _add_to_idx(self, ins):
        """set I = I + Vx"""
        self.m.idx = (self.m.idx + self.m.v_regs[ins.x]) & 0xFFFF
        return Flow.NEXT

    def _select_char(self, ins):
        """set I to location of sprite for digit Vx"""
        self.m.idx = FONT_ADDRESS + self.m.v_regs[ins.x] * FONT_GLYPH_SIZE
        return Flow.NEXT

    def _bcd_repr(self, ins):
        """store the hundreds digit of Vx at I, the tens digit at I+1, the ones digit at I+2"""
        vx = self.m.v_regs[ins.x]
        self.m.mem.write(self.m.idx, (vx // 100, vx // 10 % 10, vx % 10))
        return Flow.NEXT

    # I is left where it is, the original COSMAC VIP incremented it (quirk 6)
    def _store_vregs(self, ins):
        """store registers V0 through Vx (included) in memory starting at location I"""
        self.m.mem.write(self.m.idx, self.m.v_regs[:ins.x+1])
        return Flow.NEXT

    def _load_vregs(self, ins):
        """read registers V0 through Vx (included) from memory starting at location I"""
        self.m.v_regs[:ins.x+1] = self.m.mem.read(self.m.idx, ins.x + 1)
        return Flow.NEXT

    # ********** DISPLAY
    def _to_screen(self, ins):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        sprite = self.m.mem.read(self.m.idx, ins.value)
        collision = self.m.screen.draw_sprite(self.m.v_regs[ins.x], self.m.v_regs[ins.y], sprite)
        self.m.v_regs[FLAG_REGISTER] = 1 if collision else 0
        return Flow.NEXT

    # ********** KEYPAD AND TIMERS
    def _skip_if_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        return self._skip_if(self.m.key == self.m.v_regs[ins.x])

    def _skip_if_not_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        return self._skip_if(self.m.key != self.m.v_regs[ins.x])

    def _wait_keypress(self, ins):
        """wait for a key press and store its value in Vx"""
        if self.m.key is None:
            return Flow.WAIT
        self.m.v_regs[ins.x] = self.m.key
        return Flow.NEXT

    def _set_vx_dt(self, ins):
        self.m.v_regs[ins.x] = self.m.dt
        return Flow.NEXT

    def _set_dt_vx(self, ins):
        self.m.dt = self.m.v_regs[ins.x]
        return Flow.NEXT

    def _set_st(self, ins):
        self.m.st = self.m.v_regs[ins.x]
        return Flow.NEXT
