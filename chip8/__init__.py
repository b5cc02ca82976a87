from .cpu import Chip8, Flow
from .errors import (Chip8Error, DisplayError, InvalidInstruction, InvalidRegister,
                     RomTooLarge, StackOverflow, StackUnderflow)
from .instructions import Instruction, Op, decode, disassemble
from .machine import Machine
from .opcode import OpCode
from .rom import Rom
from .timers import Cadence, TimerDriver
