import argparse
import sys

from .cpu import Chip8, Flow
from .debug import log
from .devices import SCALE, Buzzer, Keypad, Screen, pygame
from .errors import Chip8Error, DisplayError
from .instructions import disassemble
from .machine import ROM_START_ADDRESS, Machine
from .rom import Rom
from .timers import CPU_HZ, TIMER_HZ, Cadence, TimerDriver

MAX_FRAME_TIME = 0.25   # seconds, longer stalls (window drag, debugger) are not caught up


class Emulator:
    """
    glues the cpu to its timers: instructions and timer ticks run on two separate cadences
    sharing nothing but the machine's timer fields
    """
    def __init__(self, chip, sink=None, cpu_hz=CPU_HZ, timer_hz=TIMER_HZ):
        self.chip = chip
        self.cpu = Cadence(cpu_hz)
        self.timers = TimerDriver(chip.m, sink, timer_hz)
        self.waiting = False

    @property
    def machine(self):
        return self.chip.m

    def frame(self, elapsed, key=None):
        """
        sample the key, run the instructions due in `elapsed` seconds, then the timer ticks due
        return the number of instructions executed
        """
        elapsed = min(elapsed, MAX_FRAME_TIME)
        self.chip.m.key = key
        steps = self.cpu.due(elapsed)
        for _ in range(steps):
            self.waiting = self.chip.cycle() is Flow.WAIT
        self.timers.advance(elapsed)
        return steps


# ******************** ENTRY POINT SECTION
def positive_int(text):
    """argparse type for rates and sizes that must be at least 1"""
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {text}")
    return value


def get_args(argv=None):
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 interpreter")
    parser.add_argument("-f", "--file", required=True, help="input rom file")
    parser.add_argument("--cpu-hz", type=positive_int, default=CPU_HZ, help="instructions executed per second")
    parser.add_argument("--timer-hz", type=positive_int, default=TIMER_HZ, help="delay/sound timer decrements per second")
    parser.add_argument("--scale", type=positive_int, default=SCALE, help="size in window pixels of a CHIP-8 pixel")
    parser.add_argument("--disassemble", action="store_true", help="print the ROM listing and exit")
    return parser.parse_args(argv)


def print_listing(rom):
    for address, word, text in disassemble(rom.data, ROM_START_ADDRESS):
        print(f"0x{address:04x}    {word:04x}    {text}")


def main(argv=None):
    args = get_args(argv)
    # CPU, set up entirely before any window is opened
    machine = Machine()
    try:
        rom = Rom.from_file(args.file)
        machine.load_rom(rom)
    except (OSError, Chip8Error) as e:
        sys.exit(f"cannot load {args.file}: {e}")
    if args.disassemble:
        print_listing(rom)
        return
    emu = Emulator(Chip8(machine), cpu_hz=args.cpu_hz, timer_hz=args.timer_hz)

    # pygame initialization
    pygame.init()
    clock = pygame.time.Clock()
    # IO
    try:
        screen = Screen(s=args.scale, caption=rom.name)
    except DisplayError as e:
        pygame.quit()
        sys.exit(str(e))
    keypad = Keypad()
    buzzer = Buzzer()
    emu.timers.sink = buzzer
    log(f"running {rom!r} at {args.cpu_hz} Hz, timers at {args.timer_hz} Hz")
    # emulation loop
    run = True
    try:
        while run:
            elapsed = clock.tick(args.timer_hz) / 1000
            # process user input
            for event in pygame.event.get():
                if event.type == pygame.QUIT or (event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE):
                    run = False
                else:
                    keypad.handle_event(event)
            emu.frame(elapsed, keypad.pressed)
            # refresh screen if needed
            if machine.screen.dirty:
                screen.render(machine.screen)
                machine.screen.dirty = False
    except Chip8Error as e:
        sys.exit(f"********** THE EMULATOR CRASHED WITH THE FOLLOWING STATE\n{e}\n{machine}")
    finally:
        buzzer.set_tone(False)
        pygame.quit()


if __name__ == "__main__":
    main()
