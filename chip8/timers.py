TIMER_HZ = 60
CPU_HZ = 600


class Cadence:
    """
    turns elapsed wall clock time into a whole number of ticks at a fixed rate
    the fraction of a tick that is left over is carried to the next call
    """
    def __init__(self, hz):
        if hz <= 0:
            raise ValueError(f"a cadence needs a positive rate, got {hz}")
        self.hz = hz
        self.period = 1.0 / hz
        self._pending = 0.0

    def __repr__(self):
        return f"Cadence(hz={self.hz})"

    def due(self, elapsed: float) -> int:
        """return how many ticks fall within `elapsed` seconds"""
        self._pending += elapsed
        ticks = int(self._pending * self.hz + 1e-9)
        self._pending = max(self._pending - ticks * self.period, 0.0)
        return ticks


class TimerDriver:
    """
    decrements the delay and sound timers once per 60 Hz tick, independently of how many instructions ran
    the sink (anything with a set_tone(bool) method) is told when the sound timer level changes
    """
    def __init__(self, machine, sink=None, hz=TIMER_HZ):
        self.m = machine
        self.sink = sink
        self.cadence = Cadence(hz)
        self.tone = False

    def tick(self) -> bool:
        """
        run one timer tick and return True if the tone sounds during it
        the level is sampled before decrementing, so ST=n keeps the tone on for n ticks
        """
        self.sync_tone()
        if self.m.dt > 0:
            self.m.dt -= 1
        if self.m.st > 0:
            self.m.st -= 1
        return self.tone

    def sync_tone(self):
        """notify the sink if the sound timer crossed between zero and non-zero"""
        active = self.m.sound_active
        if active != self.tone:
            self.tone = active
            if self.sink is not None:
                self.sink.set_tone(active)

    def advance(self, elapsed: float) -> int:
        """run every tick that falls within `elapsed` seconds and return how many ran"""
        ticks = self.cadence.due(elapsed)
        for _ in range(ticks):
            self.tick()
        return ticks
