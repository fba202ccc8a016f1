"""The programmable timer (TIMA, TMA and TAC registers)."""

from gbemu.interrupts import DISABLED_TIME, IntEvent

_TIMA_CLOCK = (10, 4, 6, 8)
_TIMER_IRQ_BIT = 4


class TimaInterruptRequester:
    """The timer's view of the interrupt requester."""

    def __init__(self, intreq):
        self._intreq = intreq

    def flag_irq(self):
        self._intreq.flag_irq(_TIMER_IRQ_BIT)

    def next_irq_event_time(self):
        return self._intreq.event_time(IntEvent.TIMA)

    def set_next_irq_event_time(self, time):
        self._intreq.set_event_time(IntEvent.TIMA, time)


class Tima:
    """Counts TIMA up at the TAC-selected rate and reloads it from TMA on overflow."""

    def __init__(self):
        self._last_update = 0
        self._tmatime = DISABLED_TIME
        self._tima = 0
        self._tma = 0
        self._tac = 0

    def _clock(self, tac=None):
        return _TIMA_CLOCK[(self._tac if tac is None else tac) & 3]

    def save_state(self, state):
        state.mem.tima_last_update = self._last_update
        state.mem.tmatime = self._tmatime

    def load_state(self, state, tima_irq):
        ioamhram = state.mem.ioamhram
        self._last_update = state.mem.tima_last_update
        self._tmatime = state.mem.tmatime
        self._tima = ioamhram[0x105]
        self._tma = ioamhram[0x106]
        self._tac = ioamhram[0x107]

        next_irq = DISABLED_TIME
        if self._tac & 4:
            if self._tmatime != DISABLED_TIME and self._tmatime > state.cpu.cycle_counter:
                next_irq = self._tmatime
            else:
                next_irq = self._last_update + ((256 - self._tima) << self._clock()) + 3
        tima_irq.set_next_irq_event_time(next_irq)

    def reset_cc(self, old_cc, new_cc, tima_irq):
        if self._tac & 0x04:
            self._update_irq(old_cc, tima_irq)
            self._update_tima(old_cc)

            dec = old_cc - new_cc
            self._last_update -= dec
            tima_irq.set_next_irq_event_time(tima_irq.next_irq_event_time() - dec)
            if self._tmatime != DISABLED_TIME:
                self._tmatime -= dec

    def _update_irq(self, cc, tima_irq):
        while cc >= tima_irq.next_irq_event_time():
            self.do_irq_event(tima_irq)

    def _update_tima(self, cc):
        clock = self._clock()
        ticks = (cc - self._last_update) >> clock
        self._last_update += ticks << clock

        if cc >= self._tmatime:
            if cc >= self._tmatime + 4:
                self._tmatime = DISABLED_TIME
            self._tima = self._tma

        value = self._tima + ticks
        while value > 0x100:
            value -= 0x100 - self._tma

        if value == 0x100:
            value = 0
            self._tmatime = self._last_update + 3
            if cc >= self._tmatime:
                if cc >= self._tmatime + 4:
                    self._tmatime = DISABLED_TIME
                value = self._tma

        self._tima = value

    def set_tima(self, data, cc, tima_irq):
        data &= 0xFF
        if self._tac & 0x04:
            self._update_irq(cc, tima_irq)
            self._update_tima(cc)
            if 0 <= self._tmatime - cc < 4:
                self._tmatime = DISABLED_TIME
            tima_irq.set_next_irq_event_time(
                self._last_update + ((256 - data) << self._clock()) + 3
            )
        self._tima = data

    def set_tma(self, data, cc, tima_irq):
        if self._tac & 0x04:
            self._update_irq(cc, tima_irq)
            self._update_tima(cc)
        self._tma = data & 0xFF

    def set_tac(self, data, cc, tima_irq):
        data &= 0xFF
        if self._tac ^ data:
            next_irq = tima_irq.next_irq_event_time()

            if self._tac & 0x04:
                self._update_irq(cc, tima_irq)
                self._update_tima(cc)

                shift = (1 << (self._clock() - 1)) + 3
                self._last_update -= shift
                self._tmatime -= shift
                next_irq -= shift

                if cc >= next_irq:
                    tima_irq.flag_irq()

                self._update_tima(cc)
                self._tmatime = DISABLED_TIME
                next_irq = DISABLED_TIME

            if data & 4:
                clock = self._clock(data)
                self._last_update = (cc >> clock) << clock
                next_irq = self._last_update + ((256 - self._tima) << clock) + 3

            tima_irq.set_next_irq_event_time(next_irq)

        self._tac = data

    def tima(self, cc):
        """The TIMA register as read at cycle ``cc``."""
        if self._tac & 0x04:
            self._update_tima(cc)
        return self._tima

    def do_irq_event(self, tima_irq):
        tima_irq.flag_irq()
        tima_irq.set_next_irq_event_time(
            tima_irq.next_irq_event_time() + ((256 - self._tma) << self._clock())
        )