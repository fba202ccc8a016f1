"""Interrupt flags and the table of pending timed events."""

from enum import IntEnum

DISABLED_TIME = 0xFFFFFFFF


class IntEvent(IntEnum):
    """Timed events the CPU loop waits on."""

    UNHALT = 0
    END = 1
    BLIT = 2
    SERIAL = 3
    OAM = 4
    DMA = 5
    TIMA = 6
    VIDEO = 7
    INTERRUPTS = 8


class InterruptRequester:
    """Holds IF/IE/IME/halt state and the time of every pending event."""

    def __init__(self):
        self._event_times = [DISABLED_TIME] * len(IntEvent)
        self._min_int_time = 0
        self._ifreg = 0
        self._iereg = 0
        self._ime = False
        self._halted = False

    @property
    def ifreg(self):
        return self._ifreg

    @property
    def ime(self):
        return self._ime

    @property
    def halted(self):
        return self._halted

    def _ime_or_halted(self):
        return self._ime or self._halted

    def _set_interrupt_time(self, value):
        self._event_times[IntEvent.INTERRUPTS] = value

    def save_state(self, state):
        state.mem.min_int_time = self._min_int_time
        state.mem.ime = self._ime
        state.mem.halted = self._halted

    def load_state(self, state):
        self._min_int_time = state.mem.min_int_time
        self._ifreg = state.mem.ioamhram[0x10F]
        self._iereg = state.mem.ioamhram[0x1FF] & 0x1F
        self._ime = bool(state.mem.ime)
        self._halted = bool(state.mem.halted)
        if self._ime_or_halted() and self.pending_irqs():
            self._set_interrupt_time(self._min_int_time)
        else:
            self._set_interrupt_time(DISABLED_TIME)

    def reset_cc(self, old_cc, new_cc):
        if self._min_int_time < old_cc:
            self._min_int_time = 0
        else:
            self._min_int_time -= old_cc - new_cc
        if self._event_times[IntEvent.INTERRUPTS] != DISABLED_TIME:
            self._set_interrupt_time(self._min_int_time)

    def pending_irqs(self):
        return self._ifreg & self._iereg

    def ei(self, cc):
        self._ime = True
        self._min_int_time = cc + 1
        if self.pending_irqs():
            self._set_interrupt_time(self._min_int_time)

    def di(self):
        self._ime = False
        if not self._ime_or_halted():
            self._set_interrupt_time(DISABLED_TIME)

    def halt(self):
        self._halted = True
        if self.pending_irqs():
            self._set_interrupt_time(self._min_int_time)

    def unhalt(self):
        self._halted = False
        if not self._ime_or_halted():
            self._set_interrupt_time(DISABLED_TIME)

    def flag_irq(self, bit):
        self._ifreg |= bit
        if self._ime_or_halted() and self.pending_irqs():
            self._set_interrupt_time(self._min_int_time)

    def ack_irq(self, bit):
        self._ifreg ^= bit
        self.di()

    def _refresh_interrupt_time(self):
        if self._ime_or_halted():
            self._set_interrupt_time(self._min_int_time if self.pending_irqs() else DISABLED_TIME)

    def set_iereg(self, iereg):
        self._iereg = iereg & 0x1F
        self._refresh_interrupt_time()

    def set_ifreg(self, ifreg):
        self._ifreg = ifreg
        self._refresh_interrupt_time()

    def min_event_id(self):
        """The event due soonest."""
        return min(IntEvent, key=lambda event: self._event_times[event])

    def min_event_time(self):
        return min(self._event_times)

    def set_event_time(self, event, value):
        self._event_times[event] = value

    def event_time(self, event):
        return self._event_times[event]


def flag_hdma_req(intreq):
    intreq.set_event_time(IntEvent.DMA, 0)


def flag_gdma_req(intreq):
    intreq.set_event_time(IntEvent.DMA, 1)


def ack_dma_req(intreq):
    intreq.set_event_time(IntEvent.DMA, DISABLED_TIME)


def hdma_req_flagged(intreq):
    return intreq.event_time(IntEvent.DMA) == 0


def gdma_req_flagged(intreq):
    return intreq.event_time(IntEvent.DMA) == 1