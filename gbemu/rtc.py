"""The MBC3 real-time clock."""

import time

_U64 = (1 << 64) - 1
_DAY = 86400
_MAX_SPAN = 0x1FF * _DAY

_S, _M, _H, _DL, _DH = range(5)
_HALT_BIT = 0x40
_CARRY_BIT = 0x80


class Rtc:
    """Clock registers kept as an offset (``base_time``) from the host clock.

    ``clock`` returns the current Unix time in seconds; it defaults to the
    system clock.
    """

    def __init__(self, clock=None):
        self._clock = clock if clock is not None else time.time
        self.base_time = 0
        self.halt_time = 0
        self._regs = [0] * 5
        self._index = 5
        self._enabled = False
        self._last_latch_data = False
        self._active = None
        self._setters = (self._set_s, self._set_m, self._set_h, self._set_dl, self._set_dh)

    def _now(self):
        return int(self._clock()) & _U64

    def _clock_time(self):
        return self.halt_time if self._regs[_DH] & _HALT_BIT else self._now()

    def _elapsed(self):
        return (self._clock_time() - self.base_time) & _U64

    def active(self):
        """Value of the selected clock register, or None when none is selected."""
        if self._active is None:
            return None
        return self._regs[self._active]

    def latch(self, data):
        """Copy the running time into the registers on a 0 -> 1 write."""
        if not self._last_latch_data and data == 1:
            self._do_latch()
        self._last_latch_data = bool(data)

    def _do_latch(self):
        regs = self._regs
        elapsed = (self._clock_time() - self.base_time) & _U64

        if elapsed > _MAX_SPAN:
            wraps = (elapsed - 1) // _MAX_SPAN
            self.base_time = (self.base_time + wraps * _MAX_SPAN) & _U64
            elapsed -= wraps * _MAX_SPAN
            regs[_DH] |= _CARRY_BIT

        days, rest = divmod(elapsed, _DAY)
        regs[_DL] = days & 0xFF
        regs[_DH] = (regs[_DH] & 0xFE) | ((days & 0x100) >> 8)
        hours, rest = divmod(rest, 3600)
        minutes, seconds = divmod(rest, 60)
        regs[_H] = hours
        regs[_M] = minutes
        regs[_S] = seconds

    def _swap_active(self):
        if not self._enabled or self._index > 4:
            self._active = None
        else:
            self._active = self._index

    def save_state(self, state):
        rtc = state.rtc
        rtc.base_time = self.base_time
        rtc.halt_time = self.halt_time
        rtc.data_dh = self._regs[_DH]
        rtc.data_dl = self._regs[_DL]
        rtc.data_h = self._regs[_H]
        rtc.data_m = self._regs[_M]
        rtc.data_s = self._regs[_S]
        rtc.last_latch_data = self._last_latch_data

    def load_state(self, state):
        rtc = state.rtc
        self.base_time = rtc.base_time & _U64
        self.halt_time = rtc.halt_time & _U64
        self._regs[_DH] = rtc.data_dh & 0xFF
        self._regs[_DL] = rtc.data_dl & 0xFF
        self._regs[_H] = rtc.data_h & 0xFF
        self._regs[_M] = rtc.data_m & 0xFF
        self._regs[_S] = rtc.data_s & 0xFF
        self._last_latch_data = bool(rtc.last_latch_data)
        self._swap_active()

    def set(self, enabled, bank):
        """Select a clock register from a RAM bank number (0x08-0x0C)."""
        self._enabled = bool(enabled)
        self._index = ((bank & 0xF) - 8) & 0xFF
        self._swap_active()

    def write(self, data):
        """Write the selected clock register."""
        if self._active is None:
            raise RuntimeError("no clock register is selected")
        self._setters[self._active](data)
        self._regs[self._active] = data & 0xFF

    def _shift_base(self, old_units, new_units, unit):
        self.base_time = (self.base_time + old_units * unit - new_units * unit) & _U64

    def _set_dh(self, new_dh):
        old_highdays = (self._elapsed() // _DAY) & 0x100
        self._shift_base(old_highdays, (new_dh & 0x1) << 8, _DAY)

        if (self._regs[_DH] ^ new_dh) & _HALT_BIT:
            if new_dh & _HALT_BIT:
                self.halt_time = self._now()
            else:
                self.base_time = (self.base_time + self._now() - self.halt_time) & _U64

    def _set_dl(self, new_lowdays):
        self._shift_base((self._elapsed() // _DAY) & 0xFF, new_lowdays, _DAY)

    def _set_h(self, new_hours):
        self._shift_base((self._elapsed() // 3600) % 24, new_hours, 3600)

    def _set_m(self, new_minutes):
        self._shift_base((self._elapsed() // 60) % 60, new_minutes, 60)

    def _set_s(self, new_seconds):
        self._shift_base(self._elapsed() % 60, new_seconds, 1)