import pytest

from gbemu.rtc import Rtc
from gbemu.savestate import SaveState


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def latched_state(rtc):
    rtc.latch(0)
    rtc.latch(1)
    state = SaveState()
    rtc.save_state(state)
    return state.rtc


def test_latch_splits_elapsed_time():
    clock = FakeClock(2 * 86400 + 3 * 3600 + 25 * 60 + 7)
    rtc = Rtc(clock)
    regs = latched_state(rtc)
    assert (regs.data_dl, regs.data_h, regs.data_m, regs.data_s) == (2, 3, 25, 7)
    assert regs.data_dh & 0x80 == 0


def test_latch_only_on_rising_edge():
    clock = FakeClock(3 * 3600)
    rtc = Rtc(clock)
    rtc.latch(1)
    clock.now = 5 * 3600
    rtc.latch(1)
    state = SaveState()
    rtc.save_state(state)
    assert state.rtc.data_h == 3
    rtc.latch(0)
    rtc.latch(1)
    rtc.save_state(state)
    assert state.rtc.data_h == 5


def test_day_counter_overflow_sets_carry():
    clock = FakeClock(0x1FF * 86400 + 5)
    rtc = Rtc(clock)
    regs = latched_state(rtc)
    assert regs.data_dh & 0x80
    assert regs.data_s == 5
    assert rtc.base_time == 0x1FF * 86400


def test_no_register_selected():
    rtc = Rtc(FakeClock(0))
    assert rtc.active() is None
    rtc.set(True, 0)
    assert rtc.active() is None
    rtc.set(False, 8)
    assert rtc.active() is None
    with pytest.raises(RuntimeError):
        rtc.write(1)


@pytest.mark.parametrize(
    "bank, value, field",
    [(8, 30, "data_s"), (9, 12, "data_m"), (10, 17, "data_h"), (11, 200, "data_dl")],
)
def test_write_then_latch_round_trip(bank, value, field):
    clock = FakeClock(1_000_000)
    rtc = Rtc(clock)
    rtc.set(True, bank)
    rtc.write(value)
    assert rtc.active() == value
    regs = latched_state(rtc)
    assert getattr(regs, field) == value


def test_time_keeps_running_after_write():
    clock = FakeClock(1_000_000)
    rtc = Rtc(clock)
    rtc.set(True, 8)
    rtc.write(10)
    clock.now += 5
    assert latched_state(rtc).data_s == 15


def test_halt_freezes_clock():
    clock = FakeClock(1_000_000)
    rtc = Rtc(clock)
    before = latched_state(rtc)
    rtc.set(True, 0xC)
    rtc.write(0x40)
    clock.now += 100
    after = latched_state(rtc)
    assert (after.data_h, after.data_m, after.data_s) == (
        before.data_h,
        before.data_m,
        before.data_s,
    )
    assert rtc.halt_time == 1_000_000


def test_save_load_round_trip():
    clock = FakeClock(4 * 86400 + 77)
    rtc = Rtc(clock)
    rtc.set(True, 8)
    rtc.write(42)
    rtc.latch(1)
    first = SaveState()
    rtc.save_state(first)

    other = Rtc(clock)
    other.load_state(first)
    second = SaveState()
    other.save_state(second)
    assert second.rtc == first.rtc