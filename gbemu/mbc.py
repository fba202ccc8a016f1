"""Memory bank controllers: how cartridge writes select ROM and RAM banks."""

from abc import ABC, abstractmethod

from gbemu.memptrs import RamFlag

_RAM_READ_WRITE = RamFlag.READ_EN | RamFlag.WRITE_EN


def _rambanks(memptrs):
    return (memptrs.rambankdataend - memptrs.rambankdata) // 0x2000


def _rombanks(memptrs):
    return (memptrs.romdataend - memptrs.romdata) // 0x4000


def _to_multi64_rombank(rombank):
    return (rombank >> 1 & 0x30) | (rombank & 0xF)


def _enables_ram(data):
    return (data & 0xF) == 0xA


def _mbc1_adjusted_rombank(bank):
    return bank if bank & 0x1F else bank | 1


class Mbc(ABC):
    """A bank controller that reacts to writes into the ROM area."""

    def __init__(self, memptrs):
        self._memptrs = memptrs

    @abstractmethod
    def rom_write(self, address, data):
        """Handle a CPU write to ``address`` in 0x0000-0x7FFF."""

    @abstractmethod
    def save_state(self, mem):
        """Store the controller registers into a MemState."""

    @abstractmethod
    def load_state(self, mem):
        """Restore the controller registers from a MemState and remap banks."""

    def can_map_rombank(self, address, rombank):
        """True when ``rombank`` can appear at ``address``."""
        return (address < 0x4000) == (rombank == 0)

    def _ram_flags(self, enabled):
        return _RAM_READ_WRITE if enabled else 0


class Mbc0(Mbc):
    """No banking; only the RAM enable register."""

    def __init__(self, memptrs):
        super().__init__(memptrs)
        self._enable_ram = False

    def rom_write(self, address, data):
        if address < 0x2000:
            self._enable_ram = _enables_ram(data)
            self._memptrs.set_rambank(self._ram_flags(self._enable_ram), 0)

    def save_state(self, mem):
        mem.enable_ram = self._enable_ram

    def load_state(self, mem):
        self._enable_ram = bool(mem.enable_ram)
        self._memptrs.set_rambank(self._ram_flags(self._enable_ram), 0)


class Mbc1(Mbc):
    """MBC1 with 5+2 bit ROM bank and a ROM/RAM banking mode switch."""

    def __init__(self, memptrs):
        super().__init__(memptrs)
        self._rombank = 1
        self._rambank = 0
        self._enable_ram = False
        self._rambank_mode = False

    def _set_rambank(self):
        self._memptrs.set_rambank(
            self._ram_flags(self._enable_ram),
            self._rambank & (_rambanks(self._memptrs) - 1),
        )

    def _set_rombank(self):
        self._memptrs.set_rombank(
            _mbc1_adjusted_rombank(self._rombank) & (_rombanks(self._memptrs) - 1)
        )

    def rom_write(self, address, data):
        region = address >> 13 & 3
        if region == 0:
            self._enable_ram = _enables_ram(data)
            self._set_rambank()
        elif region == 1:
            if self._rambank_mode:
                self._rombank = data & 0x1F
            else:
                self._rombank = (self._rombank & 0x60) | (data & 0x1F)
            self._set_rombank()
        elif region == 2:
            if self._rambank_mode:
                self._rambank = data & 3
                self._set_rambank()
            else:
                self._rombank = (data << 5 & 0x60) | (self._rombank & 0x1F)
                self._set_rombank()
        else:
            # The mode only takes effect on the next bank write.
            self._rambank_mode = bool(data & 1)

    def save_state(self, mem):
        mem.rombank = self._rombank
        mem.rambank = self._rambank
        mem.enable_ram = self._enable_ram
        mem.rambank_mode = self._rambank_mode

    def load_state(self, mem):
        self._rombank = mem.rombank & 0xFF
        self._rambank = mem.rambank & 0xFF
        self._enable_ram = bool(mem.enable_ram)
        self._rambank_mode = bool(mem.rambank_mode)
        self._set_rambank()
        self._set_rombank()


class Mbc1Multi64(Mbc):
    """MBC1 wired for 64-bank multi-game carts, where bank 0 is switchable too."""

    def __init__(self, memptrs):
        super().__init__(memptrs)
        self._rombank = 1
        self._enable_ram = False
        self._rombank0_mode = False

    def _set_rombank(self):
        if self._rombank0_mode:
            bank = _to_multi64_rombank(self._rombank)
            self._memptrs.set_rombank0(bank & 0x30)
            self._memptrs.set_rombank(_mbc1_adjusted_rombank(bank))
        else:
            self._memptrs.set_rombank0(0)
            self._memptrs.set_rombank(
                _mbc1_adjusted_rombank(self._rombank) & (_rombanks(self._memptrs) - 1)
            )

    def rom_write(self, address, data):
        region = address >> 13 & 3
        if region == 0:
            self._enable_ram = _enables_ram(data)
            self._memptrs.set_rambank(self._ram_flags(self._enable_ram), 0)
        elif region == 1:
            self._rombank = (self._rombank & 0x60) | (data & 0x1F)
            if self._rombank0_mode:
                bank = _mbc1_adjusted_rombank(_to_multi64_rombank(self._rombank))
            else:
                bank = _mbc1_adjusted_rombank(self._rombank) & (_rombanks(self._memptrs) - 1)
            self._memptrs.set_rombank(bank)
        elif region == 2:
            self._rombank = (data << 5 & 0x60) | (self._rombank & 0x1F)
            self._set_rombank()
        else:
            self._rombank0_mode = bool(data & 1)
            self._set_rombank()

    def save_state(self, mem):
        mem.rombank = self._rombank
        mem.enable_ram = self._enable_ram
        mem.rambank_mode = self._rombank0_mode

    def load_state(self, mem):
        self._rombank = mem.rombank & 0xFF
        self._enable_ram = bool(mem.enable_ram)
        self._rombank0_mode = bool(mem.rambank_mode)
        self._memptrs.set_rambank(self._ram_flags(self._enable_ram), 0)
        self._set_rombank()

    def can_map_rombank(self, address, rombank):
        return (address < 0x4000) == ((rombank & 0xF) == 0)


class Mbc2(Mbc):
    """MBC2: 4-bit ROM bank, registers selected by address bit 8."""

    def __init__(self, memptrs):
        super().__init__(memptrs)
        self._rombank = 1
        self._enable_ram = False

    def rom_write(self, address, data):
        selector = address & 0x6100
        if selector == 0x0000:
            self._enable_ram = _enables_ram(data)
            self._memptrs.set_rambank(self._ram_flags(self._enable_ram), 0)
        elif selector == 0x2100:
            self._rombank = data & 0xF
            self._memptrs.set_rombank(self._rombank & (_rombanks(self._memptrs) - 1))

    def save_state(self, mem):
        mem.rombank = self._rombank
        mem.enable_ram = self._enable_ram

    def load_state(self, mem):
        self._rombank = mem.rombank & 0xFF
        self._enable_ram = bool(mem.enable_ram)
        self._memptrs.set_rambank(self._ram_flags(self._enable_ram), 0)
        self._memptrs.set_rombank(self._rombank & (_rombanks(self._memptrs) - 1))


class Mbc3(Mbc):
    """MBC3 with an optional real-time clock.

    ``rtc`` must provide ``set(enabled, bank)``, ``latch(data)`` and
    ``active()``, which returns None when no clock register is selected.
    """

    def __init__(self, memptrs, rtc=None):
        super().__init__(memptrs)
        self._rtc = rtc
        self._rombank = 1
        self._rambank = 0
        self._enable_ram = False

    def _set_rambank(self):
        flags = self._ram_flags(self._enable_ram)
        if self._rtc is not None:
            self._rtc.set(self._enable_ram, self._rambank)
            if self._rtc.active() is not None:
                flags |= RamFlag.RTC_EN
        self._memptrs.set_rambank(flags, self._rambank & (_rambanks(self._memptrs) - 1))

    def _set_rombank(self):
        self._memptrs.set_rombank(max(self._rombank & (_rombanks(self._memptrs) - 1), 1))

    def rom_write(self, address, data):
        region = address >> 13 & 3
        if region == 0:
            self._enable_ram = _enables_ram(data)
            self._set_rambank()
        elif region == 1:
            self._rombank = data & 0x7F
            self._set_rombank()
        elif region == 2:
            self._rambank = data & 0xFF
            self._set_rambank()
        elif self._rtc is not None:
            self._rtc.latch(data)

    def save_state(self, mem):
        mem.rombank = self._rombank
        mem.rambank = self._rambank
        mem.enable_ram = self._enable_ram

    def load_state(self, mem):
        self._rombank = mem.rombank & 0xFF
        self._rambank = mem.rambank & 0xFF
        self._enable_ram = bool(mem.enable_ram)
        self._set_rambank()
        self._set_rombank()


class HuC1(Mbc):
    """Hudson HuC1; cartridge RAM stays readable while writes are disabled."""

    def __init__(self, memptrs):
        super().__init__(memptrs)
        self._rombank = 1
        self._rambank = 0
        self._enable_ram = False
        self._rambank_mode = False

    def _set_rambank(self):
        flags = _RAM_READ_WRITE if self._enable_ram else RamFlag.READ_EN
        bank = self._rambank & (_rambanks(self._memptrs) - 1) if self._rambank_mode else 0
        self._memptrs.set_rambank(flags, bank)

    def _set_rombank(self):
        bank = self._rombank if self._rambank_mode else self._rambank << 6 | self._rombank
        self._memptrs.set_rombank(bank & (_rombanks(self._memptrs) - 1))

    def rom_write(self, address, data):
        region = address >> 13 & 3
        if region == 0:
            self._enable_ram = _enables_ram(data)
            self._set_rambank()
        elif region == 1:
            self._rombank = data & 0x3F
            self._set_rombank()
        elif region == 2:
            self._rambank = data & 3
            if self._rambank_mode:
                self._set_rambank()
            else:
                self._set_rombank()
        else:
            self._rambank_mode = bool(data & 1)
            self._set_rambank()
            self._set_rombank()

    def save_state(self, mem):
        mem.rombank = self._rombank
        mem.rambank = self._rambank
        mem.enable_ram = self._enable_ram
        mem.rambank_mode = self._rambank_mode

    def load_state(self, mem):
        self._rombank = mem.rombank & 0xFF
        self._rambank = mem.rambank & 0xFF
        self._enable_ram = bool(mem.enable_ram)
        self._rambank_mode = bool(mem.rambank_mode)
        self._set_rambank()
        self._set_rombank()


class Mbc5(Mbc):
    """MBC5 with a 9-bit ROM bank and 4-bit RAM bank."""

    def __init__(self, memptrs):
        super().__init__(memptrs)
        self._rombank = 1
        self._rambank = 0
        self._enable_ram = False

    def _set_rambank(self):
        self._memptrs.set_rambank(
            self._ram_flags(self._enable_ram),
            self._rambank & (_rambanks(self._memptrs) - 1),
        )

    def _set_rombank(self):
        bank = self._rombank or 1
        self._memptrs.set_rombank(bank & (_rombanks(self._memptrs) - 1))

    def rom_write(self, address, data):
        region = address >> 13 & 3
        if region == 0:
            self._enable_ram = _enables_ram(data)
            self._set_rambank()
        elif region == 1:
            if address < 0x3000:
                self._rombank = (self._rombank & 0x100) | (data & 0xFF)
            else:
                self._rombank = (data << 8 & 0x100) | (self._rombank & 0xFF)
            self._set_rombank()
        elif region == 2:
            self._rambank = data & 0xF
            self._set_rambank()

    def save_state(self, mem):
        mem.rombank = self._rombank
        mem.rambank = self._rambank
        mem.enable_ram = self._enable_ram

    def load_state(self, mem):
        self._rombank = mem.rombank & 0xFFFF
        self._rambank = mem.rambank & 0xFF
        self._enable_ram = bool(mem.enable_ram)
        self._set_rambank()
        self._set_rombank()