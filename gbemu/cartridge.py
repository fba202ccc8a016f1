"""A cartridge: ROM image, bank controller, cartridge RAM and clock."""

import logging
from enum import Enum, auto

from gbemu.cheats import parse_game_genie, split_codes
from gbemu.mbc import HuC1, Mbc0, Mbc1, Mbc1Multi64, Mbc2, Mbc3, Mbc5
from gbemu.memptrs import MemPtrs
from gbemu.memptrs import is_cgb as _layout_is_cgb
from gbemu.rtc import Rtc

_log = logging.getLogger(__name__)

_BANK_SIZE = 0x4000


class RomLoadError(Exception):
    """The ROM image is too small, corrupt or of an unsupported type."""


class _Kind(Enum):
    PLAIN = auto()
    MBC1 = auto()
    MBC2 = auto()
    MBC3 = auto()
    MBC5 = auto()
    HUC1 = auto()


_HEADER_TYPES = {
    0x00: ("Plain ROM", _Kind.PLAIN),
    0x01: ("MBC1 ROM", _Kind.MBC1),
    0x02: ("MBC1 ROM+RAM", _Kind.MBC1),
    0x03: ("MBC1 ROM+RAM+BATTERY", _Kind.MBC1),
    0x05: ("MBC2 ROM", _Kind.MBC2),
    0x06: ("MBC2 ROM+BATTERY", _Kind.MBC2),
    0x08: ("Plain ROM with additional RAM", _Kind.MBC2),
    0x09: ("Plain ROM with additional RAM and Battery", _Kind.MBC2),
    0x0B: ("MM01", None),
    0x0C: ("MM01", None),
    0x0D: ("MM01", None),
    0x0F: ("MBC3 ROM+TIMER+BATTERY", _Kind.MBC3),
    0x10: ("MBC3 ROM+TIMER+RAM+BATTERY", _Kind.MBC3),
    0x11: ("MBC3 ROM", _Kind.MBC3),
    0x12: ("MBC3 ROM+RAM", _Kind.MBC3),
    0x13: ("MBC3 ROM+RAM+BATTERY", _Kind.MBC3),
    0x15: ("MBC4", None),
    0x16: ("MBC4", None),
    0x17: ("MBC4", None),
    0x19: ("MBC5 ROM", _Kind.MBC5),
    0x1A: ("MBC5 ROM+RAM", _Kind.MBC5),
    0x1B: ("MBC5 ROM+RAM+BATTERY", _Kind.MBC5),
    0x1C: ("MBC5+RUMBLE ROM", _Kind.MBC5),
    0x1D: ("MBC5+RUMBLE+RAM ROM", _Kind.MBC5),
    0x1E: ("MBC5+RUMBLE+RAM+BATTERY ROM", _Kind.MBC5),
    0x20: ("MBC6", None),
    0x22: ("MBC7", None),
    0xFC: ("Pocket Camera", None),
    0xFD: ("Bandai TAMA5", None),
    0xFE: ("HuC3 ROM+RAM+BATTERY", None),
    0xFF: ("HuC1 ROM+BATTERY", _Kind.HUC1),
}


def has_rtc(header_byte):
    """True when the cartridge type byte (0x147) names an MBC3 with a clock."""
    return header_byte in (0x0F, 0x10)


def _rambank_count(header_byte, kind):
    if header_byte == 0x00:
        return int(kind is _Kind.MBC2)
    if header_byte in (0x01, 0x02):
        return 1
    if header_byte == 0x03:
        return 4
    return 16


def _pow2ceil(n):
    return 1 << max(n - 1, 0).bit_length()


class Cartridge:
    """Holds the loaded ROM and routes bank-controller and clock accesses."""

    def __init__(self, clock=None):
        self._memptrs = MemPtrs()
        self._rtc = Rtc(clock)
        self._mbc = None
        self._gg_undo = []

    @property
    def memptrs(self):
        return self._memptrs

    @property
    def rtc(self):
        return self._rtc

    @property
    def mbc(self):
        return self._mbc

    def loaded(self):
        return self._mbc is not None

    def load_rom(self, data, force_dmg=False, multicart_compat=False):
        """Load a ROM image, choosing the bank controller from its header."""
        if data is None or len(data) < _BANK_SIZE:
            raise RomLoadError("ROM image is smaller than one 16 KiB bank")

        type_byte = data[0x147]
        try:
            description, kind = _HEADER_TYPES[type_byte]
        except KeyError:
            raise RomLoadError(
                f"corrupt or unsupported ROM (cartridge type 0x{type_byte:02X})"
            ) from None
        if kind is None:
            raise RomLoadError(f"{description} ROM not supported")

        rambanks = _rambank_count(data[0x149], kind)
        cgb = bool(data[0x143] >> 7 & 1) and not force_dmg
        full_banks = len(data) // _BANK_SIZE
        rombanks = _pow2ceil(full_banks)
        _log.info(
            "%s loaded; cgb=%s rambanks=%d rombanks=%d",
            description, cgb, rambanks, full_banks,
        )

        self._gg_undo.clear()
        self._mbc = None
        memptrs = self._memptrs
        memptrs.reset(rombanks, rambanks, 8 if cgb else 2)
        self._rtc.set(False, 0)

        start = memptrs.romdata
        copied = full_banks * _BANK_SIZE
        memptrs.memchunk[start:start + copied] = bytes(data[:copied])
        padding = (rombanks - full_banks) * _BANK_SIZE
        memptrs.memchunk[start + copied:start + copied + padding] = b"\xff" * padding

        if kind is _Kind.PLAIN:
            self._mbc = Mbc0(memptrs)
        elif kind is _Kind.MBC1:
            if not rambanks and rombanks == 64 and multicart_compat:
                _log.info('Multi-ROM "MBC1" presumed')
                self._mbc = Mbc1Multi64(memptrs)
            else:
                self._mbc = Mbc1(memptrs)
        elif kind is _Kind.MBC2:
            self._mbc = Mbc2(memptrs)
        elif kind is _Kind.MBC3:
            rtc = self._rtc if has_rtc(memptrs.memchunk[start + 0x147]) else None
            self._mbc = Mbc3(memptrs, rtc)
        elif kind is _Kind.MBC5:
            self._mbc = Mbc5(memptrs)
        else:
            self._mbc = HuC1(memptrs)

    def set_game_genie(self, codes):
        """Undo earlier patches, then apply the ``;``-separated Game Genie codes."""
        memptrs = self._memptrs
        start = memptrs.romdata
        rom_size = memptrs.romdataend - start
        for offset, old in reversed(self._gg_undo):
            if offset < rom_size:
                memptrs.memchunk[start + offset] = old
        self._gg_undo.clear()

        for code in split_codes(codes):
            self._apply_game_genie(code)

    def _apply_game_genie(self, code):
        patch = parse_game_genie(code)
        if patch is None:
            return
        if self._mbc is None:
            raise RuntimeError("no ROM loaded")

        memptrs = self._memptrs
        chunk = memptrs.memchunk
        start = memptrs.romdata
        bank_count = (memptrs.romdataend - start) // _BANK_SIZE
        in_bank = patch.address & 0x3FFF
        for bank in range(bank_count):
            offset = bank * _BANK_SIZE + in_bank
            if self._mbc.can_map_rombank(patch.address, bank) and (
                patch.compare is None or chunk[start + offset] == patch.compare
            ):
                self._gg_undo.append((offset, chunk[start + offset]))
                chunk[start + offset] = patch.value

    def _require_mbc(self):
        if self._mbc is None:
            raise RuntimeError("no ROM loaded")
        return self._mbc

    def save_state(self, state):
        self._require_mbc().save_state(state.mem)
        self._rtc.save_state(state)

    def load_state(self, state):
        mbc = self._require_mbc()
        self._rtc.load_state(state)
        mbc.load_state(state.mem)

    def mbc_write(self, address, data):
        self._require_mbc().rom_write(address, data)

    def rtc_write(self, data):
        self._rtc.write(data)

    def rtc_read(self):
        value = self._rtc.active()
        if value is None:
            raise RuntimeError("no clock register is selected")
        return value

    def is_cgb(self):
        return _layout_is_cgb(self._memptrs)