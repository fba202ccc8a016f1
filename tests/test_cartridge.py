import pytest

from gbemu.cartridge import Cartridge, RomLoadError, has_rtc
from gbemu.mbc import Mbc1Multi64
from gbemu.savestate import SaveState


def make_rom(cart_type, banks=4, ram=0, cgb_flag=0):
    rom = bytearray()
    for bank in range(banks):
        rom += bytes([bank]) * 0x4000
    rom[0x143] = cgb_flag
    rom[0x147] = cart_type
    rom[0x149] = ram
    return bytes(rom)


def mapped_bank_byte(cart, offset=0):
    memptrs = cart.memptrs
    return memptrs.memchunk[memptrs.rmem(4) + 0x4000 + offset]


def test_plain_rom_loads():
    cart = Cartridge()
    assert cart.loaded() is False
    rom = make_rom(0x00)
    cart.load_rom(rom)
    assert cart.loaded() is True
    assert bytes(cart.memptrs.rom) == rom


@pytest.mark.parametrize("data", [None, b"\x00" * 0x3FFF])
def test_too_small_rom_rejected(data):
    with pytest.raises(RomLoadError):
        Cartridge().load_rom(data)


@pytest.mark.parametrize("cart_type", [0x0B, 0x15, 0x20, 0xFC, 0xFE, 0x04])
def test_unsupported_types_rejected(cart_type):
    cart = Cartridge()
    with pytest.raises(RomLoadError):
        cart.load_rom(make_rom(cart_type))
    assert cart.loaded() is False


def test_rom_padded_to_power_of_two():
    cart = Cartridge()
    rom = make_rom(0x00, banks=3)
    cart.load_rom(rom)
    content = bytes(cart.memptrs.rom)
    assert len(content) == 4 * 0x4000
    assert content[: len(rom)] == rom
    assert set(content[len(rom):]) == {0xFF}


def test_cgb_flag_and_force_dmg():
    cart = Cartridge()
    cart.load_rom(make_rom(0x00, cgb_flag=0x80))
    assert cart.is_cgb() is True
    cart.load_rom(make_rom(0x00, cgb_flag=0x80), force_dmg=True)
    assert cart.is_cgb() is False


def test_mbc1_bank_switch():
    cart = Cartridge()
    cart.load_rom(make_rom(0x01))
    assert mapped_bank_byte(cart) == 1
    cart.mbc_write(0x2000, 2)
    assert mapped_bank_byte(cart) == 2


def test_multicart_detection():
    rom = make_rom(0x01, banks=64)
    multi = Cartridge()
    multi.load_rom(rom, multicart_compat=True)
    assert isinstance(multi.mbc, Mbc1Multi64)
    assert multi.mbc.can_map_rombank(0x0000, 0x10) is True

    plain = Cartridge()
    plain.load_rom(rom)
    assert plain.mbc.can_map_rombank(0x0000, 0x10) is False


def test_state_round_trip():
    rom = make_rom(0x01)
    cart = Cartridge()
    cart.load_rom(rom)
    cart.mbc_write(0x2000, 3)
    state = SaveState()
    cart.save_state(state)

    other = Cartridge()
    other.load_rom(rom)
    assert mapped_bank_byte(other) == 1
    other.load_state(state)
    assert mapped_bank_byte(other) == 3


def test_game_genie_patch_and_undo():
    cart = Cartridge()
    cart.load_rom(make_rom(0x00))
    chunk = cart.memptrs.memchunk
    start = cart.memptrs.romdata

    cart.set_game_genie("AA1-23B")
    assert [chunk[start + bank * 0x4000 + 0x123] for bank in range(4)] == [0, 0xAA, 0xAA, 0xAA]

    cart.set_game_genie("")
    assert [chunk[start + bank * 0x4000 + 0x123] for bank in range(4)] == [0, 1, 2, 3]


def test_game_genie_short_codes_ignored():
    rom = make_rom(0x00)
    cart = Cartridge()
    cart.load_rom(rom)
    cart.set_game_genie("AA1;;BB")
    assert bytes(cart.memptrs.rom) == rom


def test_game_genie_needs_rom():
    with pytest.raises(RuntimeError):
        Cartridge().set_game_genie("AA1-23B")


def test_mbc3_clock_access():
    cart = Cartridge(clock=lambda: 1_000_000)
    cart.load_rom(make_rom(0x10, ram=0x03))
    cart.mbc_write(0x0000, 0x0A)
    cart.mbc_write(0x4000, 0x08)
    assert cart.memptrs.rmem(0xA) is None
    cart.rtc_write(30)
    assert cart.rtc_read() == 30


def test_mbc3_without_clock():
    cart = Cartridge(clock=lambda: 1_000_000)
    cart.load_rom(make_rom(0x13, ram=0x03))
    cart.mbc_write(0x0000, 0x0A)
    cart.mbc_write(0x4000, 0x08)
    with pytest.raises(RuntimeError):
        cart.rtc_read()


def test_has_rtc():
    assert has_rtc(0x0F) is True
    assert has_rtc(0x10) is True
    assert has_rtc(0x13) is False


def test_state_access_needs_rom():
    cart = Cartridge()
    with pytest.raises(RuntimeError):
        cart.save_state(SaveState())
    with pytest.raises(RuntimeError):
        cart.mbc_write(0x2000, 1)