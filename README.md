# gbemu

Building blocks for a Game Boy / Game Boy Color emulator, in plain Python
with no third-party dependencies.

## Modules

- `gbemu.cartridge`: `Cartridge` loads a ROM image, picks the bank controller
  from the header's cartridge type byte, and applies Game Genie codes.
  `RomLoadError` is raised for images smaller than one 16 KiB bank and for
  unsupported or unknown cartridge types. `has_rtc(header_byte)` tells whether
  a type byte names an MBC3 with a clock.
- `gbemu.mbc`: the bank controllers `Mbc0`, `Mbc1`, `Mbc1Multi64`, `Mbc2`,
  `Mbc3`, `Mbc5` and `HuC1`, all derived from the abstract `Mbc`.
- `gbemu.memptrs`: `MemPtrs`, the memory layout and the mapping of ROM, VRAM,
  cartridge RAM and WRAM banks into each 4 KiB area, with `RamFlag`,
  `OamDmaSrc` and `is_cgb(memptrs)`.
- `gbemu.rtc`: `Rtc`, the MBC3 real-time clock. It takes an optional
  `clock` callable returning Unix time, which makes it easy to test.
- `gbemu.cheats`: `parse_game_genie(code)` returns a `GameGenieCode`
  (`value`, `address`, `compare`) or `None` for codes that are too short;
  `split_codes(codes)` splits a `;`-separated list.
- `gbemu.interrupts`: `InterruptRequester` tracks IF/IE, IME and HALT and the
  time of each pending event (`IntEvent`); `flag_hdma_req`, `flag_gdma_req`,
  `ack_dma_req`, `hdma_req_flagged` and `gdma_req_flagged` work on its DMA
  event.
- `gbemu.tima`: `Tima`, the programmable timer, which raises its interrupt
  through `TimaInterruptRequester`.
- `gbemu.savestate`: `SaveState` and the per-component dataclasses
  (`CpuState`, `MemState`, `SpuState`, `RtcState`, and so on) that the
  components above save into and load from.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

Loading a cartridge and switching banks:

```python
from gbemu.cartridge import Cartridge, RomLoadError

with open("game.gb", "rb") as fh:
    rom = fh.read()

cart = Cartridge()
try:
    cart.load_rom(rom, force_dmg=False, multicart_compat=False)
except RomLoadError as exc:
    print("cannot load:", exc)
else:
    cart.mbc_write(0x2000, 3)           # select ROM bank 3
    cart.set_game_genie("00A-17B-C49")  # patch ROM; an empty string undoes all patches
    print(cart.is_cgb())
```

Running the timer:

```python
from gbemu.interrupts import InterruptRequester
from gbemu.tima import Tima, TimaInterruptRequester

intreq = InterruptRequester()
tima_irq = TimaInterruptRequester(intreq)
tima = Tima()
tima.set_tac(0x05, 0, tima_irq)  # enable, one tick every 16 cycles
print(tima.tima(160))            # 10
```

Saving and restoring state:

```python
from gbemu.savestate import SaveState

state = SaveState()
cart.save_state(state)
cart.load_state(state)
```

## What it does not do

The package has no CPU, no video, and no sound generation, and it provides no
command to run a game. `SaveState` is an in-memory record only: there is no
encoding of it to bytes or files. Cartridge RAM is exposed as
`cart.memptrs.sram`, but nothing writes it to or reads it from disk.