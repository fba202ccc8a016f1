"""Memory layout and bank mapping for the cartridge and internal RAM.

All memory lives in one ``memchunk`` bytearray. Locations are chunk offsets;
the value returned by ``rmem(area)`` is a base such that
``memchunk[base + address]`` is the byte the CPU sees at ``address``.
"""

from enum import IntEnum, IntFlag

_AREA_COUNT = 0x10


class OamDmaSrc(IntEnum):
    """Where an OAM DMA transfer is currently reading from."""

    ROM = 0
    SRAM = 1
    VRAM = 2
    WRAM = 3
    INVALID = 4
    OFF = 5


class RamFlag(IntFlag):
    READ_EN = 1
    WRITE_EN = 2
    RTC_EN = 4


class MemPtrs:
    """Tracks which bank is mapped into each 4 KiB area of the address space."""

    def __init__(self):
        self.memchunk = bytearray()
        self._rmem = [None] * _AREA_COUNT
        self._wmem = [None] * _AREA_COUNT
        self._romdata = [0, 0]
        self._wramdata = [0, 0]
        self.vrambankptr = 0
        self.rsrambankptr = 0
        self.wsrambankptr = 0
        self.rambankdata = 0
        self.wramdataend = 0
        self.oam_dma_src = OamDmaSrc.OFF

    def reset(self, rombanks, rambanks, wrambanks):
        """Allocate memory for the given bank counts and map the default banks."""
        self.memchunk = bytearray(
            0x4000
            + rombanks * 0x4000
            + 0x4000
            + rambanks * 0x2000
            + wrambanks * 0x1000
            + 0x4000
        )
        self._romdata[0] = self.romdata
        self.rambankdata = self._romdata[0] + rombanks * 0x4000 + 0x4000
        self._wramdata[0] = self.rambankdata + rambanks * 0x2000
        self.wramdataend = self._wramdata[0] + wrambanks * 0x1000

        disabled = self.rdisabled_ram
        self.memchunk[disabled:disabled + 0x2000] = b"\xff" * 0x2000

        self.oam_dma_src = OamDmaSrc.OFF
        self._rmem[0x0:0x4] = [self._romdata[0]] * 4
        self._rmem[0xC] = self._wmem[0xC] = self._wramdata[0] - 0xC000
        self._rmem[0xE] = self._wmem[0xE] = self._wramdata[0] - 0xE000

        self.set_rombank(1)
        self.set_rambank(0, 0)
        self.set_vrambank(0)
        self.set_wrambank(1)

    @property
    def romdata(self):
        """Offset of the first ROM byte."""
        return 0x4000

    @property
    def romdataend(self):
        return self.rambankdata - 0x4000

    @property
    def vramdata(self):
        return self.rambankdata - 0x4000

    @property
    def vramdataend(self):
        return self.rambankdata

    @property
    def rambankdataend(self):
        return self._wramdata[0]

    @property
    def rdisabled_ram(self):
        """Offset of the 8 KiB of 0xFF bytes read from disabled cartridge RAM."""
        return self.wramdataend

    @property
    def _wdisabled_ram(self):
        return self.wramdataend + 0x2000

    @property
    def rom(self):
        return memoryview(self.memchunk)[self.romdata:self.romdataend]

    @property
    def vram(self):
        return memoryview(self.memchunk)[self.vramdata:self.vramdataend]

    @property
    def sram(self):
        return memoryview(self.memchunk)[self.rambankdata:self.rambankdataend]

    @property
    def wram(self):
        return memoryview(self.memchunk)[self._wramdata[0]:self.wramdataend]

    def romdata_area(self, area):
        """Offset of the ROM bank mapped at 0x0000 (area 0) or 0x4000 (area 1)."""
        return self._romdata[area]

    def wramdata(self, area):
        """Offset of WRAM bank 0 (area 0) or of the switchable bank (area 1)."""
        return self._wramdata[area]

    def rmem(self, area):
        """Read base for a 4 KiB area, or None when reads there are disconnected."""
        return self._rmem[area]

    def wmem(self, area):
        """Write base for a 4 KiB area, or None when writes there are disconnected."""
        return self._wmem[area]

    def set_rombank0(self, bank):
        self._romdata[0] = self.romdata + bank * 0x4000
        self._rmem[0x0:0x4] = [self._romdata[0]] * 4
        self._disconnect_oam_dma_areas()

    def set_rombank(self, bank):
        self._romdata[1] = self.romdata + bank * 0x4000 - 0x4000
        self._rmem[0x4:0x8] = [self._romdata[1]] * 4
        self._disconnect_oam_dma_areas()

    def set_rambank(self, flags, rambank):
        wdisabled = self._wdisabled_ram - 0xA000
        if flags & RamFlag.RTC_EN:
            srambank = None
        elif self.rambankdata != self.rambankdataend:
            srambank = self.rambankdata + rambank * 0x2000 - 0xA000
        else:
            srambank = wdisabled

        if flags & RamFlag.READ_EN and srambank != wdisabled:
            self.rsrambankptr = srambank
        else:
            self.rsrambankptr = self.rdisabled_ram - 0xA000
        self.wsrambankptr = srambank if flags & RamFlag.WRITE_EN else wdisabled

        self._rmem[0xA] = self._rmem[0xB] = self.rsrambankptr
        self._wmem[0xA] = self._wmem[0xB] = self.wsrambankptr
        self._disconnect_oam_dma_areas()

    def set_vrambank(self, bank):
        self.vrambankptr = self.vramdata + bank * 0x2000 - 0x8000

    def set_wrambank(self, bank):
        self._wramdata[1] = self._wramdata[0] + ((bank & 0x07) or 1) * 0x1000
        self._rmem[0xD] = self._wmem[0xD] = self._wramdata[1] - 0xD000
        self._disconnect_oam_dma_areas()

    def set_oam_dma_src(self, src):
        self._rmem[0x0:0x4] = [self._romdata[0]] * 4
        self._rmem[0x4:0x8] = [self._romdata[1]] * 4
        self._rmem[0xA] = self._rmem[0xB] = self.rsrambankptr
        self._wmem[0xA] = self._wmem[0xB] = self.wsrambankptr
        self._rmem[0xC] = self._wmem[0xC] = self._wramdata[0] - 0xC000
        self._rmem[0xD] = self._wmem[0xD] = self._wramdata[1] - 0xD000
        self._rmem[0xE] = self._wmem[0xE] = self._wramdata[0] - 0xE000

        self.oam_dma_src = OamDmaSrc(src)
        self._disconnect_oam_dma_areas()

    def _disconnect_rom_and_sram(self):
        self._rmem[0x0:0x8] = [None] * 8
        self._rmem[0xA] = self._rmem[0xB] = None
        self._wmem[0xA] = self._wmem[0xB] = None

    def _disconnect_wram(self):
        self._rmem[0xC] = self._rmem[0xD] = self._rmem[0xE] = None
        self._wmem[0xC] = self._wmem[0xD] = self._wmem[0xE] = None

    def _disconnect_oam_dma_areas(self):
        src = self.oam_dma_src
        if src in (OamDmaSrc.VRAM, OamDmaSrc.OFF):
            return
        if is_cgb(self):
            if src == OamDmaSrc.WRAM:
                self._disconnect_wram()
            else:
                self._disconnect_rom_and_sram()
        else:
            self._disconnect_rom_and_sram()
            self._disconnect_wram()


def is_cgb(memptrs):
    """True when the layout has the colour model's 32 KiB of WRAM."""
    return memptrs.wramdataend - memptrs.wramdata(0) == 0x8000