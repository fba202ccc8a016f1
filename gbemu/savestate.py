"""Plain containers for a complete emulator snapshot."""

from dataclasses import dataclass, field

SS_SHIFT = 2
SS_DIV = 1 << SS_SHIFT
SS_WIDTH = 160 >> SS_SHIFT
SS_HEIGHT = 144 >> SS_SHIFT

IOAMHRAM_SIZE = 0x200
WAVE_RAM_SIZE = 0x10


@dataclass
class CpuState:
    """CPU registers and cycle counter."""

    cycle_counter: int = 0
    pc: int = 0
    sp: int = 0
    a: int = 0
    b: int = 0
    c: int = 0
    d: int = 0
    e: int = 0
    f: int = 0
    h: int = 0
    l: int = 0  # noqa: E741
    skip: bool = False


@dataclass
class MemState:
    """Memory contents and memory-mapped controller state."""

    vram: bytearray = field(default_factory=bytearray)
    sram: bytearray = field(default_factory=bytearray)
    wram: bytearray = field(default_factory=bytearray)
    ioamhram: bytearray = field(default_factory=lambda: bytearray(IOAMHRAM_SIZE))
    div_last_update: int = 0
    tima_last_update: int = 0
    tmatime: int = 0
    next_serialtime: int = 0
    last_oam_dma_update: int = 0
    min_int_time: int = 0
    unhalt_time: int = 0
    rombank: int = 0
    dma_source: int = 0
    dma_destination: int = 0
    rambank: int = 0
    oam_dma_pos: int = 0
    ime: bool = False
    halted: bool = False
    enable_ram: bool = False
    rambank_mode: bool = False
    hdma_transfer: bool = False


@dataclass
class DutyState:
    """Square-wave duty unit state."""

    next_pos_update: int = 0
    nr3: int = 0
    pos: int = 0
    high: bool = False


@dataclass
class EnvelopeState:
    """Volume envelope state."""

    counter: int = 0
    volume: int = 0


@dataclass
class LengthCounterState:
    """Length counter state."""

    counter: int = 0
    length_counter: int = 0


@dataclass
class SweepState:
    """Frequency sweep state of channel 1."""

    counter: int = 0
    shadow: int = 0
    nr0: int = 0
    negging: bool = False


@dataclass
class LfsrState:
    """Noise generator state of channel 4."""

    counter: int = 0
    reg: int = 0


@dataclass
class Channel1State:
    sweep: SweepState = field(default_factory=SweepState)
    duty: DutyState = field(default_factory=DutyState)
    env: EnvelopeState = field(default_factory=EnvelopeState)
    lcounter: LengthCounterState = field(default_factory=LengthCounterState)
    nr4: int = 0
    master: bool = False


@dataclass
class Channel2State:
    duty: DutyState = field(default_factory=DutyState)
    env: EnvelopeState = field(default_factory=EnvelopeState)
    lcounter: LengthCounterState = field(default_factory=LengthCounterState)
    nr4: int = 0
    master: bool = False


@dataclass
class Channel3State:
    wave_ram: bytearray = field(default_factory=lambda: bytearray(WAVE_RAM_SIZE))
    lcounter: LengthCounterState = field(default_factory=LengthCounterState)
    wave_counter: int = 0
    last_read_time: int = 0
    nr3: int = 0
    nr4: int = 0
    wave_pos: int = 0
    sample_buf: int = 0
    master: bool = False


@dataclass
class Channel4State:
    lfsr: LfsrState = field(default_factory=LfsrState)
    env: EnvelopeState = field(default_factory=EnvelopeState)
    lcounter: LengthCounterState = field(default_factory=LengthCounterState)
    nr4: int = 0
    master: bool = False


@dataclass
class SpuState:
    """Sound processor state."""

    cycle_counter: int = 0
    ch1: Channel1State = field(default_factory=Channel1State)
    ch2: Channel2State = field(default_factory=Channel2State)
    ch3: Channel3State = field(default_factory=Channel3State)
    ch4: Channel4State = field(default_factory=Channel4State)


@dataclass
class RtcState:
    """Real-time clock state."""

    base_time: int = 0
    halt_time: int = 0
    data_dh: int = 0
    data_dl: int = 0
    data_h: int = 0
    data_m: int = 0
    data_s: int = 0
    last_latch_data: bool = False


@dataclass
class SaveState:
    """A whole-machine snapshot."""

    cpu: CpuState = field(default_factory=CpuState)
    mem: MemState = field(default_factory=MemState)
    spu: SpuState = field(default_factory=SpuState)
    rtc: RtcState = field(default_factory=RtcState)