"""Game Boy emulation components: cartridges and banking, real-time clock, timer, interrupts and save states."""

__version__ = "0.1.0"