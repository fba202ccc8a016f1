"""Parsing of Game Genie cheat codes."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GameGenieCode:
    """A ROM patch: write ``value`` at ``address``, optionally only over ``compare``."""

    value: int
    address: int
    compare: int | None = None


def _hex_digit(char):
    return ord(char) - ord("A") + 0xA if char >= "A" else ord(char) - ord("0")


def parse_game_genie(code):
    """Decode a code such as ``ABC-DEF`` or ``ABC-DEF-GHI``; None when too short."""
    if len(code) <= 6:
        return None
    digits = [_hex_digit(char) for char in code]
    value = (digits[0] << 4 | digits[1]) & 0xFF
    address = (
        digits[2] << 8 | digits[4] << 4 | digits[5] | (digits[6] ^ 0xF) << 12
    ) & 0x7FFF

    compare = None
    if len(code) > 10:
        raw = ((digits[8] << 4 | digits[10]) ^ 0xFF) & 0xFFFFFFFF
        compare = ((raw >> 2 | raw << 6) ^ 0x45) & 0xFF
    return GameGenieCode(value, address, compare)


def split_codes(codes):
    """Split a ``;``-separated list of codes; a trailing separator adds nothing."""
    parts = codes.split(";")
    if parts[-1] == "":
        parts.pop()
    return parts