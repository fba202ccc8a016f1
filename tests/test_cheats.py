from gbemu.cheats import GameGenieCode, parse_game_genie, split_codes


def test_short_code_is_rejected():
    assert parse_game_genie("AB1-23") is None
    assert parse_game_genie("") is None


def test_code_without_compare():
    code = parse_game_genie("AB1-23F")
    assert code == GameGenieCode(value=0xAB, address=0x123, compare=None)


def test_address_high_nibble_is_inverted():
    assert parse_game_genie("000-000").address == 0x7000


def test_code_with_compare():
    code = parse_game_genie("000-000-000")
    assert code.value == 0
    assert code.compare == 0xBA


def test_compare_ignores_separator_position():
    first = parse_game_genie("000-000-0A0")
    second = parse_game_genie("000-000-000")
    assert first.compare == second.compare


def test_compare_depends_on_its_digits():
    compares = {parse_game_genie(f"000-000-{d}00").compare for d in "0123456789ABCDEF"}
    assert len(compares) == 16
    assert all(0 <= c <= 0xFF for c in compares)


def test_value_and_address_fit_their_widths():
    code = parse_game_genie("FFF-FFF-FFF")
    assert 0 <= code.value <= 0xFF
    assert 0 <= code.address <= 0x7FFF
    assert code.value == 0xFF


def test_split_codes():
    assert split_codes("A;B") == ["A", "B"]
    assert split_codes("A;B;") == ["A", "B"]
    assert split_codes("") == []
    assert split_codes(";A") == ["", "A"]
    assert split_codes("A;;B") == ["A", "", "B"]