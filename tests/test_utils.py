"""Tests for sheetjson.utils module."""

import pytest

from sheetjson.utils import (
    AddressCodec,
    a1_to_cell,
    cell_to_a1,
    column_to_letter,
    format_json_number,
    letter_to_column,
    range_to_a1,
    sanitize_filename,
)


class TestColumnConversion:
    """Tests for column number to letter conversion."""

    def test_single_letters(self) -> None:
        assert column_to_letter(1) == "A"
        assert column_to_letter(2) == "B"
        assert column_to_letter(26) == "Z"

    def test_double_letters(self) -> None:
        assert column_to_letter(27) == "AA"
        assert column_to_letter(28) == "AB"
        assert column_to_letter(52) == "AZ"
        assert column_to_letter(53) == "BA"
        assert column_to_letter(702) == "ZZ"

    def test_triple_letters(self) -> None:
        assert column_to_letter(703) == "AAA"
        assert column_to_letter(16384) == "XFD"

    def test_invalid_column(self) -> None:
        with pytest.raises(ValueError):
            column_to_letter(0)
        with pytest.raises(ValueError):
            column_to_letter(-3)

    def test_letter_to_column(self) -> None:
        assert letter_to_column("A") == 1
        assert letter_to_column("Z") == 26
        assert letter_to_column("AA") == 27
        assert letter_to_column("ZZ") == 702
        assert letter_to_column("AAA") == 703
        assert letter_to_column("xfd") == 16384

    def test_letter_to_column_invalid(self) -> None:
        with pytest.raises(ValueError):
            letter_to_column("")
        with pytest.raises(ValueError):
            letter_to_column("A1")

    def test_roundtrip_full_column_range(self) -> None:
        for column in range(1, 16385):
            assert letter_to_column(column_to_letter(column)) == column


class TestCellConversion:
    """Tests for cell coordinate conversion."""

    def test_cell_to_a1(self) -> None:
        assert cell_to_a1(1, 1) == "A1"
        assert cell_to_a1(1, 2) == "B1"
        assert cell_to_a1(10, 3) == "C10"
        assert cell_to_a1(12, 28) == "AB12"

    def test_cell_to_a1_invalid_row(self) -> None:
        with pytest.raises(ValueError):
            cell_to_a1(0, 1)

    def test_a1_to_cell(self) -> None:
        assert a1_to_cell("A1") == (1, 1)
        assert a1_to_cell("C10") == (10, 3)
        assert a1_to_cell("AB12") == (12, 28)

    def test_a1_to_cell_invalid(self) -> None:
        with pytest.raises(ValueError):
            a1_to_cell("invalid")
        with pytest.raises(ValueError):
            a1_to_cell("123")
        with pytest.raises(ValueError):
            a1_to_cell("A0")

    def test_roundtrip(self) -> None:
        for row in (1, 2, 99, 1048576):
            for column in (1, 26, 27, 702, 703, 16384):
                assert a1_to_cell(cell_to_a1(row, column)) == (row, column)


class TestRangeConversion:
    def test_rectangle(self) -> None:
        assert range_to_a1(2, 3, 2, 3) == "B2:C3"
        assert range_to_a1(1, 10, 1, 5) == "A1:E10"

    def test_single_cell(self) -> None:
        assert range_to_a1(4, 4, 2, 2) == "B4"


class TestAddressCodec:
    """Tests for the memoizing address codec."""

    def test_memoized_matches_raw(self) -> None:
        codec = AddressCodec()
        for row in (1, 5, 300):
            for column in (1, 26, 27, 703):
                assert codec.address(row, column) == AddressCodec.raw_address(
                    row, column
                )

    def test_cache_is_keyed_by_column(self) -> None:
        codec = AddressCodec()
        for row in range(1, 51):
            codec.address(row, 1)
            codec.address(row, 2)
        assert set(codec._column_letters) == {1, 2}
        assert codec.column_letter(703) is codec.column_letter(703)

    def test_raw_address_bypasses_cache(self) -> None:
        codec = AddressCodec()
        codec.raw_address(1, 5)
        assert codec._column_letters == {}

    def test_invalid_row(self) -> None:
        with pytest.raises(ValueError):
            AddressCodec().address(0, 1)


class TestSanitizeFilename:
    def test_replaces_invalid_characters(self) -> None:
        assert sanitize_filename("Q1/Q2: Budget?") == "Q1_Q2_ Budget_"

    def test_empty_name(self) -> None:
        assert sanitize_filename(" . ") == "unnamed"


class TestFormatJsonNumber:
    def test_integral_float_becomes_int(self) -> None:
        assert format_json_number(3.0) == 3
        assert isinstance(format_json_number(3.0), int)

    def test_fraction_kept(self) -> None:
        assert format_json_number(2.5) == 2.5

    def test_int_passthrough(self) -> None:
        assert format_json_number(7) == 7
