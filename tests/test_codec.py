"""Tests for word codec: 32-bit combination, float bits, string packing, 16-bit formatting."""

import math
import struct

import pytest

from pyupperlink import codec
from pyupperlink.types import WordOrder

BOTH_ORDERS = [WordOrder.LOW_HIGH, WordOrder.HIGH_LOW]


class TestInt32:
    """Combining and splitting signed 32-bit integers."""

    def test_low_high_combination(self) -> None:
        assert codec.words_to_int32([0x5678, 0x1234], WordOrder.LOW_HIGH) == 0x12345678

    def test_high_low_combination(self) -> None:
        assert codec.words_to_int32([0x1234, 0x5678], WordOrder.HIGH_LOW) == 0x12345678

    def test_negative_wraparound(self) -> None:
        assert codec.words_to_int32([0xFFFF, 0xFFFF], WordOrder.LOW_HIGH) == -1
        assert codec.words_to_int32([0x0000, 0x8000], WordOrder.LOW_HIGH) == -(2**31)

    def test_split_places_halves_per_order(self) -> None:
        assert codec.int32_to_words(0x12345678, WordOrder.LOW_HIGH) == [0x5678, 0x1234]
        assert codec.int32_to_words(0x12345678, WordOrder.HIGH_LOW) == [0x1234, 0x5678]
        assert codec.int32_to_words(-1, WordOrder.LOW_HIGH) == [0xFFFF, 0xFFFF]

    @pytest.mark.parametrize("order", BOTH_ORDERS)
    @pytest.mark.parametrize("value", [0, 1, -1, 65535, 65536, -65536, 2**31 - 1, -(2**31), 123456789, -98765])
    def test_round_trip(self, value: int, order: WordOrder) -> None:
        assert codec.words_to_int32(codec.int32_to_words(value, order), order) == value

    def test_requires_two_words(self) -> None:
        with pytest.raises(ValueError):
            codec.words_to_int32([1], WordOrder.LOW_HIGH)


class TestFloat32:
    """IEEE 754 single precision across two words."""

    def test_known_pattern(self) -> None:
        # 7.25 == 0x40E80000
        assert codec.float32_to_words(7.25, WordOrder.HIGH_LOW) == [0x40E8, 0x0000]
        assert codec.float32_to_words(7.25, WordOrder.LOW_HIGH) == [0x0000, 0x40E8]
        assert codec.words_to_float32([0x0000, 0x40E8], WordOrder.LOW_HIGH) == 7.25

    @pytest.mark.parametrize("order", BOTH_ORDERS)
    @pytest.mark.parametrize("value", [0.0, -0.0, 1.0, -1.5, 3.4028234663852886e38, 1e-45, 0.1, -273.15])
    def test_round_trip_bit_for_bit(self, value: float, order: WordOrder) -> None:
        f32 = struct.unpack("<f", struct.pack("<f", value))[0]
        decoded = codec.words_to_float32(codec.float32_to_words(f32, order), order)
        assert struct.pack("<f", decoded) == struct.pack("<f", f32)

    def test_out_of_float32_range_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="float32 range"):
            codec.float32_to_words(1e39, WordOrder.LOW_HIGH)
        assert codec.float32_to_words(float("inf"), WordOrder.HIGH_LOW) == [0x7F80, 0x0000]

    def test_no_range_validation(self) -> None:
        assert math.isinf(codec.words_to_float32([0x0000, 0x7F80], WordOrder.LOW_HIGH))
        assert math.isnan(codec.words_to_float32([0x0001, 0x7FC0], WordOrder.LOW_HIGH))


class TestStrings:
    """High byte first within each word."""

    def test_pack_two_chars(self) -> None:
        assert codec.string_to_words("HE") == [0x4845]

    def test_unpack_two_chars(self) -> None:
        assert codec.words_to_string([0x4845], 2) == "HE"

    def test_odd_length_pads_low_byte(self) -> None:
        words = codec.string_to_words("HI!")
        assert words == [0x4849, 0x2100]
        assert codec.words_to_string(words, 3) == "HI!"

    def test_empty_string_gives_one_zero_word(self) -> None:
        assert codec.string_to_words("") == [0]

    def test_decode_stops_at_nul(self) -> None:
        assert codec.words_to_string([0x4142, 0x0043], 4) == "AB"

    def test_decode_stops_at_length(self) -> None:
        assert codec.words_to_string([0x4142, 0x4344], 3) == "ABC"
        assert codec.words_to_string([0x4142, 0x4344], 0) == ""

    def test_non_ascii_is_replaced(self) -> None:
        assert codec.string_to_words("é") == [ord("?") << 8]

    @pytest.mark.parametrize(("length", "words"), [(0, 0), (1, 1), (2, 1), (3, 2), (10, 5), (11, 6)])
    def test_word_count_for_bytes(self, length: int, words: int) -> None:
        assert codec.word_count_for_bytes(length) == words


class TestSixteenBit:
    """Signed/unsigned/hex rendering of a single word."""

    def test_signed_conversion(self) -> None:
        assert codec.to_signed16(0) == 0
        assert codec.to_signed16(32767) == 32767
        assert codec.to_signed16(32768) == -32768
        assert codec.to_signed16(65535) == -1

    def test_from_signed(self) -> None:
        assert codec.from_signed16(-1) == 65535
        assert codec.from_signed16(-32768) == 32768
        assert codec.from_signed16(100) == 100

    def test_to_word_truncates(self) -> None:
        assert codec.to_word(70000) == 70000 & 0xFFFF
        assert codec.to_word(-1) == 0xFFFF

    def test_formatting(self) -> None:
        assert codec.format_unsigned16(65535) == "65535"
        assert codec.format_signed16(65535) == "-1"
        assert codec.format_hex16(0xAB) == "00AB"
        assert codec.format_hex16(0xBEEF) == "BEEF"
