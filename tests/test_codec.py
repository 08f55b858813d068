import pytest

from codec import decode_text, encode_text, huffman_decode, huffman_encode, invert_code_table
from errors import DecodeError, DuplicateCodeError, HuffmanError, MissingCodeError, TruncatedSequenceError
from huffman import build_code_table


BEEP = "beep bop beer!"
BEEP_BITS = "1000000100111011101001110000011001101"


def test_encode_beep_bop_beer():
    table = build_code_table(BEEP)
    assert huffman_encode(BEEP, table) == BEEP_BITS


def test_decode_beep_bop_beer():
    table = build_code_table(BEEP)
    assert "".join(huffman_decode(BEEP_BITS, table)) == BEEP


def test_single_symbol_encodes_one_bit_each():
    table = build_code_table("aaaa")
    assert huffman_encode("aaaa", table) == "0000"
    assert decode_text("0000", table) == "aaaa"


def test_two_symbols_round_trip():
    table = build_code_table("ab")
    bits = huffman_encode("ab", table)
    assert bits == "01"
    assert decode_text(bits, table) == "ab"


@pytest.mark.parametrize("text", [
    BEEP,
    "abracadabra",
    "a",
    "the quick brown fox jumps over the lazy dog",
    "héllo wörld ✓✓ héllo",
    "\n\t  \n",
])
def test_round_trip(text):
    table = build_code_table(text)
    assert decode_text(huffman_encode(text, table), table) == text


@pytest.mark.parametrize("strategy", ["list", "heap"])
def test_encode_text_returns_table(strategy):
    bits, table = encode_text(BEEP, strategy=strategy)
    assert bits == BEEP_BITS
    assert table == build_code_table(BEEP)
    assert decode_text(bits, table) == BEEP


def test_bytes_round_trip():
    data = bytes(range(256)) + b"\x00" * 40 + b"\x7f" * 3
    table = build_code_table(data)
    assert bytes(huffman_decode(huffman_encode(data, table), table)) == data


def test_empty_input_round_trip():
    table = build_code_table("")
    assert huffman_encode("", table) == ""
    assert huffman_decode("", table) == []


def test_encode_missing_symbol():
    table = build_code_table("abc")
    with pytest.raises(MissingCodeError) as excinfo:
        huffman_encode("abcd", table)
    assert excinfo.value.symbol == "d"
    assert isinstance(excinfo.value, LookupError)
    assert isinstance(excinfo.value, HuffmanError)


def test_decode_with_external_table():
    table = {"x": "1", "y": "01", "z": "00"}
    assert decode_text("1010011", table) == "xyzxx"
    assert huffman_decode("10100", table) == ["x", "y", "z"]


def test_invert_code_table_duplicate_code():
    with pytest.raises(DuplicateCodeError) as excinfo:
        invert_code_table({"a": "0", "b": "10", "c": "10"})
    assert excinfo.value.code == "10"


def test_decode_duplicate_code():
    with pytest.raises(DuplicateCodeError):
        huffman_decode("0", {"a": "0", "b": "0"})


def test_decode_truncated():
    table = build_code_table(BEEP)
    with pytest.raises(TruncatedSequenceError) as excinfo:
        huffman_decode(BEEP_BITS[:-1], table)
    # the last symbol, "!" = 1101, starts four bits from the end
    assert excinfo.value.position == len(BEEP_BITS) - 4


def test_decode_truncated_is_decode_error():
    table = build_code_table(BEEP)
    with pytest.raises(DecodeError):
        huffman_decode(BEEP_BITS[:-2], table)


def test_decode_empty_table_with_bits():
    with pytest.raises(TruncatedSequenceError):
        huffman_decode("0101", {})


def test_decode_bits_not_from_table():
    # "11" is no code and no prefix of one, with more bits still to come
    table = {"a": "0", "b": "10"}
    with pytest.raises(DecodeError) as excinfo:
        huffman_decode("01100", table)
    assert not isinstance(excinfo.value, TruncatedSequenceError)
    assert excinfo.value.position == 1


def test_decode_rejects_non_binary_characters():
    with pytest.raises(ValueError):
        huffman_decode("01201", {"a": "0", "b": "1"})


def test_decode_is_independent_of_previous_calls():
    first = build_code_table("aab")
    second = build_code_table("abb")
    assert decode_text("001", first) == "aab"
    assert decode_text("100", second) == "abb"
    assert decode_text("001", first) == "aab"
