from typing import Dict, Hashable, Iterable, List, Tuple

from errors import DecodeError, DuplicateCodeError, MissingCodeError, TruncatedSequenceError
from huffman import build_code_table


def huffman_encode(data: Iterable, code_map: Dict[Hashable, str]) -> str: # data: symbols to encode, code_map: symbol -> code
    parts = []
    for symbol in data:
        try:
            parts.append(code_map[symbol])
        except KeyError:
            raise MissingCodeError(symbol) from None
    return "".join(parts)


def invert_code_table(code_map: Dict[Hashable, str]) -> Dict[str, Hashable]:
    decode_map: Dict[str, Hashable] = {}
    for symbol, code in code_map.items():
        if code in decode_map:
            raise DuplicateCodeError(code, decode_map[code], symbol)
        decode_map[code] = symbol
    return decode_map


def huffman_decode(bitstring: str, code_map: Dict[Hashable, str]) -> List[Hashable]:
    """
    Decode a string of '0'/'1' back into symbols using code_map

    Tries prefixes of growing length at each position and takes the first one
    that is a code. Codes from build_code_table are prefix-free, so that first
    match is the only possible one.

    Raises DuplicateCodeError for a table that maps two symbols to one code,
    TruncatedSequenceError when the bits stop in the middle of a code and
    DecodeError when the bits cannot come from this table at all.
    """
    decode_map = invert_code_table(code_map)
    if any(bit not in "01" for bit in bitstring):
        raise ValueError("bitstring may only contain '0' and '1'")

    longest = max((len(code) for code in decode_map), default=0)
    decoded = []
    i = 0
    n = len(bitstring)
    while i < n:
        j = i + 1
        while bitstring[i:j] not in decode_map:
            if j >= n:
                raise TruncatedSequenceError(i)
            if longest and j - i >= longest:
                raise DecodeError(i)
            j += 1
        decoded.append(decode_map[bitstring[i:j]])
        i = j
    return decoded


def encode_text(text: str, strategy: str = "list") -> Tuple[str, Dict[str, str]]:
    # one-shot: build the table for text and encode it, the table is needed to decode
    code_map = build_code_table(text, strategy=strategy)
    return huffman_encode(text, code_map), code_map


def decode_text(bitstring: str, code_map: Dict[str, str]) -> str:
    return "".join(huffman_decode(bitstring, code_map))
