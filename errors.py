class HuffmanError(Exception): # base class for everything raised by huffman.py / codec.py
    pass


class EmptyInputError(HuffmanError, ValueError):
    def __init__(self, message="cannot build a Huffman tree from zero symbols"):
        super().__init__(message)


class MissingCodeError(HuffmanError, LookupError):
    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"no code for symbol {symbol!r}")


class DuplicateCodeError(HuffmanError, ValueError):
    def __init__(self, code, first, second):
        self.code = code
        super().__init__(f"code {code!r} is assigned to both {first!r} and {second!r}")


class DecodeError(HuffmanError, ValueError):
    def __init__(self, position, message=None):
        self.position = position # bit offset where matching started
        if message is None:
            message = f"no code matches the bits starting at position {position}"
        super().__init__(message)


class TruncatedSequenceError(DecodeError):
    def __init__(self, position):
        super().__init__(position, f"bit sequence ends mid-symbol at position {position}")
