"""
Exceptions raised while building and encoding Intelligent Mail barcodes.

All of them derive from ValueError, so a caller that only cares about
"bad input or bad barcode" can catch that and move on.
"""


class IMBError(ValueError):
    """Base class for every IMb failure."""


class ValidationError(IMBError):
    """A record field is malformed (wrong length, non-digit, bad pairing)."""

    def __init__(self, field, reason):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class EncodingError(IMBError):
    """Encoding a well-formed record failed."""


class EncodingOverflowError(EncodingError):
    """A derived value fell outside the range the barcode format allows."""


class TableConsistencyError(EncodingError):
    """The n-of-13 table fill cursors did not meet."""

    def __init__(self, n, length, low, high):
        self.n = n
        self.length = length
        self.low = low
        self.high = high
        super().__init__(
            f"{n}-of-13 table of length {length} did not fill exactly "
            f"(low={low}, high={high})"
        )
