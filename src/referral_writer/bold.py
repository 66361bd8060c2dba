"""Unicode "bold" text for plain-text contexts such as LinkedIn messages."""

# Offsets into the Mathematical Alphanumeric Symbols block
_BOLD_UPPER_A = 0x1D400
_BOLD_LOWER_A = 0x1D41A
_BOLD_DIGIT_ZERO = 0x1D7CE

BOLD_MAP = {}
for _i in range(26):
    BOLD_MAP[chr(ord("A") + _i)] = chr(_BOLD_UPPER_A + _i)
    BOLD_MAP[chr(ord("a") + _i)] = chr(_BOLD_LOWER_A + _i)
for _i in range(10):
    BOLD_MAP[chr(ord("0") + _i)] = chr(_BOLD_DIGIT_ZERO + _i)

_BOLD_TABLE = str.maketrans(BOLD_MAP)


def to_bold(text: str) -> str:
    """Convert ASCII letters and digits to their mathematical bold code points.

    Every other character (punctuation, whitespace, other scripts, already
    bold characters) passes through unchanged.

    Examples:
        >>> to_bold("Job ID: 42")
        '𝐉𝐨𝐛 𝐈𝐃: 𝟒𝟐'
    """
    return text.translate(_BOLD_TABLE)


_BOLD_CHARS = frozenset(BOLD_MAP.values())
_PLAIN_TABLE = str.maketrans({bold: plain for plain, bold in BOLD_MAP.items()})


def from_bold(text: str) -> str:
    """Map bold code points back to ASCII (inverse of ``to_bold``)."""
    return text.translate(_PLAIN_TABLE)


def is_bold_char(char: str) -> bool:
    return char in _BOLD_CHARS
