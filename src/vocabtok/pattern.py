"""Pre-tokenization patterns built on Unicode character classes."""

from enum import Enum

import regex as re


class SplitPattern(str, Enum):
    """
    Regex patterns used to cut text into candidate words.

    - WORDS_AND_PUNCT: runs of non-space, non-punctuation code points, and
      every punctuation code point on its own. Whitespace is dropped.
    - ALNUM_OR_SYMBOL: runs of letters/decimal digits, and every other
      non-space code point on its own.
    """

    WORDS_AND_PUNCT = r"\p{P}|[^\s\p{P}]+"
    ALNUM_OR_SYMBOL = r"[\p{L}\p{Nd}]+|[^\s\p{L}\p{Nd}]"


_WORDS_AND_PUNCT = re.compile(SplitPattern.WORDS_AND_PUNCT.value)
_ALNUM_OR_SYMBOL = re.compile(SplitPattern.ALNUM_OR_SYMBOL.value)
_ALNUM = re.compile(r"[\p{L}\p{Nd}]+")


def split_words_and_punct(text: str) -> list[str]:
    """Split on whitespace, emitting each punctuation character as its own word."""
    return _WORDS_AND_PUNCT.findall(text)


def split_alnum_or_symbol(text: str) -> list[str]:
    """Split into letter/digit runs and single non-space symbols."""
    return _ALNUM_OR_SYMBOL.findall(text)


def is_alnum_run(piece: str) -> bool:
    """Return whether ``piece`` consists only of letters and decimal digits."""
    return _ALNUM.fullmatch(piece) is not None
