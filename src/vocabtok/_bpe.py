"""
Core Byte Pair Encoding (BPE) merge application.
"""

from collections.abc import Set

from .config import merge_key
from .types import MergeKey


def first_merge_index(symbols: list[str], merges: Set[MergeKey]) -> int:
    """
    Return the index of the first adjacent pair that is a merge rule, or -1.

    Args:
        symbols (list[str]): Current symbol sequence of one word.
        merges (Set[MergeKey]): Registered ``"left right"`` merge keys.
    """
    for i in range(len(symbols) - 1):
        if merge_key(symbols[i], symbols[i + 1]) in merges:
            return i
    return -1


def apply_bpe(word: str, merges: Set[MergeKey]) -> list[str]:
    """
    Split ``word`` into characters and merge adjacent pairs until none match.

    Each pass merges the FIRST qualifying pair found scanning left to right
    and then restarts from the beginning. Merge rules carry no rank, so the
    result depends on scan order rather than on learned merge priority.
    This is O(n^2) per word in the worst case.

    Args:
        word (str): A single pre-tokenized word.
        merges (Set[MergeKey]): Registered ``"left right"`` merge keys.

    Returns:
        list[str]: Merged symbols; plain characters when no rule applies.
    """
    symbols = list(word)
    if not merges:
        return symbols

    while True:
        i = first_merge_index(symbols, merges)
        if i == -1:
            return symbols
        symbols[i : i + 2] = [symbols[i] + symbols[i + 1]]
