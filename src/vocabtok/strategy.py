"""Tokenization strategies that turn text into vocabulary tokens."""

from abc import ABC, abstractmethod
from typing import Final, Literal

from typing_extensions import override

from ._bpe import apply_bpe
from .errors import StrategyError
from .pattern import is_alnum_run, split_alnum_or_symbol, split_words_and_punct
from .vocab import Vocabulary

# =========================================================================================

# tokenization strategies


class TokenizationStrategy(ABC):
    """Base strategy for splitting text into tokens against a vocabulary."""

    name: str = "base"

    @abstractmethod
    def split(self, text: str, vocab: Vocabulary) -> list[str]:
        """Return the tokens for ``text``; no state is kept between calls."""


class BPEStrategy(TokenizationStrategy):
    """Strategy that pre-splits words and punctuation, then applies BPE merges."""

    name = "bpe"

    @override
    def split(self, text: str, vocab: Vocabulary) -> list[str]:
        """Emit whole-word vocabulary hits as-is and BPE-merge every other word."""
        tokens: list[str] = []
        for word in split_words_and_punct(text):
            if word in vocab:
                tokens.append(word)
            else:
                tokens.extend(apply_bpe(word, vocab.merges))
        return tokens


class DirectStrategy(TokenizationStrategy):
    """Strategy that matches whitespace-separated words against the vocabulary."""

    name = "direct"

    @override
    def split(self, text: str, vocab: Vocabulary) -> list[str]:
        """Try each word verbatim, then lowercased, then as sub-words."""
        tokens: list[str] = []
        for word in text.split():
            if word in vocab:
                tokens.append(word)
                continue
            lower = word.lower()
            if lower in vocab:
                tokens.append(lower)
                continue
            tokens.extend(subword_split(word, vocab))
        return tokens


class BasicStrategy(TokenizationStrategy):
    """
    Strategy that keeps only vocabulary hits among letter/digit runs and symbols.

    Runs are lowercased before lookup. Anything missing from the vocabulary is
    dropped without an unknown marker.
    """

    name = "basic"

    @override
    def split(self, text: str, vocab: Vocabulary) -> list[str]:
        tokens: list[str] = []
        for piece in split_alnum_or_symbol(text):
            candidate = piece.lower() if is_alnum_run(piece) else piece
            if candidate in vocab:
                tokens.append(candidate)
        return tokens


def subword_split(word: str, vocab: Vocabulary) -> list[str]:
    """
    Greedily cut a lowercased word into its longest, leftmost vocabulary pieces.

    Matching resumes right after each accepted piece. Characters skipped over
    before a match, and a tail with no match, are dropped. If no piece matches
    at all, the word degrades to one token per character.
    """
    lower = word.lower()
    tokens: list[str] = []
    pos = 0
    while pos < len(lower):
        span = _longest_leftmost(lower, pos, vocab)
        if span is None:
            break
        start, end = span
        tokens.append(lower[start:end])
        pos = end

    if not tokens:
        return list(lower)
    return tokens


def _longest_leftmost(s: str, pos: int, vocab: Vocabulary) -> tuple[int, int] | None:
    """Return the ``(start, end)`` of the longest, then leftmost, hit in ``s[pos:]``."""
    for length in range(len(s) - pos, 0, -1):
        for start in range(pos, len(s) - length + 1):
            if s[start : start + length] in vocab:
                return start, start + length
    return None


StrategyName = Literal["auto", "bpe", "direct", "basic"]

_TOKENIZATION_STRATEGIES: Final[dict[str, type[TokenizationStrategy]]] = {
    "bpe": BPEStrategy,
    "direct": DirectStrategy,
    "basic": BasicStrategy,
}


def list_strategies() -> list[str]:
    """Return available tokenization strategy names, including ``auto``."""
    return ["auto", *_TOKENIZATION_STRATEGIES.keys()]


def get_strategy(name: str) -> TokenizationStrategy:
    """
    Create a tokenization strategy by name.

    ``auto`` is not a strategy object; the tokenizer resolves it from its
    config.

    :param name: Strategy identifier: "bpe", "direct" or "basic".
    :raises StrategyError: If name is unknown.
    """
    if name not in _TOKENIZATION_STRATEGIES:
        raise StrategyError(
            "unknown strategy name",
            invalid_name=name,
            available_strats=list(_TOKENIZATION_STRATEGIES.keys()),
        )
    return _TOKENIZATION_STRATEGIES[name]()


__all__ = [
    "StrategyName",
    "TokenizationStrategy",
    "BPEStrategy",
    "DirectStrategy",
    "BasicStrategy",
    "subword_split",
    "list_strategies",
    "get_strategy",
]
