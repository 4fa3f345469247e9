"""
Vocabulary-driven tokenizer: tokenize, encode, decode and introspection.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Final

from ._sanitise import render_tokens
from .config import TokenizerConfig
from .result import TokenizationResult, assemble_result
from .strategy import (
    BasicStrategy,
    BPEStrategy,
    DirectStrategy,
    StrategyName,
    TokenizationStrategy,
    get_strategy,
)
from .types import TokenId
from .vocab import Vocabulary

# fallback id for unknown tokens when the unk literal has no id
UNK_FALLBACK_ID: Final[TokenId] = 0
STATS_TOP_N: Final[int] = 20

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenizerStats:
    """Summary of a loaded tokenizer."""

    model_name: str
    model_type: str
    vocab_size: int
    special_tokens: dict[str, str]
    max_tokens: int
    merge_count: int
    top_tokens: list[str]


class Tokenizer:
    """
    Tokenizer over an immutable :class:`TokenizerConfig`.

    With the default ``auto`` strategy, BPE configs use :class:`BPEStrategy`;
    other configs try :class:`DirectStrategy` and fall back to
    :class:`BasicStrategy` when that yields no tokens. Instances hold no
    mutable state and can be shared between threads.
    """

    def __init__(self, config: TokenizerConfig, strategy: StrategyName = "auto") -> None:
        """
        :param config: Loaded tokenizer config.
        :param strategy: ``auto`` or the name of a strategy to always use.
        :raises StrategyError: If ``strategy`` is unknown.
        """
        self.config = config
        self.vocab = Vocabulary(config)
        self.strategy_name = strategy
        self._forced: TokenizationStrategy | None = (
            None if strategy == "auto" else get_strategy(strategy)
        )
        self._bpe = BPEStrategy()
        self._direct = DirectStrategy()
        self._basic = BasicStrategy()

    def split_tokens(self, text: str) -> list[str]:
        """Split text into token strings without mapping them to ids."""
        if self._forced is not None:
            return self._forced.split(text, self.vocab)

        if self.config.is_bpe:
            return self._bpe.split(text, self.vocab)

        tokens = self._direct.split(text, self.vocab)
        if tokens:
            return tokens

        log.debug("direct tokenization produced no tokens, using basic tokenization")
        return self._basic.split(text, self.vocab)

    def encode(self, text: str) -> list[TokenId]:
        """
        Encode text into token ids.

        Tokens missing from the vocabulary map to the ``unk`` id, or to ``0``
        when the ``unk`` literal itself has no id.
        """
        return self._to_ids(self.split_tokens(text))

    def decode(self, token_ids: Iterable[TokenId]) -> str:
        """
        Decode token ids into space-joined tokens.

        Unknown ids become the ``unk`` literal. Original spacing is not
        recoverable.
        """
        unk = self.vocab.unk_token
        toks = []
        for tid in token_ids:
            tok = self.vocab.reverse_lookup(tid)
            toks.append(unk if tok is None else tok)
        return " ".join(toks)

    def tokenize(self, text: str) -> TokenizationResult:
        """Tokenize text and attach ids and statistics."""
        tokens = self.split_tokens(text)
        return assemble_result(
            text,
            tokens,
            self._to_ids(tokens),
            self.vocab,
            self.config.model_name,
        )

    def _to_ids(self, tokens: list[str]) -> list[TokenId]:
        unk_id = self.vocab.unk_id
        fallback = UNK_FALLBACK_ID if unk_id is None else unk_id
        ids = []
        for tok in tokens:
            tid = self.vocab.lookup(tok)
            ids.append(fallback if tid is None else tid)
        return ids

    def vocab_size(self) -> int:
        """Return the number of tokens in the vocabulary."""
        return self.vocab.size()

    def get_vocabulary(self) -> Mapping[str, TokenId]:
        """Return the read-only token -> id mapping."""
        return self.config.vocab

    def top_tokens(self, n: int) -> list[str]:
        """Return the ``n`` lowest-id tokens."""
        return self.vocab.top_n(n)

    def find_token_by_id(self, tid: TokenId) -> str | None:
        return self.vocab.reverse_lookup(tid)

    def find_tokens_by_prefix(self, prefix: str) -> set[str]:
        return self.vocab.find_by_prefix(prefix)

    def stats(self) -> TokenizerStats:
        """Collect a summary of this tokenizer."""
        return TokenizerStats(
            model_name=self.config.model_name,
            model_type="BPE" if self.config.is_bpe else "Word",
            vocab_size=self.vocab.size(),
            special_tokens=dict(self.config.special_tokens),
            max_tokens=self.config.max_tokens,
            merge_count=len(self.config.merges),
            top_tokens=self.vocab.top_n(STATS_TOP_N),
        )

    def log_stats(self) -> None:
        """Log the tokenizer summary at INFO level."""
        stats = self.stats()
        log.info(f"model name: {stats.model_name}")
        log.info(f"model type: {stats.model_type}")
        log.info(f"vocabulary size: {stats.vocab_size}")
        log.info(f"special tokens: {stats.special_tokens}")
        log.info(f"max tokens: {stats.max_tokens}")
        if self.config.is_bpe:
            log.info(f"bpe merges: {stats.merge_count}")
        log.info(f"top {STATS_TOP_N} tokens: {render_tokens(stats.top_tokens)}")
