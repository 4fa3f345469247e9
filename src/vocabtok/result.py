"""Tokenization result snapshot and corpus statistics."""

from collections.abc import Sequence
from dataclasses import asdict, dataclass

from .types import TokenId
from .vocab import Vocabulary


@dataclass(frozen=True)
class TokenizationResult:
    """Tokens, ids and text statistics for one tokenize call."""

    tokens: tuple[str, ...]
    token_ids: tuple[TokenId, ...]
    token_count: int
    char_count: int
    word_count: int
    line_count: int
    vocab_size: int
    unknown_count: int
    model_name: str

    def to_dict(self) -> dict:
        """Return a JSON-ready dict using the service's field names."""
        data = asdict(self)
        data["tokens"] = list(self.tokens)
        data["token_ids"] = list(self.token_ids)
        return data


def count_lines(text: str) -> int:
    """Count ``\\n``-separated segments; empty text has no lines."""
    if not text:
        return 0
    return len(text.split("\n"))


def assemble_result(
    text: str,
    tokens: Sequence[str],
    token_ids: Sequence[TokenId],
    vocab: Vocabulary,
    model_name: str,
) -> TokenizationResult:
    """Combine engine output with statistics about ``text``."""
    return TokenizationResult(
        tokens=tuple(tokens),
        token_ids=tuple(token_ids),
        token_count=len(tokens),
        # code points, not bytes
        char_count=len(text),
        word_count=len(text.split()),
        line_count=count_lines(text),
        vocab_size=vocab.size(),
        unknown_count=sum(1 for tok in tokens if tok not in vocab),
        model_name=model_name,
    )
