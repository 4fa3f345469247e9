"""Read-only vocabulary store built over a :class:`TokenizerConfig`."""

from collections.abc import Mapping

from .config import DEFAULT_UNK_TOKEN, TokenizerConfig, merge_key
from .types import MergeKey, TokenId


class Vocabulary:
    """
    Bidirectional token/id lookup, special-token registry and merge rules.

    Holds no state of its own beyond the config it wraps.
    """

    def __init__(self, config: TokenizerConfig) -> None:
        self._config = config

    def __len__(self) -> int:
        return len(self._config.vocab)

    def __contains__(self, tok: object) -> bool:
        return tok in self._config.vocab

    def size(self) -> int:
        """Return the number of tokens in the vocabulary."""
        return len(self._config.vocab)

    def lookup(self, tok: str) -> TokenId | None:
        """Return the id of ``tok`` or ``None``."""
        return self._config.vocab.get(tok)

    def reverse_lookup(self, tid: TokenId) -> str | None:
        """Return the token for ``tid`` or ``None``."""
        return self._config.reverse_vocab.get(tid)

    def top_n(self, n: int) -> list[str]:
        """Return up to ``n`` tokens ordered by ascending id."""
        if n <= 0:
            return []
        ordered = sorted(self._config.vocab.items(), key=lambda item: item[1])
        return [tok for tok, _ in ordered[:n]]

    def find_by_prefix(self, prefix: str) -> set[str]:
        """Return every token that starts with ``prefix``."""
        return {tok for tok in self._config.vocab if tok.startswith(prefix)}

    def has_merge(self, left: str, right: str) -> bool:
        """Return whether ``(left, right)`` is a registered merge rule."""
        return merge_key(left, right) in self._config.merges

    @property
    def merges(self) -> frozenset[MergeKey]:
        return self._config.merges

    @property
    def special_tokens(self) -> Mapping[str, str]:
        return self._config.special_tokens

    @property
    def unk_token(self) -> str:
        """Literal of the ``unk`` role, ``<unk>`` when the config names none."""
        return self._config.special_tokens.get("unk", DEFAULT_UNK_TOKEN)

    @property
    def unk_id(self) -> TokenId | None:
        """Id of the ``unk`` literal, ``None`` if it is not in the vocabulary."""
        return self._config.vocab.get(self.unk_token)
