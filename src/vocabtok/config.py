"""
Tokenizer configuration model and JSON config loading.

Two on-disk layouts are understood:

- the export layout written by Hugging Face ``tokenizers`` (``tokenizer.json``
  with a ``model`` section, merge rules and ``added_tokens``);
- a simple native layout (``vocabulary``, ``reverse_vocab``, ``special_tokens``,
  ``model_name``, ``max_tokens``).

Both are normalised into one immutable :class:`TokenizerConfig`.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

from ._decorators import measure_time
from .errors import ConfigFormatError, ConfigReadError
from .types import MergeKey, ReverseTokenMap, SpecialRole, TokenId, TokenMap

DEFAULT_MODEL_NAME: Final[str] = "GLM4.5"
DEFAULT_MAX_TOKENS: Final[int] = 512
DEFAULT_UNK_TOKEN: Final[str] = "<unk>"

SPECIAL_ROLES: Final[tuple[SpecialRole, ...]] = ("pad", "unk", "bos", "eos", "mask")

DEFAULT_SPECIAL_TOKENS: Final[Mapping[SpecialRole, str]] = MappingProxyType(
    {
        "pad": "<pad>",
        "unk": DEFAULT_UNK_TOKEN,
        "bos": "<s>",
        "eos": "</s>",
        "mask": "<mask>",
    }
)

# literal content of an added special token -> role it fills
_ADDED_TOKEN_ROLES: Final[Mapping[str, SpecialRole]] = MappingProxyType(
    {
        "<s>": "bos",
        "</s>": "eos",
        "<pad>": "pad",
        "<unk>": "unk",
        "<mask>": "mask",
        "[MASK]": "mask",
    }
)

log = logging.getLogger(__name__)


def merge_key(left: str, right: str) -> MergeKey:
    """Return the lookup key for the merge rule ``(left, right)``."""
    return f"{left} {right}"


@dataclass(frozen=True)
class TokenizerConfig:
    """
    Immutable tokenizer configuration.

    Mappings are copied on construction and exposed read-only, so one
    instance can be shared between threads without locking.
    """

    vocab: Mapping[str, TokenId]
    reverse_vocab: Mapping[TokenId, str]
    special_tokens: Mapping[str, str]
    merges: frozenset[MergeKey] = frozenset()
    is_bpe: bool = False
    model_name: str = DEFAULT_MODEL_NAME
    # informational only, never enforced
    max_tokens: int = DEFAULT_MAX_TOKENS

    def __post_init__(self) -> None:
        object.__setattr__(self, "vocab", MappingProxyType(dict(self.vocab)))
        object.__setattr__(
            self, "reverse_vocab", MappingProxyType(dict(self.reverse_vocab))
        )
        object.__setattr__(
            self, "special_tokens", MappingProxyType(dict(self.special_tokens))
        )
        object.__setattr__(self, "merges", frozenset(self.merges))

    @classmethod
    def from_vocab(
        cls,
        vocab: Mapping[str, TokenId],
        *,
        special_tokens: Mapping[str, str] | None = None,
        merges: Iterable[tuple[str, str] | str] = (),
        is_bpe: bool = False,
        model_name: str = DEFAULT_MODEL_NAME,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> "TokenizerConfig":
        """
        Build a config in code, deriving the reverse vocabulary.

        :param vocab: Token to id mapping.
        :param special_tokens: Role to literal mapping (default: ``{"unk": "<unk>"}``).
        :param merges: Merge rules as ``(left, right)`` pairs or ``"left right"`` strings.
        """
        keys: set[MergeKey] = set()
        for merge in merges:
            key = _merge_key_of(merge)
            if key is None:
                raise ValueError(f"invalid merge rule: {merge!r}")
            keys.add(key)

        return cls(
            vocab=vocab,
            reverse_vocab={tid: tok for tok, tid in vocab.items()},
            special_tokens=(
                special_tokens
                if special_tokens is not None
                else {"unk": DEFAULT_UNK_TOKEN}
            ),
            merges=frozenset(keys),
            is_bpe=is_bpe,
            model_name=model_name,
            max_tokens=max_tokens,
        )


class _FormatMismatch(ValueError):
    """Payload does not have the shape of the layout being tried."""


@measure_time
def load_config(path: str | Path) -> TokenizerConfig:
    """
    Load a tokenizer config from a JSON file.

    :param path: Path to the JSON config file.
    :raises ConfigReadError: If the file cannot be read.
    :raises ConfigFormatError: If the file is not JSON or matches neither layout.
    """
    path = Path(path)
    log.info(f"loading tokenizer config from {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(
            "failed to read tokenizer config", config_path=str(path)
        ) from e

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigFormatError(
            "tokenizer config is not valid JSON", config_path=str(path), reason=str(e)
        ) from e

    return parse_config(payload, source=str(path))


def parse_config(payload: Any, source: str | None = None) -> TokenizerConfig:
    """
    Normalise a decoded JSON payload into a :class:`TokenizerConfig`.

    The export layout is tried first; the simple layout is the fallback.

    :param payload: Decoded JSON document.
    :param source: Where the payload came from, used in error messages.
    :raises ConfigFormatError: If the payload matches neither layout.
    """
    if not isinstance(payload, dict):
        raise ConfigFormatError(
            "tokenizer config must be a JSON object",
            config_path=source,
            reason=f"got {type(payload).__name__}",
        )

    try:
        config = _from_export(payload)
    except _FormatMismatch as e:
        export_reason = str(e)
    else:
        log.info(
            f"loaded export config: {len(config.vocab)} tokens, "
            f"{len(config.merges)} merge rules, bpe={config.is_bpe}"
        )
        return config

    if "model" in payload:
        log.warning(
            f"model section rejected ({export_reason}), falling back to simple format"
        )
    else:
        log.debug(f"not an export config ({export_reason}), trying simple format")

    try:
        config = _from_simple(payload)
    except _FormatMismatch as e:
        raise ConfigFormatError(
            "tokenizer config matches no supported format",
            config_path=source,
            reason=f"export: {export_reason}; simple: {e}",
        ) from e

    log.info(
        f"loaded simple config: {len(config.vocab)} tokens, "
        f"{len(config.special_tokens)} special tokens"
    )
    return config


def _from_export(payload: dict[str, Any]) -> TokenizerConfig:
    """Convert a Hugging Face ``tokenizer.json`` payload."""
    model = payload.get("model")
    if not isinstance(model, dict):
        raise _FormatMismatch("missing model section")

    vocab = _token_map(model.get("vocab"), "model.vocab")
    reverse: ReverseTokenMap = {tid: tok for tok, tid in vocab.items()}

    raw_merges = model.get("merges")
    if raw_merges is None:
        raw_merges = []
    if not isinstance(raw_merges, list):
        raise _FormatMismatch("model.merges must be a list")

    unk_token = model.get("unk_token")
    if unk_token is not None and not isinstance(unk_token, str):
        raise _FormatMismatch("model.unk_token must be a string")

    added_tokens = payload.get("added_tokens")
    if added_tokens is None:
        added_tokens = []
    if not isinstance(added_tokens, list):
        raise _FormatMismatch("added_tokens must be a list")
    for entry in added_tokens:
        if (
            not isinstance(entry, dict)
            or not isinstance(entry.get("content"), str)
            or not _is_id(entry.get("id"))
        ):
            raise _FormatMismatch(f"invalid added token: {entry!r}")

    is_bpe = model.get("type") == "BPE"

    merges: set[MergeKey] = set()
    if is_bpe:
        for merge in raw_merges:
            key = _merge_key_of(merge)
            if key is None:
                log.debug(f"skipping malformed merge rule {merge!r}")
                continue
            merges.add(key)

    special: dict[str, str] = {}
    for entry in added_tokens:
        content, tid = entry["content"], entry["id"]
        vocab[content] = tid
        reverse[tid] = content
        if entry.get("special"):
            role = _ADDED_TOKEN_ROLES.get(content)
            if role is not None:
                special[role] = content

    if "unk" not in special:
        unk = unk_token or DEFAULT_UNK_TOKEN
        special["unk"] = unk
        _ensure_token(vocab, reverse, unk)

    return TokenizerConfig(
        vocab=vocab,
        reverse_vocab=reverse,
        special_tokens=special,
        merges=frozenset(merges),
        is_bpe=is_bpe,
        model_name=DEFAULT_MODEL_NAME,
        max_tokens=DEFAULT_MAX_TOKENS,
    )


def _from_simple(payload: dict[str, Any]) -> TokenizerConfig:
    """Convert the simple native layout."""
    vocab = _token_map(payload.get("vocabulary"), "vocabulary")

    raw_reverse = payload.get("reverse_vocab")
    if raw_reverse is None:
        reverse: ReverseTokenMap = {tid: tok for tok, tid in vocab.items()}
    else:
        reverse = _reverse_map(raw_reverse)

    raw_special = payload.get("special_tokens")
    if raw_special is None:
        special = dict(DEFAULT_SPECIAL_TOKENS)
    else:
        if not isinstance(raw_special, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in raw_special.items()
        ):
            raise _FormatMismatch("special_tokens must map roles to strings")
        special = dict(raw_special)
    special.setdefault("unk", DEFAULT_UNK_TOKEN)

    model_name = payload.get("model_name") or DEFAULT_MODEL_NAME
    if not isinstance(model_name, str):
        raise _FormatMismatch("model_name must be a string")

    max_tokens = payload.get("max_tokens") or DEFAULT_MAX_TOKENS
    if not _is_id(max_tokens):
        raise _FormatMismatch("max_tokens must be an integer")

    is_bpe = payload.get("is_bpe", False)
    if not isinstance(is_bpe, bool):
        raise _FormatMismatch("is_bpe must be a boolean")

    merges = _simple_merges(payload.get("merges"))

    # the word vocabulary is kept; special literals it lacks get fresh ids
    for literal in special.values():
        _ensure_token(vocab, reverse, literal)

    return TokenizerConfig(
        vocab=vocab,
        reverse_vocab=reverse,
        special_tokens=special,
        merges=merges,
        is_bpe=is_bpe,
        model_name=model_name,
        max_tokens=max_tokens,
    )


def _simple_merges(raw: Any) -> frozenset[MergeKey]:
    """Accept ``{"l r": true}`` or a list of pairs / ``"l r"`` strings."""
    if raw is None:
        return frozenset()
    if isinstance(raw, dict):
        return frozenset(key for key, enabled in raw.items() if enabled)
    if isinstance(raw, list):
        keys: set[MergeKey] = set()
        for merge in raw:
            key = _merge_key_of(merge)
            if key is None:
                raise _FormatMismatch(f"invalid merge rule: {merge!r}")
            keys.add(key)
        return frozenset(keys)
    raise _FormatMismatch("merges must be an object or a list")


def _merge_key_of(merge: Any) -> MergeKey | None:
    """Return the key for a ``[left, right]`` pair or a ``"left right"`` string."""
    if isinstance(merge, (list, tuple)):
        if len(merge) == 2 and all(isinstance(part, str) for part in merge):
            return merge_key(merge[0], merge[1])
        return None
    if isinstance(merge, str):
        left, sep, right = merge.partition(" ")
        if sep and left and right:
            return merge
    return None


def _token_map(raw: Any, field_name: str) -> TokenMap:
    """Validate a token -> id object; ``None`` is an empty vocabulary."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise _FormatMismatch(f"{field_name} must be an object")
    for tok, tid in raw.items():
        if not _is_id(tid):
            raise _FormatMismatch(f"{field_name}[{tok!r}] is not an integer id")
    return dict(raw)


def _reverse_map(raw: Any) -> ReverseTokenMap:
    """Validate a reverse vocabulary whose JSON keys are decimal strings."""
    if not isinstance(raw, dict):
        raise _FormatMismatch("reverse_vocab must be an object")
    reverse: ReverseTokenMap = {}
    for key, tok in raw.items():
        try:
            tid = int(key)
        except ValueError:
            raise _FormatMismatch(f"reverse_vocab key is not an integer: {key!r}")
        if not isinstance(tok, str):
            raise _FormatMismatch(f"reverse_vocab[{key!r}] is not a string")
        reverse[tid] = tok
    return reverse


def _is_id(value: Any) -> bool:
    # bool is an int subclass but never a valid id
    return isinstance(value, int) and not isinstance(value, bool)


def _next_free_id(vocab: TokenMap, reverse: ReverseTokenMap) -> TokenId:
    """Allocate ``len(vocab)``, or one past the largest id if that is taken."""
    ids = set(vocab.values()) | set(reverse)
    candidate = len(vocab)
    if candidate in ids:
        candidate = max(ids) + 1
    return candidate


def _ensure_token(vocab: TokenMap, reverse: ReverseTokenMap, tok: str) -> None:
    """Add ``tok`` under a fresh id unless already present."""
    if tok in vocab:
        return
    tid = _next_free_id(vocab, reverse)
    vocab[tok] = tid
    reverse[tid] = tok
    log.debug(f"added missing special token {tok!r} with id {tid}")


__all__ = [
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODEL_NAME",
    "DEFAULT_SPECIAL_TOKENS",
    "DEFAULT_UNK_TOKEN",
    "SPECIAL_ROLES",
    "TokenizerConfig",
    "load_config",
    "merge_key",
    "parse_config",
]
