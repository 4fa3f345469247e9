"""Unit tests for tokenization strategies, encode/decode and result statistics."""

import logging

import pytest

from vocabtok import StrategyError, Tokenizer, TokenizerConfig, from_pretrained
from vocabtok._bpe import apply_bpe
from vocabtok.pattern import split_alnum_or_symbol, split_words_and_punct


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def bpe_tokenizer(export_config_path):
    """Return a BPE tokenizer loaded from the export fixture."""
    return from_pretrained(export_config_path)


# Pre-tokenization
# ---------------------------------------------------------------------------


def test_split_words_and_punct_drops_whitespace():
    assert split_words_and_punct("Hello,  world!\n") == ["Hello", ",", "world", "!"]


def test_split_words_and_punct_unicode():
    """Any Unicode punctuation code point is its own word."""
    assert split_words_and_punct("héllo—wörld  ok.") == ["héllo", "—", "wörld", "ok", "."]
    assert split_words_and_punct("你好，世界") == ["你好", "，", "世界"]


def test_split_alnum_or_symbol():
    assert split_alnum_or_symbol("ab12 $x!") == ["ab12", "$", "x", "!"]


# BPE
# ---------------------------------------------------------------------------


def test_apply_bpe_merges_pair():
    """A registered merge joins the two characters of a word."""
    assert apply_bpe("he", frozenset({"h e"})) == ["he"]


def test_apply_bpe_without_merges_returns_characters():
    assert apply_bpe("hey", frozenset()) == ["h", "e", "y"]


def test_apply_bpe_uses_first_match_not_rank():
    """The leftmost applicable pair is merged first, whatever its learned rank."""
    assert apply_bpe("abc", frozenset({"b c", "a b"})) == ["ab", "c"]


def test_apply_bpe_restarts_scan_after_each_merge():
    merges = frozenset({"t o", "to k", "e n", "tok en", "k e"})
    assert apply_bpe("token", merges) == ["token"]


def test_bpe_tokenize_whole_words_and_merges(bpe_tokenizer):
    """Vocabulary words pass through; other words are BPE merged."""
    tokens = bpe_tokenizer.split_tokens("Hello, world!")
    assert tokens == ["H", "e", "ll", "o", ",", "world", "!"]


def test_bpe_encode_maps_unknown_to_unk(bpe_tokenizer):
    assert bpe_tokenizer.encode("Hello, world!") == [1, 11, 24, 17, 6, 29, 5]


def test_bpe_tokenize_merges_into_vocab_entries(bpe_tokenizer):
    result = bpe_tokenizer.tokenize("hello tokenizer")
    assert list(result.tokens) == ["hello", "token", "i", "z", "e", "r"]
    assert list(result.token_ids) == [26, 34, 13, 22, 11, 18]
    assert result.unknown_count == 0


# Direct and basic strategies
# ---------------------------------------------------------------------------


def test_direct_exact_and_lowercase_matches(word_tokenizer):
    assert word_tokenizer.split_tokens("Hello World TEST") == ["hello", "world", "test"]


def test_direct_subword_longest_match(word_tokenizer):
    assert word_tokenizer.split_tokens("tokenizer") == ["token", "izer"]


def test_direct_subword_splits_off_punctuation(word_tokenizer):
    assert word_tokenizer.split_tokens("Hello,") == ["hello", ","]


def test_direct_subword_drops_unmatched_characters(word_tokenizer):
    """Characters around a sub-word match are not emitted."""
    assert word_tokenizer.split_tokens("xtokenx") == ["token"]


def test_direct_unmatched_word_degrades_to_characters(word_tokenizer):
    assert word_tokenizer.split_tokens("XyZ") == ["x", "y", "z"]


def test_basic_strategy_keeps_only_vocab_hits(word_tokenizer):
    tokenizer = Tokenizer(word_tokenizer.config, strategy="basic")
    assert tokenizer.split_tokens("Hello, World!! 42") == ["hello", ",", "world"]


def test_auto_falls_back_to_basic_on_whitespace(word_tokenizer):
    assert word_tokenizer.split_tokens("   \n\t ") == []


def test_forced_bpe_strategy_on_word_config(word_tokenizer):
    tokenizer = Tokenizer(word_tokenizer.config, strategy="bpe")
    assert tokenizer.split_tokens("hello, xy") == ["hello", ",", "x", "y"]


def test_unknown_strategy_raises(word_tokenizer):
    with pytest.raises(StrategyError):
        Tokenizer(word_tokenizer.config, strategy="wordpiece")  # type: ignore[arg-type]


# Encode / decode
# ---------------------------------------------------------------------------


def test_encode_known_words():
    config = TokenizerConfig.from_vocab(
        {"hello": 1, "world": 2, "<unk>": 0}, special_tokens={"unk": "<unk>"}
    )
    tokenizer = Tokenizer(config)
    assert tokenizer.encode("hello world") == [1, 2]


def test_encode_unknown_word_maps_each_character_to_unk():
    """An unmatched word degrades to characters, each encoded as unk."""
    config = TokenizerConfig.from_vocab(
        {"hello": 1, "world": 2, "<unk>": 0}, special_tokens={"unk": "<unk>"}
    )
    tokenizer = Tokenizer(config)
    assert tokenizer.encode("hello xyz") == [1, 0, 0, 0]


def test_encode_without_unk_entry_falls_back_to_zero():
    tokenizer = Tokenizer(TokenizerConfig.from_vocab({"a": 5}))
    assert tokenizer.encode("a b") == [5, 0]


def test_decode_joins_with_spaces(bpe_tokenizer):
    assert bpe_tokenizer.decode([26, 29]) == "hello world"


def test_decode_unknown_id_uses_unk_literal(bpe_tokenizer):
    assert bpe_tokenizer.decode([26, 999, 29]) == "hello <unk> world"


def test_decode_of_encode_is_space_joined_resolved_tokens(bpe_tokenizer):
    """Round trip rebuilds the resolved tokens, not the original spacing."""
    text = "Hello, world!"
    decoded = bpe_tokenizer.decode(bpe_tokenizer.encode(text))
    assert decoded == "<unk> e ll o , world !"


@pytest.mark.parametrize(
    "text",
    ["hello world", "Hello, world!", "tokenizer xyz", "  ", "a\nb\tc", "你好，世界"],
)
def test_one_id_per_token(text, word_tokenizer, bpe_tokenizer):
    for tokenizer in (word_tokenizer, bpe_tokenizer):
        assert len(tokenizer.tokenize(text).tokens) == len(tokenizer.encode(text))


# Results
# ---------------------------------------------------------------------------


def test_empty_text(word_tokenizer):
    """Empty text yields no tokens and all counts at zero."""
    result = word_tokenizer.tokenize("")
    assert result.tokens == ()
    assert result.token_ids == ()
    assert result.token_count == 0
    assert result.char_count == 0
    assert result.word_count == 0
    assert result.line_count == 0
    assert result.unknown_count == 0
    assert word_tokenizer.encode("") == []


def test_result_statistics(word_tokenizer):
    result = word_tokenizer.tokenize("hello world\nfoo bar")

    assert list(result.tokens) == ["hello", "world", "f", "o", "o", "b", "a", "r"]
    assert list(result.token_ids) == [1, 2, 0, 0, 0, 0, 0, 0]
    assert result.token_count == 8
    assert result.char_count == 19
    assert result.word_count == 4
    assert result.line_count == 2
    assert result.unknown_count == 6
    assert result.vocab_size == 7
    assert result.model_name == "GLM4.5"


def test_char_count_uses_code_points(word_tokenizer):
    assert word_tokenizer.tokenize("héllo 世界").char_count == 8


def test_single_line_without_newline(word_tokenizer):
    assert word_tokenizer.tokenize("hello").line_count == 1


def test_result_to_dict_field_names(word_tokenizer):
    data = word_tokenizer.tokenize("hello world").to_dict()
    assert data == {
        "tokens": ["hello", "world"],
        "token_ids": [1, 2],
        "token_count": 2,
        "char_count": 11,
        "word_count": 2,
        "line_count": 1,
        "vocab_size": 7,
        "unknown_count": 0,
        "model_name": "GLM4.5",
    }


# Introspection
# ---------------------------------------------------------------------------


def test_vocab_introspection(bpe_tokenizer):
    assert bpe_tokenizer.vocab_size() == 15
    assert bpe_tokenizer.top_tokens(4) == ["<pad>", "<unk>", "<s>", "</s>"]
    assert bpe_tokenizer.find_token_by_id(29) == "world"
    assert bpe_tokenizer.find_token_by_id(4) is None
    assert bpe_tokenizer.find_tokens_by_prefix("<") == {"<pad>", "<unk>", "<s>", "</s>"}
    assert bpe_tokenizer.get_vocabulary()["token"] == 34


def test_stats(bpe_tokenizer):
    stats = bpe_tokenizer.stats()
    assert stats.model_type == "BPE"
    assert stats.vocab_size == 15
    assert stats.merge_count == 7
    assert len(stats.top_tokens) == 15
    assert stats.top_tokens[0] == "<pad>"


def test_log_stats(bpe_tokenizer, caplog):
    with caplog.at_level(logging.INFO, logger="vocabtok.tokenizer"):
        bpe_tokenizer.log_stats()
    assert "model type: BPE" in caplog.text
    assert "bpe merges: 7" in caplog.text
