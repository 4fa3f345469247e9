"""Shared fixtures: tokenizer configs written to disk and in-memory tokenizers."""

import json

import pytest

from vocabtok import Tokenizer, TokenizerConfig


def write_json(path, payload):
    """Dump ``payload`` as UTF-8 JSON and return the path."""
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def export_payload():
    """A small Hugging Face style BPE export."""
    return {
        "version": "1.0",
        "added_tokens": [
            {"id": 0, "content": "<pad>", "special": True},
            {"id": 1, "content": "<unk>", "special": True},
            {"id": 2, "content": "<s>", "special": True},
            {"id": 3, "content": "</s>", "special": True},
        ],
        "model": {
            "type": "BPE",
            "unk_token": "<unk>",
            "vocab": {
                "<pad>": 0,
                "<unk>": 1,
                "<s>": 2,
                "</s>": 3,
                "!": 5,
                ",": 6,
                "e": 11,
                "ll": 24,
                "o": 17,
                "hello": 26,
                "world": 29,
                "token": 34,
                "i": 13,
                "z": 22,
                "r": 18,
            },
            "merges": [
                ["h", "e"],
                ["l", "l"],
                ["t", "o"],
                ["k", "e"],
                ["to", "k"],
                ["e", "n"],
                ["tok", "en"],
            ],
        },
    }


@pytest.fixture
def export_config_path(tmp_path, export_payload):
    return write_json(tmp_path / "tokenizer.json", export_payload)


@pytest.fixture
def simple_config_path(tmp_path):
    return write_json(
        tmp_path / "simple.json",
        {
            "vocabulary": {"hello": 5, "world": 6},
            "model_name": "tiny-word",
            "max_tokens": 128,
        },
    )


@pytest.fixture
def word_tokenizer():
    """Non-BPE tokenizer over a small word vocabulary."""
    config = TokenizerConfig.from_vocab(
        {
            "<unk>": 0,
            "hello": 1,
            "world": 2,
            "token": 3,
            "izer": 4,
            "test": 5,
            ",": 6,
        },
        special_tokens={"unk": "<unk>"},
    )
    return Tokenizer(config)
