"""Factory functions for creating tokenizers."""

import logging
from pathlib import Path

from .config import load_config
from .strategy import StrategyName
from .tokenizer import Tokenizer

log = logging.getLogger(__name__)


def from_pretrained(
    config_path: str | Path, strategy: StrategyName = "auto"
) -> Tokenizer:
    """
    Load a tokenizer from a JSON config on disk.

    Accepts a Hugging Face ``tokenizer.json`` export or the simple native
    layout.

    :param config_path: Path to the JSON config.
    :param strategy: ``auto`` or a fixed strategy name.
    :return: Tokenizer ready for use.
    :raises ConfigReadError: If the file cannot be read.
    :raises ConfigFormatError: If the file matches neither layout.
    :raises StrategyError: If ``strategy`` is unknown.

    .. code-block:: python

        tokenizer = from_pretrained("tokenizer/tokenizer.json")
        ids = tokenizer.encode("Hello world")
    """
    config = load_config(config_path)
    tokenizer = Tokenizer(config, strategy=strategy)
    log.info(f"tokenizer initialized, vocab size: {tokenizer.vocab_size()}")
    return tokenizer
