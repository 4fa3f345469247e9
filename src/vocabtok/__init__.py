"""vocabtok: vocabulary-driven tokenization with BPE merge support."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vocabtok")
except PackageNotFoundError:
    __version__ = "dev"

from .config import TokenizerConfig, load_config, parse_config
from .errors import (
    ConfigFormatError,
    ConfigReadError,
    EmptyInputError,
    RequestFormatError,
    StrategyError,
    UninitializedTokenizerError,
    UnsupportedModeError,
    VocabTokError,
)
from .factory import from_pretrained
from .result import TokenizationResult
from .service import TokenizerRequest, TokenizerResponse, TokenizerService
from .strategy import (
    BasicStrategy,
    BPEStrategy,
    DirectStrategy,
    TokenizationStrategy,
    get_strategy,
    list_strategies,
)
from .tokenizer import Tokenizer, TokenizerStats
from .vocab import Vocabulary

__all__ = [
    "TokenizerConfig",
    "Vocabulary",
    "Tokenizer",
    "TokenizerStats",
    "TokenizationResult",
    "TokenizationStrategy",
    "BPEStrategy",
    "DirectStrategy",
    "BasicStrategy",
    "TokenizerService",
    "TokenizerRequest",
    "TokenizerResponse",
    "VocabTokError",
    "ConfigReadError",
    "ConfigFormatError",
    "EmptyInputError",
    "UninitializedTokenizerError",
    "StrategyError",
    "UnsupportedModeError",
    "RequestFormatError",
    "from_pretrained",
    "load_config",
    "parse_config",
    "get_strategy",
    "list_strategies",
]
