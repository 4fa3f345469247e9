"""
Request/response boundary in front of a shared tokenizer.

A :class:`TokenizerService` owns at most one :class:`Tokenizer`, built once at
start-up. When the config cannot be loaded the service still starts and
reports every request as unavailable instead of failing.
"""

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from pathlib import Path
from typing import Any, Final

from .errors import (
    EmptyInputError,
    RequestFormatError,
    UninitializedTokenizerError,
    UnsupportedModeError,
    VocabTokError,
)
from .factory import from_pretrained
from .result import TokenizationResult
from .strategy import StrategyName
from .tokenizer import Tokenizer
from .types import TokenId

log = logging.getLogger(__name__)


class Mode(str, Enum):
    """Operations a request can ask for."""

    TOKENIZE = "tokenize"
    ENCODE = "encode"
    DECODE = "decode"

    @classmethod
    def get(cls, name: str) -> "Mode":
        """Get mode by name (case-insensitive)."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise UnsupportedModeError(
                "unsupported mode",
                mode=name,
                available_modes=[mode.value for mode in cls],
            )


_ERROR_STATUS: Final[dict[type[VocabTokError], HTTPStatus]] = {
    UninitializedTokenizerError: HTTPStatus.SERVICE_UNAVAILABLE,
    EmptyInputError: HTTPStatus.BAD_REQUEST,
    RequestFormatError: HTTPStatus.BAD_REQUEST,
    UnsupportedModeError: HTTPStatus.BAD_REQUEST,
}


@dataclass(frozen=True)
class TokenizerRequest:
    """One tokenize, encode or decode request."""

    mode: str
    text: str = ""
    token_ids: tuple[TokenId, ...] = ()

    @classmethod
    def from_dict(cls, payload: Any) -> "TokenizerRequest":
        """
        Build a request from a decoded JSON body.

        :raises RequestFormatError: If fields are missing or have the wrong type.
        """
        if not isinstance(payload, Mapping):
            raise RequestFormatError("request must be a JSON object")

        mode = payload.get("mode")
        if not isinstance(mode, str):
            raise RequestFormatError("request mode must be a string")

        text = payload.get("text") or ""
        if not isinstance(text, str):
            raise RequestFormatError("request text must be a string")

        token_ids = payload.get("token_ids") or []
        if not isinstance(token_ids, list) or not all(
            isinstance(tid, int) and not isinstance(tid, bool) for tid in token_ids
        ):
            raise RequestFormatError("request token_ids must be a list of integers")

        return cls(mode=mode, text=text, token_ids=tuple(token_ids))


@dataclass(frozen=True)
class TokenizerResponse:
    """Outcome of a request; failures carry a message and never partial data."""

    success: bool
    message: str = ""
    data: TokenizationResult | None = None
    decoded_text: str = ""
    status: int = HTTPStatus.OK

    @classmethod
    def failure(cls, err: VocabTokError) -> "TokenizerResponse":
        status = _ERROR_STATUS.get(type(err), HTTPStatus.INTERNAL_SERVER_ERROR)
        return cls(success=False, message=str(err).strip(), status=status)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dict, omitting empty fields."""
        body: dict[str, Any] = {"success": self.success}
        if self.message:
            body["message"] = self.message
        if self.data is not None:
            body["data"] = self.data.to_dict()
        if self.decoded_text:
            body["decoded_text"] = self.decoded_text
        return body


class TokenizerService:
    """Validates requests and forwards them to a shared tokenizer."""

    def __init__(self, tokenizer: Tokenizer | None) -> None:
        self._tokenizer = tokenizer

    @classmethod
    def from_config_path(
        cls, config_path: str | Path, strategy: StrategyName = "auto"
    ) -> "TokenizerService":
        """
        Build a service from a config file, degrading on load failure.

        Any config error is logged and yields a service without a tokenizer.
        """
        try:
            tokenizer = from_pretrained(config_path, strategy=strategy)
        except VocabTokError as e:
            log.error(f"failed to initialize tokenizer: {e}")
            return cls(None)
        return cls(tokenizer)

    @property
    def ready(self) -> bool:
        return self._tokenizer is not None

    @property
    def tokenizer(self) -> Tokenizer:
        """
        The loaded tokenizer.

        :raises UninitializedTokenizerError: If no tokenizer was loaded.
        """
        if self._tokenizer is None:
            raise UninitializedTokenizerError("tokenizer not initialized")
        return self._tokenizer

    def tokenize(self, text: str) -> TokenizationResult:
        """
        :raises UninitializedTokenizerError: If no tokenizer was loaded.
        :raises EmptyInputError: If ``text`` is empty.
        """
        tokenizer = self.tokenizer
        if not text:
            raise EmptyInputError("text empty")
        return tokenizer.tokenize(text)

    def encode(self, text: str) -> list[TokenId]:
        """
        :raises UninitializedTokenizerError: If no tokenizer was loaded.
        :raises EmptyInputError: If ``text`` is empty.
        """
        tokenizer = self.tokenizer
        if not text:
            raise EmptyInputError("text empty")
        return tokenizer.encode(text)

    def decode(self, token_ids: Sequence[TokenId]) -> str:
        """
        :raises UninitializedTokenizerError: If no tokenizer was loaded.
        :raises EmptyInputError: If ``token_ids`` is empty.
        """
        tokenizer = self.tokenizer
        if not token_ids:
            raise EmptyInputError("ids empty")
        return tokenizer.decode(token_ids)

    def handle(self, request: TokenizerRequest | Mapping[str, Any]) -> TokenizerResponse:
        """
        Run one request and wrap the outcome.

        Every library error becomes a failed response; the service keeps
        serving afterwards.
        """
        try:
            # an unavailable tokenizer is reported before the request is inspected
            _ = self.tokenizer
            if not isinstance(request, TokenizerRequest):
                request = TokenizerRequest.from_dict(request)
            return self._dispatch(request)
        except VocabTokError as e:
            log.warning(f"request failed: {e}")
            return TokenizerResponse.failure(e)

    def _dispatch(self, request: TokenizerRequest) -> TokenizerResponse:
        match Mode.get(request.mode):
            case Mode.TOKENIZE:
                return TokenizerResponse(success=True, data=self.tokenize(request.text))
            case Mode.ENCODE:
                token_ids = self.encode(request.text)
                result = dataclasses.replace(
                    self.tokenize(request.text), token_ids=tuple(token_ids)
                )
                return TokenizerResponse(success=True, data=result)
            case Mode.DECODE:
                return TokenizerResponse(
                    success=True, decoded_text=self.decode(request.token_ids)
                )
