"""Custom exception hierarchy for vocabtok errors."""


class VocabTokError(Exception):
    """Base exception for all vocabtok errors."""


class ConfigReadError(VocabTokError):
    """Raised when the tokenizer config file cannot be read."""

    def __init__(self, message: str, *, config_path: str | None = None) -> None:
        extra = " "
        if config_path:
            extra += f"(path: {config_path}) "
        super().__init__(message + extra)
        self.config_path = config_path


class ConfigFormatError(VocabTokError):
    """Raised when the tokenizer config matches neither supported JSON layout."""

    def __init__(
        self,
        message: str,
        *,
        config_path: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize with optional path and parse failure reason appended to the message."""
        extra = " "
        if config_path:
            extra += f"(path: {config_path}) "
        if reason:
            extra += f"(reason: {reason}) "
        super().__init__(message + extra)
        self.config_path = config_path
        self.reason = reason


class EmptyInputError(VocabTokError):
    """Raised when text or token ids are empty."""


class UninitializedTokenizerError(VocabTokError):
    """Raised when a request reaches a service with no loaded tokenizer."""


class StrategyError(VocabTokError):
    """Raised when strategy lookup fails."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available_strats: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available_strats}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available_strats = available_strats


class UnsupportedModeError(VocabTokError):
    """Raised when a service request names an unknown mode."""

    def __init__(
        self,
        message: str,
        *,
        mode: str | None = None,
        available_modes: list[str] | None = None,
    ) -> None:
        extra = " "
        if available_modes:
            extra += f"(available: {', '.join(available_modes)}) (got {mode!r}) "
        super().__init__(message + extra)
        self.mode = mode
        self.available_modes = available_modes


class RequestFormatError(VocabTokError):
    """Raised when a service request payload is malformed."""
