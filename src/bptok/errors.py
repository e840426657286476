"""Custom exception hierarchy for bptok tokenization errors."""

from .types import Token


class BPTokError(Exception):
    """Base exception for all bptok errors."""


class InvalidInputError(BPTokError, ValueError):
    """Raised when a token sequence is too short to compute pair statistics."""

    def __init__(self, message: str, *, length: int | None = None) -> None:
        """Initialize with optional sequence length that gets appended to the message."""
        if length is not None:
            message = f"{message} (length: {length})"
        super().__init__(message)
        self.length = length


class VocabularyError(BPTokError):
    """Raised when vocabulary operations fail."""

    def __init__(
        self,
        message: str,
        *,
        vocab_size: int | None = None,
        invalid_tok: Token | None = None,
    ) -> None:
        """Initialize with optional token and vocab_size that get appended to the message."""
        extra = " "
        # construction: vocab size <= 256
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        # decoding: token not in model tables
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok}) "
        super().__init__(message + extra.rstrip())
        self.vocab_size = vocab_size
        self.invalid_tok = invalid_tok


class UnknownTokenError(VocabularyError):
    """Raised when decoding a token id absent from the inverse merge table."""

    def __init__(self, message: str, *, invalid_tok: Token) -> None:
        super().__init__(message, invalid_tok=invalid_tok)


class TrainingError(BPTokError):
    """Raised when tokenizer training fails."""

    def __init__(self, message: str, *, vocab_size: int | None = None) -> None:
        super().__init__(message)
        self.vocab_size = vocab_size


class NotTrainedError(TrainingError):
    """Raised when a tokenizer is used before ``train()`` has been called."""


class ModelLoadError(BPTokError):
    """Raised when loading a tokenizer model fails."""

    def __init__(
        self,
        message: str,
        *,
        model_path: str | None = None,
        version_mismatch: tuple[str, str] | None = None,
    ) -> None:
        extra = " "
        if model_path:
            extra += f"(path: {model_path}) "
        if version_mismatch is not None:
            extra += f"(expected: {version_mismatch[1]}) (got {version_mismatch[0]}) "
        super().__init__(message + extra.rstrip())
        self.model_path = model_path
        self.version_mismatch = version_mismatch
