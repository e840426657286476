"""BPTok: byte pair encoding tokenizer over raw UTF-8 bytes."""

from ._bpe import bpe_freqs, bpe_max_pair, bpe_merge
from ._progress import disable_progress, enable_progress
from .errors import (
    BPTokError,
    InvalidInputError,
    ModelLoadError,
    NotTrainedError,
    TrainingError,
    UnknownTokenError,
    VocabularyError,
)
from .factory import from_pretrained, train_tokenizer
from .tokenizer import BytePairTokenizer
from .types import Pair

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bptok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "BytePairTokenizer",
    "Pair",
    "bpe_freqs",
    "bpe_max_pair",
    "bpe_merge",
    "train_tokenizer",
    "from_pretrained",
    "enable_progress",
    "disable_progress",
    "BPTokError",
    "InvalidInputError",
    "VocabularyError",
    "UnknownTokenError",
    "TrainingError",
    "NotTrainedError",
    "ModelLoadError",
]
