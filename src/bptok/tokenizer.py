"""
Byte pair encoding tokenizer over a flat UTF-8 byte stream.
"""

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Final

from ._bpe import bpe_merge
from ._decorators import measure_time
from ._sanitise import render_bytes
from ._trainer import BASE_VOCAB_SIZE, train_bpe
from .errors import (
    ModelLoadError,
    NotTrainedError,
    UnknownTokenError,
    VocabularyError,
)
from .types import Encoding, Inverse, Pair, Token, Vocabulary


PREFIX: Final[str] = "BPTok"
try:
    _version = version("bptok")
except PackageNotFoundError:
    _version = "dev"


VERSION: Final[str] = _version
MODEL_SUFFIX: Final[str] = ".model"
VOCAB_SUFFIX: Final[str] = ".vocab"
DEFAULT_VOCAB_SIZE: Final[int] = 276

log = logging.getLogger(__name__)


class BytePairTokenizer:
    """
    Byte-level BPE tokenizer learned from a single training text.

    The tokenizer must be trained with :meth:`train` before it can encode or
    decode. Training learns ``vocab_size - 256`` merges on top of the 256 byte
    tokens; the merge table keeps discovery order, which is also the order
    merges are replayed in when encoding.

    Example:
       >>> tok = BytePairTokenizer("aaabdaaabac", vocab_size=259)
       >>> tok.train()
       >>> tok.encode("aaabdaaabac")
       [258, 100, 258, 97, 99]
       >>> tok.decode([258, 100, 258, 97, 99])
       'aaabdaaabac'
    """

    def __init__(self, text: str, vocab_size: int = DEFAULT_VOCAB_SIZE) -> None:
        """
        Store the training text and the target vocabulary size.

        :param text: Training text.
        :param vocab_size: Target vocabulary size including the base 256 bytes.
        :raises VocabularyError: If ``vocab_size`` is not an integer greater than 256.
        """
        # bool is an int subclass but never a meaningful size
        if (
            not isinstance(vocab_size, int)
            or isinstance(vocab_size, bool)
            or vocab_size <= BASE_VOCAB_SIZE
        ):
            raise VocabularyError(
                "vocab size must be an integer greater than 256", vocab_size=vocab_size
            )

        self._tokens: tuple[Token, ...] = tuple(text.encode("utf-8"))
        self._vocab_size = vocab_size
        # byte pair -> merge token, in discovery order
        self._merges: Encoding = {}
        # merge token -> byte pair
        self._inverse: Inverse = {}
        # tokens -> bytes
        self._vocab: Vocabulary = {}
        self._trained = False

    @property
    def vocab_size(self) -> int:
        """Target vocabulary size, base bytes included."""
        return self._vocab_size

    @property
    def is_trained(self) -> bool:
        return self._trained

    @property
    def merges(self) -> Encoding:
        """Copy of the merge table in training order."""
        return dict(self._merges)

    @property
    def inverse(self) -> Inverse:
        """Copy of the merge token -> pair table."""
        return dict(self._inverse)

    @property
    def vocab(self) -> Vocabulary:
        """Copy of the token -> bytes vocabulary."""
        return dict(self._vocab)

    @measure_time
    def train(self, verbose: bool = False, show_progress: bool = True) -> None:
        """
        Train the tokenizer on the text given at construction.

        Calling it again re-runs training from the original bytes and replaces
        the previous tables.

        :param verbose: Log each learned merge when ``True``.
        :param show_progress: Show a progress bar over merge rounds when ``True``.
        :raises InvalidInputError: If the training text collapses into a single
            token before all merges are learned. The previous state is kept.
        """
        n_merges = self._vocab_size - BASE_VOCAB_SIZE
        log.info(
            f"training on {len(self._tokens)} bytes for {n_merges} merges "
            f"(vocab size: {self._vocab_size})"
        )

        result = train_bpe(
            list(self._tokens), n_merges, verbose=verbose, show_progress=show_progress
        )

        self._merges = result.merges  # used for encoding text -> tokens
        self._inverse = result.inverse  # used for decoding tokens -> bytes
        self._vocab = result.vocab
        self._trained = True

    def encode(self, text: str) -> list[Token]:
        """
        Encode text into a sequence of tokens.

        Merges are applied one by one in the order they were learned.

        :raises NotTrainedError: If the tokenizer has not been trained yet.
        """
        self._check_trained("encoding")

        tokens = list(text.encode("utf-8"))
        for pair, mtok in self._merges.items():
            # nothing left to merge
            if len(tokens) < 2:
                break
            tokens = bpe_merge(tokens, pair, mtok)

        return tokens

    def decode(self, tokens: list[Token], errors: str = "replace") -> str:
        """
        Decode a sequence of tokens back into text.

        :param tokens: Token sequence to decode.
        :param errors: How to handle invalid UTF-8, passed to ``bytes.decode``.
        :raises NotTrainedError: If the tokenizer has not been trained yet.
        :raises UnknownTokenError: If a token id is not in the model tables.
        """
        self._check_trained("decoding")

        # token stream -> byte stream
        txt_bytes = b"".join(self._expand(tok) for tok in tokens)
        # byte stream -> python string
        return txt_bytes.decode("utf-8", errors=errors)

    def token_bytes(self, tok: Token) -> bytes:
        """Return the raw bytes a single token expands to."""
        self._check_trained("expanding tokens")
        return self._expand(tok)

    def save(self, file_prefix: str) -> None:
        """
        Save tokenizer state to disk.

        Creates two files: a .model file with merge mappings and a .vocab file
        with human-readable token representations.

        :param file_prefix: Path prefix for output files.
        :raises NotTrainedError: If the tokenizer has not been trained yet.
        """
        self._check_trained("saving")
        log.info(f"saving tokenizer to {file_prefix}")
        self._save_model(file_prefix)
        self._save_vocab(file_prefix)
        log.info("tokenizer saved successfully")

    @classmethod
    def load(cls, model_filename: str) -> "BytePairTokenizer":
        """
        Load a trained tokenizer from a .model file.

        The loaded tokenizer holds no training text, so it can encode and
        decode but not be retrained.

        :param model_filename: Path to the .model file.
        :raises ModelLoadError: If the file is missing, malformed, or was written
            by a different version.
        """
        path = Path(model_filename)

        if not path.exists():
            raise ModelLoadError("model filepath does not exist", model_path=str(path))

        if path.suffix != MODEL_SUFFIX:
            raise ModelLoadError("expected .model file", model_path=str(path))

        log.info(f"loading model from {path}")

        merges: Encoding = {}

        with path.open("r", encoding="utf-8") as f:
            # verify version match
            header = f.readline().split()
            if len(header) != 2 or header[0] != PREFIX:
                raise ModelLoadError("missing model header", model_path=str(path))
            if header[1] != VERSION:
                raise ModelLoadError(
                    "model version mismatch", version_mismatch=(header[1], VERSION)
                )

            size_line = f.readline().split()
            try:
                if len(size_line) != 2 or size_line[0] != "vocab":
                    raise ValueError()
                vocab_size = int(size_line[1])
            except ValueError as e:
                raise ModelLoadError(
                    f"invalid vocab size line: {' '.join(size_line)}",
                    model_path=str(path),
                ) from e

            marker = f.readline().strip()
            if marker != "---":
                raise ModelLoadError(
                    f"merge section marker missing: (expected ---) (got {marker})"
                )

            for line in f:
                try:
                    # tokens are stored as strings in file
                    ctok0, ctok1, mtok = map(int, line.split())
                except ValueError as e:
                    raise ModelLoadError(
                        f"invalid merge format at line: {line.strip()}"
                    ) from e
                # ids must be consecutive and children must already exist
                if mtok != BASE_VOCAB_SIZE + len(merges) or not (
                    0 <= ctok0 < mtok and 0 <= ctok1 < mtok
                ):
                    raise ModelLoadError(
                        f"inconsistent merge rule: {ctok0} {ctok1} -> {mtok}"
                    )
                merges[Pair(ctok0, ctok1)] = mtok

        if len(merges) != vocab_size - BASE_VOCAB_SIZE:
            raise ModelLoadError(
                f"expected {vocab_size - BASE_VOCAB_SIZE} merge rules, found {len(merges)}",
                model_path=str(path),
            )

        try:
            tokenizer = cls("", vocab_size)
        except VocabularyError as e:
            raise ModelLoadError("invalid vocab size", model_path=str(path)) from e

        tokenizer._merges = merges
        tokenizer._inverse = {mtok: pair for pair, mtok in merges.items()}
        tokenizer._vocab = tokenizer._build_vocab()
        tokenizer._trained = True

        log.info(
            f"model loaded successfully: {len(merges)} merge rules, "
            f"{len(tokenizer._vocab)} total tokens"
        )
        return tokenizer

    def _check_trained(self, action: str) -> None:
        if not self._trained:
            raise NotTrainedError(
                f"{self.__class__.__name__} must be trained before {action}",
                vocab_size=self._vocab_size,
            )

    def _expand(self, tok: Token) -> bytes:
        """
        Expand one token to its bytes.

        Walks the inverse table with an explicit stack; the left child is
        popped before the right so bytes come out in order.
        """
        out = bytearray()
        stack = [tok]
        while stack:
            cur = stack.pop()
            if 0 <= cur < BASE_VOCAB_SIZE:
                out.append(cur)
                continue
            pair = self._inverse.get(cur)
            if pair is None:
                raise UnknownTokenError("token not in vocabulary", invalid_tok=cur)
            stack.append(pair.right)
            stack.append(pair.left)
        return bytes(out)

    def _build_vocab(self) -> Vocabulary:
        """
        Build token-to-bytes vocabulary mapping.

        Merged tokens are added in id order so child tokens exist before
        their parent.
        """
        vocab = {btok: bytes([btok]) for btok in range(BASE_VOCAB_SIZE)}
        for mtok in sorted(self._inverse):
            tok0, tok1 = self._inverse[mtok]
            vocab[mtok] = vocab[tok0] + vocab[tok1]

        log.debug(f"built vocabulary with {len(vocab)} tokens")
        return vocab

    def _save_model(self, file_prefix: str) -> None:
        """Persist merge mappings to a .model file."""
        model_path = Path(file_prefix).with_suffix(MODEL_SUFFIX)
        # create directory if does not exist
        model_path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving {len(self._merges)} merge rules to {model_path}")

        with model_path.open("w", encoding="utf-8", newline="\n") as f:
            f.write(f"{PREFIX} {VERSION}\n")
            f.write(f"vocab {self._vocab_size}\n")
            f.write("---\n")
            for pair, mtok in self._merges.items():
                f.write(f"{pair.left} {pair.right} {mtok}\n")

    def _save_vocab(self, file_prefix: str) -> None:
        """Persist human-readable token representations to a .vocab file."""
        vocab_path = Path(file_prefix).with_suffix(VOCAB_SUFFIX)
        vocab_path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving vocab to {vocab_path}")

        with vocab_path.open("w", encoding="utf-8", newline="\n") as f:
            for tok, b in self._vocab.items():
                subword = render_bytes(b)
                # token arises from merging: show derivation from child tokens
                if tok in self._inverse:
                    ctok0, ctok1 = self._inverse[tok]
                    subword0 = render_bytes(self._vocab[ctok0])
                    subword1 = render_bytes(self._vocab[ctok1])
                    f.write(f"[{tok}] [{subword0}][{subword1}] -> {subword}\n")
                else:
                    # one of base 256 tokens: no merging
                    f.write(f"[{tok}] {subword}\n")
