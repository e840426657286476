"""Standalone BPE training module."""

from dataclasses import dataclass
import logging

from tqdm import tqdm

from ._bpe import bpe_freqs, bpe_max_pair, bpe_merge
from ._progress import _is_enabled
from .errors import InvalidInputError
from .types import Encoding, Inverse, Token, Vocabulary

log = logging.getLogger(__name__)

BASE_VOCAB_SIZE = 256


@dataclass
class BPETrainingResult:
    """Results from one BPE training run."""

    merges: Encoding
    inverse: Inverse
    vocab: Vocabulary
    n_merges_completed: int


def train_bpe(
    tokens: list[Token],
    n_merges: int,
    verbose: bool = False,
    show_progress: bool = True,
) -> BPETrainingResult:
    """
    Learn ``n_merges`` merge rules from a byte token sequence.

    Every round recounts pair frequencies over the current working sequence,
    picks the most frequent pair, assigns it the next id (``256 + round``) and
    rewrites the sequence. Given the same tokens and ``n_merges`` the result
    is always identical.

    :param tokens: Input token sequence used for training. Not modified.
    :param n_merges: Number of merge operations to perform.
    :param verbose: Log each learned merge when ``True``.
    :param show_progress: Display a progress bar during training when ``True``.
    :returns: Training output containing merges, their inverse and the vocab.
    :raises InvalidInputError: If the working sequence collapses below 2 tokens
        before ``n_merges`` rounds are done.
    """
    ids = list(tokens)
    merges: Encoding = {}
    inverse: Inverse = {}
    vocab: Vocabulary = {tok: bytes([tok]) for tok in range(BASE_VOCAB_SIZE)}

    rounds = tqdm(
        range(n_merges),
        desc="training",
        unit="merge",
        disable=not (show_progress and _is_enabled()),
    )
    for i in rounds:
        try:
            freqs = bpe_freqs(ids)
        except InvalidInputError:
            log.error(
                f"training sequence collapsed to {len(ids)} token(s) after {i} merges "
                f"(requested {n_merges}), choose a smaller vocab size"
            )
            raise

        pair = bpe_max_pair(freqs)
        new_tok = BASE_VOCAB_SIZE + i
        ids = bpe_merge(ids, pair, new_tok)

        merges[pair] = new_tok
        inverse[new_tok] = pair
        vocab[new_tok] = vocab[pair.left] + vocab[pair.right]

        if verbose:
            log.info(f"merge {i + 1}/{n_merges}: {tuple(pair)} -> {new_tok}")

    log.debug(f"training sequence compressed from {len(tokens)} to {len(ids)} tokens")

    return BPETrainingResult(
        merges=merges,
        inverse=inverse,
        vocab=vocab,
        n_merges_completed=len(merges),
    )


__all__ = ["BPETrainingResult", "train_bpe"]
