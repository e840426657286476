"""
Core Byte Pair Encoding (BPE) operations.
"""

from .errors import InvalidInputError
from .types import Pair, Token


def bpe_freqs(tokens: list[Token]) -> dict[Pair, int]:
    """
    Count every adjacent token pair in the sequence.

    Overlapping pairs are counted independently, so ``[a, a, a]`` yields
    ``{(a, a): 2}``. The returned dict is ordered by first occurrence of each
    pair in ``tokens``; :func:`bpe_max_pair` relies on that order to break ties.

    :param tokens: Token sequence to scan.
    :return: Mapping of pair to occurrence count.
    :raises InvalidInputError: If ``tokens`` has fewer than 2 elements.
    """
    if len(tokens) < 2:
        raise InvalidInputError(
            "cannot count pairs in fewer than 2 tokens", length=len(tokens)
        )

    pairs: dict[Pair, int] = {}
    for tok0, tok1 in zip(tokens, tokens[1:]):
        pair = Pair(tok0, tok1)
        pairs[pair] = pairs.get(pair, 0) + 1

    return pairs


def bpe_max_pair(freqs: dict[Pair, int]) -> Pair | None:
    """
    Return the most frequent pair, or ``None`` if ``freqs`` is empty.

    Among equal counts the pair seen first wins: a pair only replaces the
    running best when its count is strictly greater.
    """
    best: Pair | None = None
    best_count = 0

    for pair, count in freqs.items():
        if count > best_count:
            best, best_count = pair, count

    return best


def bpe_merge(tokens: list[Token], target: Pair, new_tok: Token) -> list[Token]:
    """
    Merge all occurrences of a target token pair into a single new token.

    The scan is left to right and non-overlapping: ``[5, 5, 5]`` merged on
    ``(5, 5)`` gives ``[new_tok, 5]``.

    Note that some of the new tokens generated may be partial utf-8 sequences
    so they cannot be decoded into valid strings on their own.

    :param tokens: Original list of tokens, left untouched.
    :param target: The consecutive pair of tokens to merge.
    :param new_tok: The new token that replaces the target pair.
    :return: New token list with all target pairs replaced by ``new_tok``.
    """
    newtoks: list[Token] = []
    left, right = target

    i = 0
    n = len(tokens)
    while i < n - 1:
        if tokens[i] == left and tokens[i + 1] == right:
            newtoks.append(new_tok)
            i += 2
        else:
            newtoks.append(tokens[i])
            i += 1

    # scan stopped one short: keep the trailing token
    if i < n:
        newtoks.append(tokens[i])

    return newtoks
