"""
Core types for tokenization.
"""

from typing import NamedTuple, TypeAlias

Token: TypeAlias = int
TokenBytes: TypeAlias = bytes


class Pair(NamedTuple):
    """Ordered pair of adjacent tokens, used as a hashable key."""

    left: Token
    right: Token


Encoding: TypeAlias = dict[Pair, Token]
Inverse: TypeAlias = dict[Token, Pair]
Vocabulary: TypeAlias = dict[Token, TokenBytes]
