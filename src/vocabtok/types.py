"""
Core types for vocabulary-driven tokenization.
"""

from typing import Literal, TypeAlias

TokenId: TypeAlias = int
MergeKey: TypeAlias = str
SpecialRole: TypeAlias = Literal["pad", "unk", "bos", "eos", "mask"]
TokenMap: TypeAlias = dict[str, TokenId]
ReverseTokenMap: TypeAlias = dict[TokenId, str]
