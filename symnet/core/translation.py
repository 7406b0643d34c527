"""Translation between output symbols and normalised activations.

Each output node owns one :class:`SymbolTranslator`. The activation range
``(0, 1)`` is cut into ``count`` equal buckets, one per symbol observed at
that output position, ordered by byte value. Encoding a symbol targets the
centre of its bucket so that decoding the target yields the same symbol.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Sequence, Tuple

from sklearn.preprocessing import LabelEncoder

from ..errors import InvalidParameter, UnknownSymbol
from .types import Example, Symbol


class SymbolTranslator:
    """Bidirectional map between one output position's symbols and activations."""

    def __init__(self, symbols: Iterable[Symbol], dimension: int | None = None) -> None:
        observed = list(symbols)
        if not observed:
            raise InvalidParameter("a translator needs at least one observed symbol")
        encoder = LabelEncoder()
        encoder.fit(observed)
        self.dimension = dimension
        self.symbols: Tuple[Symbol, ...] = tuple(str(s) for s in encoder.classes_.tolist())
        self._ordinals: Dict[Symbol, int] = {s: i for i, s in enumerate(self.symbols)}

    @classmethod
    def build(cls, dimension: int, examples: Sequence[Example]) -> "SymbolTranslator":
        """Collect the distinct symbols at output position ``dimension``."""

        if not examples:
            raise InvalidParameter("cannot build a translator without examples")
        return cls((ex.outputs[dimension] for ex in examples), dimension=dimension)

    @property
    def count(self) -> int:
        return len(self.symbols)

    def encode(self, symbol: Symbol) -> float:
        try:
            ordinal = self._ordinals[symbol]
        except KeyError:
            raise UnknownSymbol(symbol, self.dimension) from None
        return (ordinal + 0.5) / self.count

    def decode(self, activation: float) -> Symbol:
        ordinal = math.floor(activation * self.count)
        ordinal = min(max(ordinal, 0), self.count - 1)
        return self.symbols[ordinal]

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._ordinals

    def __repr__(self) -> str:
        return f"SymbolTranslator(dimension={self.dimension}, symbols={''.join(self.symbols)!r})"


def build_translators(examples: Sequence[Example], output_length: int) -> List[SymbolTranslator]:
    """Return one translator per output position."""

    return [SymbolTranslator.build(dim, examples) for dim in range(output_length)]


__all__ = ["SymbolTranslator", "build_translators"]
