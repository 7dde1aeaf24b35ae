"""ImpliedPair: Cross-rate composition of adjacent currency pairs.

Given quotes along a currency path, e.g. CELO/EUR followed by EUR/USD, the
implied CELO/USD quote is computed by folding the chain left to right:

    bid          = P.bid * Q.bid
    ask          = P.ask * Q.ask
    limiting     = min(P.quote_volume, Q.base_volume)
    base_volume  = P.base_volume * (limiting / P.quote_volume)
    quote_volume = Q.quote_volume * (limiting / Q.base_volume)

``limiting`` is the bottleneck liquidity expressed in the intermediate
currency (P's quote currency, Q's base currency). Each leg's volume is scaled
by the share of its intermediate-currency volume that is actually usable.

.. code-block:: python

    >>> celo_eur = PairData(Decimal("4.2"), Decimal("4.21"), Decimal("5000"), Decimal("21000"))
    >>> eur_usd = PairData(Decimal("1.21"), Decimal("1.22"), Decimal("10000"), Decimal("12100"))
    >>> implied = implied_pair([celo_eur, eur_usd])
    >>> implied.bid, implied.quote_volume
    (Decimal('5.082'), Decimal('12100'))
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Context, Decimal, localcontext
from functools import reduce

# Significant digits used for volume scaling.
PRECISION = 50

_ZERO = Decimal(0)


@dataclass(frozen=True)
class PairData:
    """Bid, ask and volumes of a pair, as used by composition.

    :ivar bid: Best bid in quote currency per base unit.
    :ivar ask: Best ask in quote currency per base unit.
    :ivar base_volume: Volume in the base currency.
    :ivar quote_volume: Volume in the quote currency.
    """

    bid: Decimal
    ask: Decimal
    base_volume: Decimal
    quote_volume: Decimal


def _scale(volume: Decimal, limiting: Decimal, capacity: Decimal) -> Decimal:
    """Scale ``volume`` by ``limiting / capacity``.

    A leg whose capacity is the bottleneck passes through unchanged, and a
    zero bottleneck yields zero volume.
    """
    if limiting == _ZERO:
        return _ZERO
    if limiting == capacity:
        return volume
    return volume * (limiting / capacity)


def _compose(p: PairData, q: PairData) -> PairData:
    limiting = min(p.quote_volume, q.base_volume)
    return PairData(
        bid=p.bid * q.bid,
        ask=p.ask * q.ask,
        base_volume=_scale(p.base_volume, limiting, p.quote_volume),
        quote_volume=_scale(q.quote_volume, limiting, q.base_volume),
    )


def implied_pair(pairs: Sequence[PairData]) -> PairData:
    """Compose a chain of adjacent pairs into the implied direct pair.

    The chain is folded strictly in the given order; the order encodes the
    currency path and is never rearranged.

    :param pairs: Non-empty chain, e.g. [A/B, B/C, C/D].
    :returns: Implied A/D pair. A single-element chain is returned as is.
    :raises ValueError: If the chain is empty.
    """
    if not pairs:
        raise ValueError("implied_pair requires at least one pair")

    with localcontext(Context(prec=PRECISION)):
        return reduce(_compose, pairs[1:], pairs[0])
