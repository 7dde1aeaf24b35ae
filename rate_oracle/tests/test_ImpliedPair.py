"""Unit tests for implied_pair."""

from decimal import Decimal

import pytest

from rate_oracle.src.ImpliedPair import PairData, implied_pair


def pair(bid: str, ask: str, base_volume: str, quote_volume: str) -> PairData:
    return PairData(Decimal(bid), Decimal(ask), Decimal(base_volume), Decimal(quote_volume))


PAIR_1 = pair("10.0", "10.01", "10", "10")
PAIR_2 = pair("2.0", "3.0", "100", "100")
PAIR_3 = pair("1.0", "1.0", "100000", "100000")
CELO_EUR = pair("4.2", "4.21", "5000", "21000")
EUR_USD = pair("1.21", "1.22", "10000", "12100")
CELO_BTC = pair("0.00009877", "0.00009896", "626670.7", "62.5492893")
BTC_USD = pair("35454.22", "35491.83", "9.90406756", "343601.1800347895")


class TestImpliedPairSingle:
    """Test single-element chains."""

    def test_single_pair_unchanged(self) -> None:
        """A chain of one pair is that pair."""
        assert implied_pair([PAIR_1]) == PAIR_1
        assert implied_pair([PAIR_1]) is PAIR_1

    def test_empty_chain_raises(self) -> None:
        """An empty chain has no implied pair."""
        with pytest.raises(ValueError, match="at least one pair"):
            implied_pair([])


class TestImpliedPairTwoLegs:
    """Test composition of two adjacent pairs."""

    def test_test_pairs(self) -> None:
        """Rates multiply; the first leg's quote volume is the bottleneck."""
        implied = implied_pair([PAIR_1, PAIR_2])
        assert implied == pair("20.0", "30.03", "10", "10")

    def test_rates_multiply_exactly(self) -> None:
        """Bid and ask are exact decimal products."""
        implied = implied_pair([CELO_EUR, EUR_USD])
        assert implied.bid == CELO_EUR.bid * EUR_USD.bid
        assert implied.ask == CELO_EUR.ask * EUR_USD.ask
        assert implied.bid == Decimal("5.082")
        assert implied.ask == Decimal("5.1362")

    def test_celo_usd_via_eur(self) -> None:
        """EUR/USD base volume limits the CELO side."""
        implied = implied_pair([CELO_EUR, EUR_USD])
        assert implied.base_volume.quantize(Decimal("0.00001")) == Decimal("2380.95238")
        # EUR/USD is the constraining leg, so its quote volume passes through
        assert implied.quote_volume == Decimal("12100")

    def test_celo_usd_via_btc(self) -> None:
        """BTC/USD base volume limits the CELO/BTC side."""
        implied = implied_pair([CELO_BTC, BTC_USD])
        assert implied.bid.quantize(Decimal("0.0001")) == Decimal("3.5018")
        assert implied.ask.quantize(Decimal("0.0001")) == Decimal("3.5123")
        assert implied.base_volume.quantize(Decimal("0.0001")) == Decimal("99227.1698")
        assert implied.quote_volume == Decimal("343601.1800347895")

    def test_volumes_never_increase(self) -> None:
        """Scaling can only shrink each side's volume."""
        for p, q in [
            (PAIR_1, PAIR_2),
            (PAIR_2, PAIR_1),
            (CELO_EUR, EUR_USD),
            (EUR_USD, CELO_EUR),
            (CELO_BTC, BTC_USD),
        ]:
            implied = implied_pair([p, q])
            assert implied.base_volume <= p.base_volume
            assert implied.quote_volume <= q.quote_volume

    def test_order_matters(self) -> None:
        """The chain is folded in the given order, not rearranged."""
        forward = implied_pair([CELO_EUR, EUR_USD])
        backward = implied_pair([EUR_USD, CELO_EUR])
        assert forward.bid == backward.bid
        assert forward.base_volume != backward.base_volume


class TestImpliedPairChains:
    """Test chains of three or more pairs."""

    def test_middle_pair_constraining(self) -> None:
        """A deep identity-rate first leg does not change the result."""
        implied = implied_pair([PAIR_3, PAIR_1, PAIR_2])
        assert implied == pair("20.0", "30.03", "10", "10")

    def test_identity_leg_is_neutral(self) -> None:
        """[P3, P2] composes to P2 when P3 is a deep 1:1 market."""
        assert implied_pair([PAIR_3, PAIR_2]) == PAIR_2

    def test_left_fold(self) -> None:
        """Folding three pairs equals composing the first two, then the third."""
        chain = [CELO_BTC, BTC_USD, pair("0.92", "0.93", "50000", "46000")]
        assert implied_pair(chain) == implied_pair([implied_pair(chain[:2]), chain[2]])


class TestImpliedPairDegenerate:
    """Test zero-liquidity compositions."""

    def test_zero_quote_volume(self) -> None:
        """No intermediate liquidity on the first leg yields zero volumes."""
        implied = implied_pair([pair("2", "3", "100", "0"), PAIR_2])
        assert implied.base_volume == 0
        assert implied.quote_volume == 0
        assert implied.bid == Decimal("4.0")

    def test_zero_base_volume(self) -> None:
        """No intermediate liquidity on the second leg yields zero volumes."""
        implied = implied_pair([PAIR_2, pair("2", "3", "0", "100")])
        assert implied.base_volume == 0
        assert implied.quote_volume == 0
