"""
Unit Tests for the Tradeable-Pair Filter and Rate/Fee Table

Run with:
    pytest tests/unit/test_pair_filter.py -v
"""

import pytest

from core.pair_filter import StaticPriceReference, TradeablePairFilter
from core.reference_data import ReferenceData
from core.schemas import TradingPair


PAIRS = ["LTC_BTC", "ETH_BTC", "XRP_BTC", "DOGE_BTC"]


@pytest.fixture
def pair_filter():
    prices = StaticPriceReference({"LTC": 0.01, "ETH": 0.05, "XRP": 0.00002, "DOGE": 0.000001})
    return TradeablePairFilter(prices, max_tx_fee=0.005, max_conf_time=30)


def names(pairs):
    return {str(pair) for pair in pairs}


class TestFeeThreshold:

    def test_fixed_fee_at_threshold_excludes_pair(self, pair_filter):
        """0.5 LTC x 0.01 == 0.005 is not below the threshold"""
        data = ReferenceData(transfer_fees={"LTC": 0.5})
        assert "LTC_BTC" not in names(pair_filter.compute(PAIRS, data))

    def test_fixed_fee_below_threshold_keeps_pair(self, pair_filter):
        data = ReferenceData(transfer_fees={"LTC": 0.001})
        assert "LTC_BTC" in names(pair_filter.compute(PAIRS, data))

    def test_fee_is_converted_with_average_rate(self, pair_filter):
        """Same nominal fee, different rates: only the expensive asset is dropped"""
        data = ReferenceData(transfer_fees={"ETH": 0.2, "XRP": 0.2})
        result = names(pair_filter.compute(PAIRS, data))
        assert "ETH_BTC" not in result
        assert "XRP_BTC" in result

    def test_percentage_fee_never_excludes(self, pair_filter):
        """Percentage fees are not rate-converted, however large"""
        data = ReferenceData(transfer_fees={"ETH": "5000%"})
        assert "ETH_BTC" in names(pair_filter.compute(PAIRS, data))

    def test_unknown_rate_does_not_exclude(self):
        pair_filter = TradeablePairFilter(StaticPriceReference(), 0.005, 30)
        data = ReferenceData(transfer_fees={"LTC": 1000})
        assert names(pair_filter.compute(["LTC_BTC"], data)) == {"LTC_BTC"}


class TestConfirmationThreshold:

    def test_confirmation_time_at_threshold_excludes_pair(self, pair_filter):
        data = ReferenceData(confirmation_times={"DOGE": 30})
        assert "DOGE_BTC" not in names(pair_filter.compute(PAIRS, data))

    def test_confirmation_time_below_threshold_keeps_pair(self, pair_filter):
        data = ReferenceData(confirmation_times={"DOGE": 29})
        assert "DOGE_BTC" in names(pair_filter.compute(PAIRS, data))


class TestAdmission:

    def test_missing_reference_data_includes_everything(self, pair_filter):
        assert names(pair_filter.compute(PAIRS, ReferenceData())) == set(PAIRS)

    def test_result_is_subset_of_raw_pairs(self, pair_filter):
        data = ReferenceData(
            transfer_fees={"LTC": 1, "ETH": "1%", "XRP": 0.1},
            confirmation_times={"ETH": 45, "DOGE": 3},
        )
        result = pair_filter.compute(PAIRS, data)
        assert result <= {TradingPair.parse(p) for p in PAIRS}
        assert names(result) == {"XRP_BTC", "DOGE_BTC"}

    def test_exclusion_applies_to_every_pair_of_the_asset(self, pair_filter):
        data = ReferenceData(confirmation_times={"LTC": 60})
        result = pair_filter.compute(["LTC_BTC", "LTC_USDT", "ETH_USDT"], data)
        assert names(result) == {"ETH_USDT"}

    def test_from_settings_reads_thresholds(self):
        class Config:
            max_tx_fee_allowed = 1.5
            max_confirmations_allowed = 10

        pair_filter = TradeablePairFilter.from_settings(StaticPriceReference(), Config())
        assert pair_filter.max_tx_fee == 1.5
        assert pair_filter.max_conf_time == 10


class TestReferenceData:

    def test_fixed_fee_ignores_amount(self):
        data = ReferenceData(transfer_fees={"BTC": 0.001})
        assert data.transfer_fee("BTC", 10) == 0.001

    def test_percentage_fee_is_used_as_raw_multiplier(self):
        """A stored "2%" on 10 coins yields 10 x 2"""
        data = ReferenceData(transfer_fees={"BTC": "2%"})
        assert data.transfer_fee("BTC", 10) == 20

    def test_unknown_lookups_return_none(self):
        data = ReferenceData()
        assert data.transfer_fee("BTC", 1) is None
        assert data.confirmation_time("BTC") is None
        assert data.coin_name("BTC") is None

    def test_reference_data_is_immutable(self):
        data = ReferenceData(names={"BTC": "Bitcoin"})
        with pytest.raises(Exception):
            data.names = {}
