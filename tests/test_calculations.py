"""Tests for the NumPy indicator kernel.

Property-based checks use hypothesis; known-value checks are worked by hand.
"""

import math

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fxhelper.services.indicators.calculations import (
    sma,
    ema,
    wilder_smooth,
    rolling_std,
    rolling_max,
    rolling_min,
    true_range,
    rsi,
    rsi_simplified,
    stochastic,
    macd,
    bollinger_bands,
    atr,
    adx,
    dx_simplified,
    directional_movement,
    ichimoku,
    to_series,
    value_at,
)


# ============================================================================
# Strategies
# ============================================================================

finite_prices = st.floats(min_value=0.5, max_value=500.0, allow_nan=False, allow_infinity=False)


@st.composite
def price_series(draw, min_length: int = 30, max_length: int = 150):
    """Random-walk closes with realistic percentage moves."""
    length = draw(st.integers(min_value=min_length, max_value=max_length))
    base = draw(st.floats(min_value=0.5, max_value=200.0))
    changes = draw(
        st.lists(
            st.sampled_from([-0.02, -0.01, -0.005, 0.0, 0.005, 0.01, 0.02]),
            min_size=length - 1,
            max_size=length - 1,
        )
    )
    prices = [base]
    for change in changes:
        prices.append(max(0.01, prices[-1] * (1 + change)))
    return prices


@st.composite
def ohlc_series(draw, min_length: int = 30, max_length: int = 120):
    """Consistent bars: low <= min(open, close), high >= max(open, close)."""
    closes = draw(price_series(min_length, max_length))
    highs, lows = [], []
    prev = closes[0]
    for close in closes:
        wick_up = draw(st.floats(min_value=0.0, max_value=0.01))
        wick_down = draw(st.floats(min_value=0.0, max_value=0.01))
        highs.append(max(prev, close) * (1 + wick_up))
        lows.append(min(prev, close) * (1 - wick_down))
        prev = close
    return np.array(highs), np.array(lows), np.array(closes)


def defined(values):
    return values[np.isfinite(values)]


# ============================================================================
# Series primitives
# ============================================================================


class TestSMA:
    @given(data=st.lists(finite_prices, min_size=1, max_size=80), raw_period=st.integers(1, 80))
    @settings(max_examples=100, deadline=None)
    def test_alignment_and_window_mean(self, data, raw_period):
        period = min(raw_period, len(data))
        result = sma(data, period)

        assert len(result) == len(data)
        assert np.all(np.isnan(result[: period - 1]))
        for i in range(period - 1, len(data)):
            assert result[i] == pytest.approx(np.mean(data[i - period + 1 : i + 1]))

    def test_window_with_non_finite_value_is_undefined(self):
        result = sma([1.0, 2.0, np.nan, 4.0, 5.0, 6.0], 2)

        assert result[1] == pytest.approx(1.5)
        assert np.isnan(result[2])
        assert np.isnan(result[3])
        assert result[4] == pytest.approx(4.5)

    def test_period_must_be_positive(self):
        with pytest.raises(ValueError):
            sma([1.0, 2.0], 0)

    @pytest.mark.parametrize("smoother", [ema, wilder_smooth])
    @pytest.mark.parametrize("period", [0, -1])
    def test_smoothing_rejects_bad_period(self, smoother, period):
        with pytest.raises(ValueError):
            smoother([1.0, 2.0, 3.0], period)


class TestEMA:
    def test_seed_is_simple_average(self):
        result = ema([2.0, 4.0, 6.0, 8.0], 3)

        assert np.isnan(result[0]) and np.isnan(result[1])
        assert result[2] == pytest.approx(4.0)
        # k = 0.5
        assert result[3] == pytest.approx(8.0 * 0.5 + 4.0 * 0.5)

    @given(value=finite_prices, period=st.integers(1, 30), extra=st.integers(0, 30))
    @settings(max_examples=100, deadline=None)
    def test_constant_series_converges_to_value(self, value, period, extra):
        result = ema([value] * (period + extra), period)

        assert np.all(np.isnan(result[: period - 1]))
        for v in result[period - 1 :]:
            assert v == pytest.approx(value, rel=1e-12)

    def test_non_finite_input_carries_previous_value(self):
        result = ema([1.0, 1.0, 3.0, np.nan, 5.0], 2)
        k = 2 / 3

        expected_2 = 3.0 * k + 1.0 * (1 - k)
        assert result[2] == pytest.approx(expected_2)
        assert result[3] == pytest.approx(expected_2)
        assert result[4] == pytest.approx(5.0 * k + expected_2 * (1 - k))

    def test_leading_undefined_values_delay_the_seed(self):
        result = ema([np.nan, np.nan, 1.0, 2.0, 3.0], 2)

        assert np.all(np.isnan(result[:3]))
        assert result[3] == pytest.approx(1.5)


class TestWilderSmoothing:
    def test_recursive_rule(self):
        result = wilder_smooth([np.nan, 1.0, 3.0, 5.0, 9.0], 2)

        assert np.isnan(result[1])
        assert result[2] == pytest.approx(2.0)
        assert result[3] == pytest.approx((2.0 * 1 + 5.0) / 2)
        assert result[4] == pytest.approx((3.5 * 1 + 9.0) / 2)


class TestRollingWindows:
    def test_population_std_uses_window_mean(self):
        result = rolling_std([1.0, 2.0, 3.0, 4.0, 10.0], 4)

        assert np.all(np.isnan(result[:3]))
        assert result[3] == pytest.approx(math.sqrt(1.25))
        assert result[4] == pytest.approx(np.std([2.0, 3.0, 4.0, 10.0]))

    def test_rolling_max_min(self):
        data = [3.0, 1.0, 4.0, 1.0, 5.0]

        assert to_series(rolling_max(data, 3)) == [None, None, 4.0, 4.0, 5.0]
        assert to_series(rolling_min(data, 3)) == [None, None, 1.0, 1.0, 1.0]


class TestTrueRange:
    def test_first_bar_is_high_minus_low(self):
        tr = true_range([10.0, 12.0], [9.0, 11.5], [9.5, 12.0])

        assert tr[0] == pytest.approx(1.0)
        # gap up: |12 - 9.5| dominates
        assert tr[1] == pytest.approx(2.5)

    def test_empty_input(self):
        assert len(true_range([], [], [])) == 0


# ============================================================================
# Oscillators
# ============================================================================


class TestRSI:
    def test_wilder_known_values(self):
        # deltas: +1, -1, +1, +1
        result = rsi([1.0, 2.0, 1.0, 2.0, 3.0], 2)

        assert np.isnan(result[0]) and np.isnan(result[1])
        assert result[2] == pytest.approx(50.0)
        assert result[3] == pytest.approx(75.0)
        assert result[4] == pytest.approx(87.5)

    def test_simplified_uses_plain_averages(self):
        result = rsi_simplified([1.0, 2.0, 1.0, 2.0, 3.0], 2)

        assert result[2] == pytest.approx(50.0)
        assert result[3] == pytest.approx(50.0)
        assert result[4] == pytest.approx(100.0)

    @given(prices=price_series())
    @settings(max_examples=100, deadline=None)
    def test_bounded(self, prices):
        for values in (rsi(prices, 14), rsi_simplified(prices, 14)):
            assert np.all(np.isnan(values[:14]))
            for v in defined(values):
                assert 0.0 <= v <= 100.0

    def test_constant_series_is_100(self):
        result = rsi([1.5] * 30, 14)

        assert np.all(np.isnan(result[:14]))
        assert np.all(result[14:] == 100.0)


class TestStochastic:
    @given(bars=ohlc_series())
    @settings(max_examples=100, deadline=None)
    def test_bounded_when_range_is_not_flat(self, bars):
        highs, lows, closes = bars
        result = stochastic(highs, lows, closes, 14, 3)
        highest = rolling_max(highs, 14)
        lowest = rolling_min(lows, 14)

        for i in range(13, len(closes)):
            if highest[i] > lowest[i]:
                assert -1e-9 <= result.k[i] <= 100.0 + 1e-9
            else:
                assert np.isnan(result.k[i])

    def test_flat_range_is_undefined(self):
        flat = [1.0] * 20
        result = stochastic(flat, flat, flat, 14, 3)

        assert np.all(np.isnan(result.k))
        assert np.all(np.isnan(result.d))

    def test_d_is_sma_of_k(self):
        highs = np.array([2.0, 3.0, 4.0, 5.0, 6.0])
        lows = highs - 2.0
        closes = highs - 0.5
        result = stochastic(highs, lows, closes, 2, 2)

        assert result.d[2] == pytest.approx((result.k[1] + result.k[2]) / 2)


# ============================================================================
# Composites
# ============================================================================


class TestMACD:
    @given(prices=price_series(min_length=40))
    @settings(max_examples=100, deadline=None)
    def test_histogram_is_line_minus_signal(self, prices):
        result = macd(prices, 12, 26, 9)

        both = np.isfinite(result.macd) & np.isfinite(result.signal)
        assert np.allclose(result.hist[both], result.macd[both] - result.signal[both])

    def test_signal_starts_after_slow_plus_signal_periods(self):
        prices = [1.0 + 0.01 * i for i in range(40)]
        result = macd(prices, 12, 26, 9)

        assert np.isnan(result.macd[24]) and np.isfinite(result.macd[25])
        assert np.isnan(result.signal[32]) and np.isfinite(result.signal[33])
        assert result.signal[33] == pytest.approx(np.mean(result.macd[25:34]))


class TestBollinger:
    @given(prices=price_series(), std_mult=st.floats(min_value=0.1, max_value=4.0))
    @settings(max_examples=100, deadline=None)
    def test_band_ordering(self, prices, std_mult):
        result = bollinger_bands(prices, 20, std_mult)

        ok = np.isfinite(result.middle)
        assert np.all(np.isnan(result.middle[:19]))
        assert np.all(result.upper[ok] >= result.middle[ok])
        assert np.all(result.middle[ok] >= result.lower[ok])
        assert np.allclose(result.width[ok], result.upper[ok] - result.lower[ok])


class TestATR:
    def test_seed_excludes_first_bar(self):
        highs = [10.0, 11.0, 12.0, 13.0]
        lows = [9.0, 10.0, 11.0, 12.0]
        closes = [9.5, 10.5, 11.5, 12.5]
        result = atr(highs, lows, closes, 2)

        assert np.isnan(result[1])
        # TR[1] = TR[2] = 1.5; including TR[0] = 1.0 would give 1.25
        assert result[2] == pytest.approx(1.5)
        assert result[3] == pytest.approx(1.5)

    @given(bars=ohlc_series())
    @settings(max_examples=100, deadline=None)
    def test_non_negative(self, bars):
        highs, lows, closes = bars
        result = atr(highs, lows, closes, 14)

        assert np.all(np.isnan(result[:14]))
        assert np.all(defined(result) >= 0)


class TestADX:
    def test_directional_movement_rules(self):
        plus_dm, minus_dm = directional_movement([10.0, 11.0, 11.5, 11.0], [9.0, 9.5, 8.0, 8.5])

        assert np.isnan(plus_dm[0]) and np.isnan(minus_dm[0])
        assert plus_dm[1] == pytest.approx(1.0) and minus_dm[1] == 0.0
        # down move 1.5 beats up move 0.5
        assert plus_dm[2] == 0.0 and minus_dm[2] == pytest.approx(1.5)
        assert plus_dm[3] == 0.0 and minus_dm[3] == 0.0

    @given(bars=ohlc_series(min_length=40))
    @settings(max_examples=50, deadline=None)
    def test_standard_starts_at_twice_the_period(self, bars):
        highs, lows, closes = bars
        result = adx(highs, lows, closes, 14)

        assert np.all(np.isnan(result.adx[:27]))
        assert np.all(np.isnan(result.dx[:14]))
        for values in (result.adx, result.dx, result.plus_di, result.minus_di):
            assert np.all((defined(values) >= 0) & (defined(values) <= 100 + 1e-9))

    def test_simplified_variant_has_no_adx(self):
        highs = np.array([1.0 + 0.01 * i for i in range(40)])
        lows = highs - 0.02
        closes = highs - 0.01

        standard = adx(highs, lows, closes, 14)
        simplified = dx_simplified(highs, lows, closes, 14)

        assert simplified.adx is None
        assert np.allclose(standard.dx[14:], simplified.dx[14:])

    def test_strong_uptrend(self):
        highs = np.array([1.0 + 0.01 * i for i in range(40)])
        lows = highs - 0.02
        closes = highs - 0.01
        result = adx(highs, lows, closes, 14)

        assert result.adx[-1] == pytest.approx(100.0)
        assert result.minus_di[-1] == 0.0

    def test_flat_market_is_undefined(self):
        flat = np.full(40, 1.0)
        result = adx(flat, flat, flat, 14)

        assert np.all(np.isnan(result.plus_di))
        assert np.all(np.isnan(result.adx))


class TestIchimoku:
    def test_spans_extend_past_input(self):
        n, shift = 60, 26
        highs = np.array([1.0 + 0.01 * i for i in range(n)])
        lows = highs - 0.02
        closes = highs - 0.01

        result = ichimoku(highs, lows, closes, 9, 26, 52, shift)

        assert len(result.conversion) == n
        assert len(result.span_a) == n + shift
        assert len(result.span_b) == n + shift
        assert len(result.lagging) == n

        i = 40
        assert result.conversion[i] == pytest.approx((highs[i] + lows[i - 8]) / 2)
        assert result.span_a[i + shift] == pytest.approx(
            (result.conversion[i] + result.base[i]) / 2
        )
        assert np.all(np.isnan(result.span_b[: shift + 51]))
        assert np.isfinite(result.span_b[-1])
        assert result.lagging[0] == closes[shift]
        assert np.all(np.isnan(result.lagging[n - shift :]))

    def test_shift_longer_than_input(self):
        result = ichimoku([2.0] * 5, [1.0] * 5, [1.5] * 5, 2, 3, 4, 10)

        assert len(result.span_a) == 15
        assert np.all(np.isnan(result.lagging))


# ============================================================================
# Utilities
# ============================================================================


class TestConversion:
    def test_to_series_maps_nan_to_none(self):
        assert to_series(np.array([np.nan, 1.5, np.inf, 0.0])) == [None, 1.5, None, 0.0]
        assert to_series(None) is None

    def test_value_at(self):
        values = np.array([1.0, np.nan, 3.0])

        assert value_at(values) == 3.0
        assert value_at(values, 1) is None
        assert value_at(None) is None
        assert value_at(np.array([])) is None
