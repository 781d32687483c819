"""
Technical Indicator Calculations

Pure NumPy implementations of technical indicators.
All math is deterministic.

Inside this module NaN marks an index that is not yet computable. Series are
converted to Optional[float] lists (see `to_series`) before they leave the
indicator engine.
"""

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np


@dataclass
class OHLCData:
    """OHLC data arrays for calculations."""

    times: list[str]
    opens: np.ndarray
    highs: np.ndarray
    lows: np.ndarray
    closes: np.ndarray


@dataclass
class MACDResult:
    macd: np.ndarray
    signal: np.ndarray
    hist: np.ndarray


@dataclass
class BollingerResult:
    middle: np.ndarray
    upper: np.ndarray
    lower: np.ndarray
    width: np.ndarray


@dataclass
class StochasticResult:
    k: np.ndarray
    d: np.ndarray


@dataclass
class ADXResult:
    """
    Directional movement system output.

    `adx` is None for the simplified variant, which stops at the raw DX series.
    """

    adx: Optional[np.ndarray]
    plus_di: np.ndarray
    minus_di: np.ndarray
    dx: np.ndarray


@dataclass
class IchimokuResult:
    """Ichimoku lines. span_a and span_b are `shift` entries longer than the input."""

    conversion: np.ndarray
    base: np.ndarray
    span_a: np.ndarray
    span_b: np.ndarray
    lagging: np.ndarray


def _as_array(data) -> np.ndarray:
    return np.asarray(data, dtype=float)


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")


# =============================================================================
# SERIES PRIMITIVES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """
    Simple Moving Average.

    A window containing any non-finite value yields NaN rather than a mean
    over fewer values.
    """
    _check_period(period)
    data = _as_array(data)
    result = np.full(len(data), np.nan)

    for i in range(period - 1, len(data)):
        window = data[i - period + 1 : i + 1]
        if np.all(np.isfinite(window)):
            result[i] = np.mean(window)
    return result


def _seeded_smoothing(
    data: np.ndarray, period: int, step: Callable[[float, float], float]
) -> np.ndarray:
    """
    Recursive smoothing seeded with the mean of the first `period` finite values.

    Leading non-finite values are skipped, so the seed of a derived series
    (e.g. the MACD line) starts where that series becomes defined. After the
    seed, a non-finite input carries the previous value forward.
    """
    _check_period(period)
    data = _as_array(data)
    result = np.full(len(data), np.nan)

    seed_values: list[float] = []
    prev: Optional[float] = None

    for i, value in enumerate(data):
        finite = bool(np.isfinite(value))
        if prev is None:
            if finite:
                seed_values.append(float(value))
                if len(seed_values) == period:
                    prev = float(np.mean(seed_values))
                    result[i] = prev
            continue

        if finite:
            prev = step(prev, float(value))
        result[i] = prev

    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average, k = 2 / (period + 1), SMA seed."""
    _check_period(period)
    multiplier = 2 / (period + 1)
    return _seeded_smoothing(
        data, period, lambda prev, value: value * multiplier + prev * (1 - multiplier)
    )


def wilder_smooth(data: np.ndarray, period: int) -> np.ndarray:
    """Wilder's smoothing: avg = (avg * (period - 1) + value) / period, SMA seed."""
    _check_period(period)
    return _seeded_smoothing(
        data, period, lambda prev, value: (prev * (period - 1) + value) / period
    )


def rolling_std(data: np.ndarray, period: int) -> np.ndarray:
    """Population standard deviation around each window's own mean."""
    _check_period(period)
    data = _as_array(data)
    result = np.full(len(data), np.nan)

    for i in range(period - 1, len(data)):
        window = data[i - period + 1 : i + 1]
        if np.all(np.isfinite(window)):
            result[i] = np.std(window)
    return result


def rolling_max(data: np.ndarray, period: int) -> np.ndarray:
    """Highest value over the trailing window."""
    _check_period(period)
    data = _as_array(data)
    result = np.full(len(data), np.nan)

    for i in range(period - 1, len(data)):
        result[i] = np.max(data[i - period + 1 : i + 1])
    return result


def rolling_min(data: np.ndarray, period: int) -> np.ndarray:
    """Lowest value over the trailing window."""
    _check_period(period)
    data = _as_array(data)
    result = np.full(len(data), np.nan)

    for i in range(period - 1, len(data)):
        result[i] = np.min(data[i - period + 1 : i + 1])
    return result


def true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """
    True Range.

    The first bar has no previous close, so its true range is high - low.
    """
    highs, lows, closes = _as_array(highs), _as_array(lows), _as_array(closes)
    if len(closes) == 0:
        return np.array([], dtype=float)

    tr = np.empty(len(closes))
    tr[0] = highs[0] - lows[0]

    prev_close = closes[:-1]
    tr[1:] = np.maximum.reduce(
        [
            highs[1:] - lows[1:],
            np.abs(highs[1:] - prev_close),
            np.abs(lows[1:] - prev_close),
        ]
    )
    return tr


# =============================================================================
# OSCILLATORS
# =============================================================================


def _price_changes(closes: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Gains and losses aligned to `closes`; index 0 is NaN."""
    closes = _as_array(closes)
    deltas = np.full(len(closes), np.nan)
    deltas[1:] = np.diff(closes)

    gains = np.clip(deltas, 0, None)
    losses = np.clip(-deltas, 0, None)
    return gains, losses


def _rsi_from_averages(avg_gain: np.ndarray, avg_loss: np.ndarray) -> np.ndarray:
    defined = np.isfinite(avg_gain) & np.isfinite(avg_loss)

    with np.errstate(divide="ignore", invalid="ignore"):
        rs = avg_gain / avg_loss
        values = 100 - (100 / (1 + rs))

    # Zero average loss means RSI = 100 by convention
    return np.where(defined & (avg_loss == 0), 100.0, np.where(defined, values, np.nan))


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index, Wilder's method.

    Average gain/loss start as simple means of the first `period` changes and
    are then Wilder-smoothed. Defined from index `period`.
    """
    gains, losses = _price_changes(closes)
    return _rsi_from_averages(wilder_smooth(gains, period), wilder_smooth(losses, period))


def rsi_simplified(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """RSI with plain moving averages of gains/losses (Cutler's RSI)."""
    gains, losses = _price_changes(closes)
    return _rsi_from_averages(sma(gains, period), sma(losses, period))


def stochastic(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    k_period: int = 14,
    d_period: int = 3,
) -> StochasticResult:
    """
    Stochastic Oscillator.

    %K is NaN when the window's range is flat. %D is the SMA of %K.
    """
    closes = _as_array(closes)
    highest_high = rolling_max(highs, k_period)
    lowest_low = rolling_min(lows, k_period)
    price_range = highest_high - lowest_low

    with np.errstate(divide="ignore", invalid="ignore"):
        raw_k = (closes - lowest_low) / price_range * 100

    k = np.where(price_range > 0, raw_k, np.nan)
    d = sma(k, d_period)
    return StochasticResult(k=k, d=d)


# =============================================================================
# TREND / VOLATILITY COMPOSITES
# =============================================================================


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """
    MACD (Moving Average Convergence Divergence).

    The signal line is an EMA of the MACD line, seeded from the first
    `signal_period` defined MACD values.
    """
    macd_line = ema(closes, fast_period) - ema(closes, slow_period)
    signal_line = ema(macd_line, signal_period)
    return MACDResult(macd=macd_line, signal=signal_line, hist=macd_line - signal_line)


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> BollingerResult:
    """Bollinger Bands: SMA middle, +/- std_dev population standard deviations."""
    middle = sma(closes, period)
    band = std_dev * rolling_std(closes, period)

    upper = middle + band
    lower = middle - band
    return BollingerResult(middle=middle, upper=upper, lower=lower, width=upper - lower)


def atr(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> np.ndarray:
    """
    Average True Range.

    Seeded with the mean of TR[1..period]; the first bar's range is excluded
    since it has no previous close. Defined from index `period`.
    """
    tr = true_range(highs, lows, closes)
    if len(tr):
        tr[0] = np.nan
    return wilder_smooth(tr, period)


def directional_movement(
    highs: np.ndarray, lows: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """+DM and -DM aligned to the input; index 0 is NaN."""
    highs, lows = _as_array(highs), _as_array(lows)
    plus_dm = np.full(len(highs), np.nan)
    minus_dm = np.full(len(highs), np.nan)

    up_move = highs[1:] - highs[:-1]
    down_move = lows[:-1] - lows[1:]

    plus_dm[1:] = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
    minus_dm[1:] = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)
    return plus_dm, minus_dm


def _directional_index(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    tr = true_range(highs, lows, closes)
    if len(tr):
        tr[0] = np.nan
    plus_dm, minus_dm = directional_movement(highs, lows)

    smoothed_tr = wilder_smooth(tr, period)
    smoothed_plus = wilder_smooth(plus_dm, period)
    smoothed_minus = wilder_smooth(minus_dm, period)

    with np.errstate(divide="ignore", invalid="ignore"):
        plus_di = np.where(smoothed_tr > 0, 100 * smoothed_plus / smoothed_tr, np.nan)
        minus_di = np.where(smoothed_tr > 0, 100 * smoothed_minus / smoothed_tr, np.nan)

        di_sum = plus_di + minus_di
        dx = np.where(
            di_sum > 0,
            100 * np.abs(plus_di - minus_di) / di_sum,
            np.where(np.isfinite(di_sum), 0.0, np.nan),
        )

    return plus_di, minus_di, dx


def adx(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> ADXResult:
    """
    Average Directional Index.

    TR, +DM and -DM are Wilder-smoothed independently; ADX is the Wilder
    smoothing of DX, seeded with the mean of the first `period` defined DX
    values. Defined from index 2 * period - 1.
    """
    plus_di, minus_di, dx = _directional_index(highs, lows, closes, period)
    return ADXResult(
        adx=wilder_smooth(dx, period), plus_di=plus_di, minus_di=minus_di, dx=dx
    )


def dx_simplified(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> ADXResult:
    """One-shot DX without smoothing of DX itself. Not interchangeable with ADX."""
    plus_di, minus_di, dx = _directional_index(highs, lows, closes, period)
    return ADXResult(adx=None, plus_di=plus_di, minus_di=minus_di, dx=dx)


def _midpoint(highs: np.ndarray, lows: np.ndarray, period: int) -> np.ndarray:
    return (rolling_max(highs, period) + rolling_min(lows, period)) / 2


def ichimoku(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    conversion_period: int = 9,
    base_period: int = 26,
    span_b_period: int = 52,
    shift: int = 26,
) -> IchimokuResult:
    """
    Ichimoku Kinko Hyo.

    Leading spans are plotted `shift` bars ahead, so they run `shift` entries
    past the last input bar. The lagging span is the close plotted `shift`
    bars back.
    """
    if shift < 0:
        raise ValueError(f"shift must be >= 0, got {shift}")
    closes = _as_array(closes)
    n = len(closes)

    conversion = _midpoint(highs, lows, conversion_period)
    base = _midpoint(highs, lows, base_period)

    span_a = np.full(n + shift, np.nan)
    span_a[shift:] = (conversion + base) / 2

    span_b = np.full(n + shift, np.nan)
    span_b[shift:] = _midpoint(highs, lows, span_b_period)

    lagging = np.full(n, np.nan)
    if shift < n:
        lagging[: n - shift] = closes[shift:]

    return IchimokuResult(
        conversion=conversion, base=base, span_a=span_a, span_b=span_b, lagging=lagging
    )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def to_series(arr: Optional[np.ndarray]) -> Optional[list[Optional[float]]]:
    """Convert a NaN-padded array into a list with None for undefined entries."""
    if arr is None:
        return None
    return [float(v) if np.isfinite(v) else None for v in arr]


def value_at(arr: Optional[np.ndarray], index: int = -1) -> Optional[float]:
    """Value at `index`, or None when the index is not computable."""
    if arr is None or len(arr) == 0:
        return None
    value = arr[index]
    return float(value) if np.isfinite(value) else None
