"""Unit tests for the axis tick locator."""

from __future__ import annotations

import concurrent.futures
import dataclasses
import logging
import math

import pytest

import ticker
from ticker import (
    InvalidConfiguration,
    InvalidRange,
    StepSearchExhausted,
    TickLocator,
    TickResult,
    plotly_tick_array,
)

pytestmark = pytest.mark.unit

RANGES = [
    (0, 1),
    (0, 100),
    (-1, 1),
    (3, 7.5),
    (0.13, 0.92),
    (-273.15, 1500),
    (1e9, 5e9),
    (-4e-7, -1e-7),
    (99.9, 100.1),
]

# every nice step up to the range width needs more ticks than allowed
TOO_FEW_TICKS = {
    (-1, 1, 2),
    (3, 7.5, 2),
    (0.13, 0.92, 2),
    (-273.15, 1500, 2),
    (-273.15, 1500, 3),
    (1e9, 5e9, 2),
    (-4e-7, -1e-7, 2),
    (99.9, 100.1, 2),
}


def approx(values):
    return pytest.approx(values, rel=1e-9, abs=1e-12)


def test_zero_to_hundred_uses_step_twenty() -> None:
    """Step 10 would need eleven ticks, so the search settles on 20."""

    locator = TickLocator()
    assert locator.best_step(0, 100) == 20
    assert locator.get_ticks(0, 100) == [0, 20, 40, 60, 80, 100]


def test_unit_range_uses_step_point_two() -> None:
    """The [0, 1] range is covered by six ticks 0.2 apart."""

    locator = TickLocator()
    assert locator.best_step(0, 1) == pytest.approx(0.2)
    assert locator.get_ticks(0, 1) == approx([0, 0.2, 0.4, 0.6, 0.8, 1.0])


def test_zero_max_ticks_exhausts_search() -> None:
    """No step can fit a non-empty range into zero ticks."""

    with pytest.raises(StepSearchExhausted):
        TickLocator(max_ticks=0).get_ticks(0, 100)


def test_single_tick_cannot_cover_a_wide_range() -> None:
    """Every candidate needs at least two ticks, so max_ticks=1 fails."""

    with pytest.raises(StepSearchExhausted):
        TickLocator(max_ticks=1).get_ticks(0, 100)


@pytest.mark.parametrize(
    ("vmin", "vmax", "expected"),
    [
        (-1, 1, [-1, -0.75, -0.5, -0.25, 0, 0.25, 0.5, 0.75, 1]),
        (3, 7.5, [3, 3.5, 4, 4.5, 5, 5.5, 6, 6.5, 7, 7.5]),
        (0.13, 0.92, [0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0]),
        (1e9, 5e9, [1e9, 1.5e9, 2e9, 2.5e9, 3e9, 3.5e9, 4e9, 4.5e9, 5e9]),
    ],
)
def test_known_ranges(vmin: float, vmax: float, expected: list[float]) -> None:
    """Hand-worked ranges produce the tightest nice grid."""

    assert TickLocator().get_ticks(vmin, vmax) == approx(expected)


def test_custom_steps_and_max_ticks() -> None:
    """Only the configured multipliers are considered."""

    locator = TickLocator(max_ticks=5, steps=(1, 5))
    assert locator.get_ticks(0, 100) == [0, 50, 100]


@pytest.mark.parametrize("value", [0, 3.5, -2, 1e12])
def test_degenerate_range_returns_the_value(value: float) -> None:
    """A zero-width range is labelled with a single tick."""

    assert TickLocator().get_ticks(value, value) == [value]


def test_degenerate_range_skips_step_search() -> None:
    """Even a locator that can never find a step handles a point range."""

    assert TickLocator(max_ticks=0).get_ticks(4, 4) == [4]


def test_reversed_range_is_rejected() -> None:
    """vmin above vmax is a caller error."""

    with pytest.raises(InvalidRange) as excinfo:
        TickLocator().get_ticks(5, 3)
    assert isinstance(excinfo.value, ValueError)


@pytest.mark.parametrize(
    ("vmin", "vmax"),
    [(math.nan, 1), (0, math.inf), (-math.inf, 0), (-1e308, 1e308)],
)
def test_non_finite_ranges_are_rejected(vmin: float, vmax: float) -> None:
    """NaN, infinite bounds and overflowing widths cannot be ticked."""

    with pytest.raises(InvalidRange):
        TickLocator().get_ticks(vmin, vmax)


def test_subnormal_range() -> None:
    """Ranges narrower than the smallest normal float still get ticks."""

    ticks = TickLocator().get_ticks(0, 1e-310)
    assert ticks[0] == 0
    assert ticks[-1] >= 1e-310 * (1 - ticker.TOLERANCE)
    assert 2 <= len(ticks) <= 10
    assert all(b > a for a, b in zip(ticks, ticks[1:]))


def test_range_too_narrow_to_divide() -> None:
    """A width that underflows when split into max_ticks parts cannot be ticked."""

    with pytest.raises(StepSearchExhausted):
        TickLocator().get_ticks(0, 5e-324)


@pytest.mark.parametrize(("vmin", "vmax"), RANGES)
def test_ticks_are_evenly_spaced_multiples_of_the_step(vmin: float, vmax: float) -> None:
    """Every tick is an integer multiple of the chosen step."""

    locator = TickLocator()
    step = locator.best_step(vmin, vmax)
    ticks = locator.get_ticks(vmin, vmax)
    first = round(ticks[0] / step)
    assert ticks == approx([(first + i) * step for i in range(len(ticks))])
    assert all(b > a for a, b in zip(ticks, ticks[1:]))


@pytest.mark.parametrize(("vmin", "vmax"), RANGES)
def test_ticks_bracket_the_range(vmin: float, vmax: float) -> None:
    """The first tick is at or below vmin and the last at or above vmax."""

    ticks = TickLocator().get_ticks(vmin, vmax)
    scale = max(abs(vmin), abs(vmax))
    assert ticks[0] <= vmin + ticker.TOLERANCE * scale
    assert ticks[-1] >= vmax - ticker.TOLERANCE * scale


@pytest.mark.parametrize("max_ticks", [2, 3, 5, 7, 10, 25])
@pytest.mark.parametrize(("vmin", "vmax"), RANGES)
def test_tick_count_respects_max_ticks(vmin: float, vmax: float, max_ticks: int) -> None:
    """No more than max_ticks ticks are produced."""

    locator = TickLocator(max_ticks=max_ticks)
    if (vmin, vmax, max_ticks) in TOO_FEW_TICKS:
        with pytest.raises(StepSearchExhausted):
            locator.get_ticks(vmin, vmax)
    else:
        assert 2 <= len(locator.get_ticks(vmin, vmax)) <= max_ticks


@pytest.mark.parametrize("scale", [0.1, 10, 100, 1000])
@pytest.mark.parametrize(("vmin", "vmax"), [(0, 1), (-1, 1), (3, 7.5), (0.13, 0.92)])
def test_power_of_ten_scaling(vmin: float, vmax: float, scale: float) -> None:
    """Scaling the range by a power of ten scales the ticks the same way."""

    locator = TickLocator()
    base = locator.get_ticks(vmin, vmax)
    scaled = locator.get_ticks(vmin * scale, vmax * scale)
    assert scaled == approx([t * scale for t in base])


def test_repeated_calls_are_identical() -> None:
    """A locator holds no state between calls."""

    locator = TickLocator()
    first = locator.get_ticks(-273.15, 1500)
    locator.get_ticks(0, 1)
    assert locator.get_ticks(-273.15, 1500) == first


def test_shared_locator_across_threads() -> None:
    """One immutable locator serves concurrent callers."""

    locator = TickLocator(max_ticks=8)
    expected = [locator.get_ticks(lo, hi) for lo, hi in RANGES]
    with concurrent.futures.ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda r: locator.get_ticks(*r), RANGES * 10))
    assert results == expected * 10


def test_locator_is_immutable() -> None:
    """Configuration cannot be changed after construction."""

    locator = TickLocator()
    with pytest.raises(dataclasses.FrozenInstanceError):
        locator.max_ticks = 5


def test_with_options_derives_a_new_locator() -> None:
    """with_options leaves the original untouched."""

    locator = TickLocator()
    coarse = locator.with_options(max_ticks=4)
    assert coarse.max_ticks == 4
    assert coarse.steps == locator.steps
    assert locator.max_ticks == 10
    with pytest.raises(InvalidConfiguration):
        locator.with_options(steps=[5, 2])


def test_steps_are_stored_as_a_tuple() -> None:
    """Lists are accepted and frozen so the locator stays hashable."""

    locator = TickLocator(steps=[1, 2, 5])
    assert locator.steps == (1, 2, 5)
    assert hash(locator) == hash(TickLocator(steps=(1, 2, 5)))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_ticks": -1},
        {"max_ticks": 2.5},
        {"max_ticks": True},
        {"steps": []},
        {"steps": [2, 1]},
        {"steps": [1, 1, 2]},
        {"steps": [0.5, 2]},
        {"steps": [1, 10]},
        {"steps": [1, math.nan]},
        {"steps": [1, "2"]},
    ],
)
def test_invalid_configuration_fails_fast(kwargs: dict) -> None:
    """Bad settings are rejected when the locator is built."""

    with pytest.raises(InvalidConfiguration):
        TickLocator(**kwargs)


def test_decade_cap_stops_a_runaway_search(monkeypatch: pytest.MonkeyPatch) -> None:
    """The explicit decade bound ends the search with an error."""

    monkeypatch.setattr(ticker, "MAX_DECADES", 0)
    with pytest.raises(StepSearchExhausted):
        TickLocator().get_ticks(0, 100)


def test_chosen_step_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """The search reports its choice at debug level."""

    with caplog.at_level(logging.DEBUG, logger="ticker"):
        TickLocator().get_ticks(0, 100)
    assert "step 20 for [0, 100]" in caplog.text


def test_tick_result_formats_labels() -> None:
    """Labels use the fewest decimals that show each tick."""

    result = TickLocator().tick_result(0, 1)
    assert result.ticktext == ["0", "0.2", "0.4", "0.6", "0.8", "1"]
    assert result.tickvals == approx([0, 0.2, 0.4, 0.6, 0.8, 1.0])


def test_plotly_tick_array() -> None:
    """Tick results become a plotly tickmode='array' chunk."""

    assert plotly_tick_array(TickResult([0, 5])) == {"tickmode": "array", "tickvals": [0, 5]}
    assert plotly_tick_array(TickResult([0, 5], ["0", "5"])) == {
        "tickmode": "array",
        "tickvals": [0, 5],
        "ticktext": ["0", "5"],
    }
