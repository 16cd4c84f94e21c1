#
# Axis tick locator: pick a short run of evenly spaced "round" values
# that brackets a numeric range as tightly as possible
#

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import util

log = logging.getLogger(__name__)

# absorbs floating point noise at bucket boundaries
TOLERANCE = 1e-6

# float64 covers fewer decades than this, so a well-formed search never reaches it
MAX_DECADES = 640

DEFAULT_STEPS = (1, 2, 2.5, 5)


# ---------- errors ----------

class TickerError(Exception):
    pass

class InvalidRange(TickerError, ValueError):
    pass

class InvalidConfiguration(TickerError, ValueError):
    pass

class StepSearchExhausted(TickerError, RuntimeError):
    pass


# ---------- helpers ----------

def _bounds(vmin: float, vmax: float, step: float) -> Tuple[int, int]:
    # index of the first tick at or below vmin and the last at or above vmax
    lbound = math.floor(vmin / step + TOLERANCE)
    ubound = math.ceil(vmax / step - TOLERANCE)
    return lbound, ubound

def _check_steps(steps: Sequence[float]) -> None:
    if len(steps) == 0:
        raise InvalidConfiguration("steps must not be empty")
    for step in steps:
        if isinstance(step, bool) or not isinstance(step, (int, float)):
            raise InvalidConfiguration(f"step {step!r} is not a number")
        if not (math.isfinite(step) and 1 <= step < 10):
            raise InvalidConfiguration(f"step {step!r} is not in [1, 10)")
    # the early return in best_step relies on this
    for a, b in zip(steps, steps[1:]):
        if not a < b:
            raise InvalidConfiguration(f"steps must be strictly ascending, got {list(steps)}")


# ---------- public API ----------

@dataclass(frozen=True)
class TickResult:
    tickvals: List[float]
    ticktext: Optional[List[str]] = None


@dataclass(frozen=True)
class TickLocator:
    """
    Finds ticks for a range using step sizes drawn from
    {s * 10^k : s in steps, k integer}.

    Instances are immutable, so one locator can be shared freely between
    threads. Use with_options to derive a differently configured one.
    """

    max_ticks: int = 10
    steps: Tuple[float, ...] = DEFAULT_STEPS

    def __post_init__(self):
        if isinstance(self.max_ticks, bool) or not isinstance(self.max_ticks, int):
            raise InvalidConfiguration(f"max_ticks must be an integer, got {self.max_ticks!r}")
        if self.max_ticks < 0:
            raise InvalidConfiguration(f"max_ticks must not be negative, got {self.max_ticks}")
        # accept any sequence, store a tuple so the instance stays hashable
        object.__setattr__(self, "steps", tuple(self.steps))
        _check_steps(self.steps)

    def with_options(self, **changes) -> "TickLocator":
        return dataclasses.replace(self, **changes)

    def get_ticks(self, vmin: float, vmax: float) -> List[float]:
        """
        Ascending ticks spaced by one step, the first at or below vmin
        and the last at or above vmax. A degenerate range gives [vmin].
        """
        if not (math.isfinite(vmin) and math.isfinite(vmax)):
            raise InvalidRange(f"range bounds must be finite, got [{vmin}, {vmax}]")
        if vmin > vmax:
            raise InvalidRange(f"vmin must be less than or equal to vmax, got [{vmin}, {vmax}]")
        if vmin == vmax:
            return [vmin]

        step = self.best_step(vmin, vmax)
        lbound, ubound = _bounds(vmin, vmax, step)
        return [i * step for i in range(lbound, ubound + 1)]

    def best_step(self, vmin: float, vmax: float) -> float:
        """
        Step size of at most max_ticks ticks whose grid covers
        [vmin, vmax] with the shortest total length.
        """
        if self.max_ticks < 1:
            raise StepSearchExhausted(f"no step can produce at most {self.max_ticks} ticks")

        span = vmax - vmin
        if not math.isfinite(span):
            raise InvalidRange(f"range [{vmin}, {vmax}] is too wide")

        # decade holding a step of one max_ticks-th of the range
        raw_step = span / self.max_ticks
        if raw_step == 0:
            raise StepSearchExhausted(f"range [{vmin}, {vmax}] is too narrow for {self.max_ticks} ticks")
        multiplier = 10.0 ** math.floor(math.log10(raw_step))

        best_step, best_length = None, math.inf

        # step_size grows with both the multiplier and the ascending steps,
        # so it passes span within a few decades and ends the search
        for _ in range(MAX_DECADES):
            for step in self.steps:
                step_size = multiplier * step
                if step_size > span:
                    if best_step is None:
                        raise StepSearchExhausted(
                            f"no step fits [{vmin}, {vmax}] in {self.max_ticks} ticks"
                        )
                    log.debug("step %g for [%g, %g]", best_step, vmin, vmax)
                    return best_step

                lbound, ubound = _bounds(vmin, vmax, step_size)
                tick_count = ubound - lbound + 1
                if tick_count > self.max_ticks:
                    continue

                # ties keep the earlier, smaller step
                length = tick_count * step_size
                if best_length > length + TOLERANCE:
                    best_step, best_length = step_size, length
            multiplier *= 10

        raise StepSearchExhausted(f"step search for [{vmin}, {vmax}] gave up after {MAX_DECADES} decades")

    def tick_result(self, vmin: float, vmax: float) -> TickResult:
        ticks = self.get_ticks(vmin, vmax)
        return TickResult(ticks, [util.format_float(t) for t in ticks])


# ---------- convenience for Plotly ----------

def plotly_tick_array(ticks: TickResult) -> dict:
    """
    Build a Plotly axis dict chunk for tickmode='array'.
    """
    d = {"tickmode": "array", "tickvals": ticks.tickvals}
    if ticks.ticktext is not None:
        d["ticktext"] = ticks.ticktext
    return d
