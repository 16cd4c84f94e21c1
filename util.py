import contextlib
import logging
import os
import pathlib
import time

log = logging.getLogger(__name__)

def resource(fn):
    return  str(pathlib.Path(__file__).resolve().parent / fn)


#
# timing
#

def timing_enabled():
    # same convention as the options file: unset or -1 means off
    try:
        return int(os.getenv("CHARTTICKS_TIMING", "-1")) > 0
    except ValueError:
        return False

# usable both as "with Timer(name):" and as "@Timer(name)"
class Timer(contextlib.ContextDecorator):

    def __init__(self, name):
        self.name = name
        self.elapsed = None

    def _recreate_cm(self):
        # each decorated call times itself
        return Timer(self.name)

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *exc):
        self.elapsed = time.perf_counter() - self.start
        if timing_enabled():
            log.info("%s: %.1f ms", self.name, self.elapsed * 1000)
        return False


#
# numbers
#

def format_float(value, max_decimals=6):
    """
    Format value with the fewest decimal places that represent it
    to within 1e-6, using at most max_decimals places.
    """
    decimals = 0
    for decimals in range(max_decimals + 1):
        scaled = value * 10 ** decimals
        if abs(scaled - round(scaled)) < 1e-6:
            break
    s = f"{value:.{decimals}f}"
    # -0.0 and tiny negatives rounded to zero
    if s.lstrip("-").strip("0.") == "":
        s = s.lstrip("-")
    return s

def clamp(value, lo, hi):
    return max(lo, min(hi, value))

def binary_search_min(lbound, ubound, predicate):
    """
    Smallest integer in [lbound, ubound] for which predicate holds,
    assuming predicate is monotone (False...False True...True).
    Returns ubound if no smaller value qualifies.
    """
    while lbound < ubound:
        mid = (lbound + ubound) // 2
        if predicate(mid):
            ubound = mid
        else:
            lbound = mid + 1
    return lbound
