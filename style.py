"""
Declarative chart options: colors, fonts, line dashes and markers, plus
the tick settings for the value axis. Options validate on assignment, and
can be built from plain dicts or YAML files.

Colors are hex strings ("#1f77b4") or CSS color names.
"""

import logging
import os
from collections.abc import Mapping

import param
import yaml

import ticker

log = logging.getLogger(__name__)


class OptionsError(ValueError):
    pass


DASH_PATTERNS = {
    "solid": [],
    "dashed": [5],
    "dotted": [2, 5],
    "dashDotted": [5, 5, 2, 5],
}

def resolve_dash(pattern):
    """
    Dash pattern as a list of segment lengths. pattern is either a name
    from DASH_PATTERNS or an explicit list of non-negative numbers.
    """
    if isinstance(pattern, str):
        if pattern not in DASH_PATTERNS:
            raise OptionsError(f"unknown dash pattern {pattern!r}, expected one of {', '.join(DASH_PATTERNS)}")
        return list(DASH_PATTERNS[pattern])
    if isinstance(pattern, (list, tuple)):
        if not all(isinstance(x, (int, float)) and not isinstance(x, bool) and x >= 0 for x in pattern):
            raise OptionsError(f"dash lengths must be non-negative numbers, got {pattern!r}")
        return list(pattern)
    raise OptionsError(f"dash pattern must be a name or a list, got {pattern!r}")


class Options(param.Parameterized):

    # option name -> Options subclass for nested groups
    _nested = {}

    @classmethod
    def from_dict(cls, data):
        if isinstance(data, cls):
            return data
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise OptionsError(f"{cls.__name__} must be a mapping, got {type(data).__name__}")

        known = set(cls.param.objects(instance=False)) - {"name"}
        unknown = set(data) - known
        if unknown:
            raise OptionsError(f"unknown {cls.__name__} option(s): {', '.join(sorted(unknown))}")

        params = dict(data)
        for key, sub in cls._nested.items():
            if key in params:
                params[key] = sub.from_dict(params[key])
        try:
            return cls(**params)
        except OptionsError:
            raise
        except (ValueError, TypeError) as oops:
            raise OptionsError(f"{cls.__name__}: {oops}") from oops


class Gradient(Options):

    stops = param.List(default=[(0, "#5470c6"), (1, "#91cc75")],
                       doc="(offset, color) pairs, offsets ascending in [0, 1]")

    @classmethod
    def from_dict(cls, data):
        # also accepts {"stops": [{"offset": 0, "color": "red"}, ...]}
        if isinstance(data, Mapping) and isinstance(data.get("stops"), list):
            stops = []
            for stop in data["stops"]:
                if isinstance(stop, Mapping):
                    stop = (stop.get("offset"), stop.get("color"))
                stops.append(tuple(stop) if isinstance(stop, list) else stop)
            data = {**data, "stops": stops}
        return super().from_dict(data)

    @param.depends("stops", watch=True, on_init=True)
    def _check_stops(self):
        if not self.stops:
            raise OptionsError("gradient needs at least one stop")
        last = 0.0
        for stop in self.stops:
            if not isinstance(stop, (list, tuple)) or len(stop) != 2:
                raise OptionsError(f"gradient stop must be (offset, color), got {stop!r}")
            offset, color = stop
            if isinstance(offset, bool) or not isinstance(offset, (int, float)) or not 0 <= offset <= 1:
                raise OptionsError(f"gradient offset {offset!r} is not in [0, 1]")
            if offset < last:
                raise OptionsError(f"gradient offsets must be ascending, got {[s[0] for s in self.stops]}")
            if not isinstance(color, str):
                raise OptionsError(f"gradient color must be a string, got {color!r}")
            last = offset


class AxesOptions(Options):

    color = param.Color(default="#333333", allow_named=True)
    max_ticks = param.Integer(default=10, bounds=(1, None), doc="most ticks on the value axis")
    steps = param.List(default=list(ticker.DEFAULT_STEPS), item_type=(int, float),
                       doc="ascending tick step multipliers in [1, 10)")

    @param.depends("max_ticks", "steps", watch=True, on_init=True)
    def _check_locator(self):
        self.locator

    @property
    def locator(self):
        # rebuilt on every access, steps may have been edited in place
        try:
            return ticker.TickLocator(max_ticks=self.max_ticks, steps=self.steps)
        except ticker.InvalidConfiguration as oops:
            raise OptionsError(str(oops)) from oops


class BarChartOptions(Options):

    visible = param.Boolean(default=True)
    fill_style = param.ClassSelector(class_=(str, Gradient), default="#5470c6",
                                     doc="color string or Gradient")

    @classmethod
    def from_dict(cls, data):
        if isinstance(data, Mapping) and isinstance(data.get("fill_style"), Mapping):
            data = {**data, "fill_style": Gradient.from_dict(data["fill_style"])}
        return super().from_dict(data)


class MarkerOptions(Options):

    shape = param.Selector(default="circle", objects=["circle", "square"])
    size = param.Number(default=6, bounds=(0, None))
    fill_style = param.Color(default="#ffffff", allow_named=True)
    stroke_style = param.Color(default="#91cc75", allow_named=True)
    line_width = param.Number(default=2, bounds=(0, None))


class LineChartOptions(Options):

    _nested = {"marker": MarkerOptions}

    visible = param.Boolean(default=True)
    stroke_style = param.Color(default="#91cc75", allow_named=True)
    line_width = param.Number(default=2, bounds=(0, None))
    line_dash = param.ClassSelector(class_=(str, list), default="solid",
                                    doc="name from DASH_PATTERNS or list of segment lengths")
    marker = param.ClassSelector(class_=MarkerOptions)

    def __init__(self, **params):
        params.setdefault("marker", MarkerOptions())
        super().__init__(**params)

    @param.depends("line_dash", watch=True, on_init=True)
    def _check_dash(self):
        resolve_dash(self.line_dash)

    @property
    def dash(self):
        return resolve_dash(self.line_dash)


class TextOptions(Options):

    font = param.String(default="12px sans-serif")
    title_font = param.String(default="bold 16px sans-serif")
    fill_style = param.Color(default="#333333", allow_named=True)


class ChartOptions(Options):

    _nested = {
        "axes": AxesOptions,
        "bar_chart": BarChartOptions,
        "line_chart": LineChartOptions,
        "text": TextOptions,
    }

    title = param.String(default="")
    width = param.Integer(default=800, bounds=(1, None))
    height = param.Integer(default=600, bounds=(1, None))
    background = param.Color(default="#ffffff", allow_named=True)
    axes = param.ClassSelector(class_=AxesOptions)
    bar_chart = param.ClassSelector(class_=BarChartOptions)
    line_chart = param.ClassSelector(class_=LineChartOptions)
    text = param.ClassSelector(class_=TextOptions)

    def __init__(self, **params):
        for key, sub in self._nested.items():
            params.setdefault(key, sub())
        super().__init__(**params)


#
# loading
#

def load_options(path):
    log.debug("loading chart options from %s", path)
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as oops:
            raise OptionsError(f"{path}: {oops}") from oops
    return ChartOptions.from_dict(data)

def default_options():
    path = os.getenv("CHARTTICKS_OPTIONS")
    if path:
        return load_options(path)
    return ChartOptions()
