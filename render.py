"""
Translate chart options into plotly's declarative trace and layout dicts.
Plotly does the drawing. This module only decides what the traces look
like and where the value-axis ticks go.

Chart data is a list of (label, value) pairs; labels go on the category
(x) axis and values on the value (y) axis.
"""

import re

import numpy as np
import plotly.graph_objects as go

import style
import ticker
import util


def dash_str(pattern):
    # canvas repeats odd-length dash lists, plotly does not
    dash = style.resolve_dash(pattern)
    if not dash:
        return "solid"
    if len(dash) % 2:
        dash = dash * 2
    return ",".join(f"{util.format_float(d)}px" for d in dash)

def font_dict(css, color):
    # size and family from a css font shorthand like "bold 12px sans-serif";
    # weight and style words are dropped
    font = dict(color=color)
    m = re.search(r"(\d+(?:\.\d+)?)px\s*(.*)$", css)
    if m:
        font["size"] = float(m.group(1))
        if m.group(2):
            font["family"] = m.group(2)
    return font

def line_style(line):
    return dict(color=line.stroke_style, width=line.line_width, dash=dash_str(line.line_dash))

def marker_style(marker):
    return dict(
        symbol=marker.shape,
        size=marker.size,
        color=marker.fill_style,
        line=dict(color=marker.stroke_style, width=marker.line_width),
    )

def bar_marker(bar, values):
    fill = bar.fill_style
    if isinstance(fill, str):
        return dict(color=fill)

    # gradient: color each bar by its value along a colorscale,
    # which plotly wants anchored at 0 and 1
    stops = [list(stop) for stop in fill.stops]
    if stops[0][0] > 0:
        stops.insert(0, [0, stops[0][1]])
    if stops[-1][0] < 1:
        stops.append([1, stops[-1][1]])
    values = np.asarray(values, dtype=float)
    return dict(
        color=values.tolist(),
        colorscale=stops,
        cmin=float(np.nanmin(values)),
        cmax=float(np.nanmax(values)),
    )

def axis_style(axes, text, vmin, vmax):
    """
    Axis dict for the value axis: tick positions and labels from the
    axes locator, range spanning the first to the last tick.
    """
    ticks = axes.locator.tick_result(vmin, vmax)
    return dict(
        linecolor=axes.color,
        showline=True,
        showgrid=True,
        ticks="outside",
        tickfont=font_dict(text.font, text.fill_style),
        range=[ticks.tickvals[0], ticks.tickvals[-1]],
        **ticker.plotly_tick_array(ticks),
    )


class FigureBuilder:

    def __init__(self, options=None):
        self.opts = options or style.ChartOptions()
        self.data = []
        # bars grow from zero, so zero belongs in the value range
        self.include_zero = False

    def add_bars(self, data):
        bar = self.opts.bar_chart
        if not bar.visible or not data:
            return
        labels, values = zip(*data)
        self.data.append(go.Bar(x=list(labels), y=list(values), marker=bar_marker(bar, values)))
        self.include_zero = True

    def add_line(self, data):
        line = self.opts.line_chart
        if not line.visible or not data:
            return
        labels, values = zip(*data)
        self.data.append(go.Scatter(
            x=list(labels), y=list(values),
            mode="lines+markers",
            line=line_style(line),
            marker=marker_style(line.marker),
        ))

    @util.Timer("figure")
    def figure(self):

        if not self.data:
            return

        values = np.hstack([np.asarray(trace.y, dtype=float) for trace in self.data])
        vmin, vmax = float(np.nanmin(values)), float(np.nanmax(values))
        if self.include_zero:
            vmin, vmax = min(vmin, 0.0), max(vmax, 0.0)

        opts = self.opts
        layout = go.Layout(
            title=dict(text=opts.title, font=font_dict(opts.text.title_font, opts.text.fill_style)),
            width=opts.width,
            height=opts.height,
            plot_bgcolor=opts.background,
            paper_bgcolor=opts.background,
            font=font_dict(opts.text.font, opts.text.fill_style),
            showlegend=False,
            xaxis=dict(
                linecolor=opts.axes.color,
                showline=True,
                tickfont=font_dict(opts.text.font, opts.text.fill_style),
            ),
            yaxis=axis_style(opts.axes, opts.text, vmin, vmax),
        )
        return go.Figure(data=self.data, layout=layout)
