from mdview.chart.interface import ChartRenderer, SeriesSink
from mdview.chart.publish import publish
from mdview.chart.recording import ChartSnapshot, RecordedSeries, RecordingRenderer

__all__ = [
    "ChartRenderer",
    "ChartSnapshot",
    "RecordedSeries",
    "RecordingRenderer",
    "SeriesSink",
    "publish",
]
