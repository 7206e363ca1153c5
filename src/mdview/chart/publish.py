"""Feed a validated loader into a chart renderer."""

from mdview.chart.interface import ChartRenderer
from mdview.loaders.loader import DataLoader
from mdview.logging import get_logger

logger = get_logger(__name__)


def publish(loader: DataLoader, renderer: ChartRenderer) -> bool:
    """Publish every series of ``loader`` to ``renderer``.

    Returns:
        False without touching the renderer when the loader is invalid,
        True once the renderer was asked to show the chart.
    """
    if not loader.is_valid:
        logger.warning("chart_publish_skipped", reason=loader.reason)
        return False

    renderer.add_segments(loader.time_calculator(), loader.index_table)
    renderer.set_time_tick(loader.time_tick)
    renderer.set_horizontal_range(loader.display_range)

    point_count = 0
    for series in loader.series:
        sink = renderer.create_series(series.axis_centre, series.name, series.group)
        for point in series.points:
            sink.append(point.index, float(point.value))
        sink.commit()
        point_count += len(series.points)

    renderer.show()
    logger.info(
        "chart_published",
        series=len(loader.series),
        points=point_count,
        total_ticks=loader.index_table[-1],
    )
    return True
