"""Daily pageview/visitor chart: densification, axis scaling, geometry and live refresh."""

from .axis import step, tick_step
from .buckets import DateRange, Dataset, DayBucket, build_skeleton
from .client import PostRow, StatsClient, StatsFetchError
from .config import ChartLabels, Settings, get_settings
from .geometry import ChartLayout, Padding, compute_layout
from .interaction import HoverPhase, InteractionController
from .merge import merge_samples, parse_count
from .scheduler import RefreshScheduler
from .view import ChartView

__all__ = [
    "ChartLabels",
    "ChartLayout",
    "ChartView",
    "DateRange",
    "Dataset",
    "DayBucket",
    "HoverPhase",
    "InteractionController",
    "Padding",
    "PostRow",
    "RefreshScheduler",
    "Settings",
    "StatsClient",
    "StatsFetchError",
    "build_skeleton",
    "compute_layout",
    "get_settings",
    "merge_samples",
    "parse_count",
    "step",
    "tick_step",
]
