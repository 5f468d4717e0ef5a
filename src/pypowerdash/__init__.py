"""pypowerdash - Async Python client keeping power telemetry dashboards in sync."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pypowerdash")
except PackageNotFoundError:
    __version__ = "0+local"
from pypowerdash.config import PowerDashConfig
from pypowerdash.dashboard import DashboardSnapshot, PowerDashboard, SourceView
from pypowerdash.exceptions import (
    PowerDashConfigError,
    PowerDashError,
    PowerDashFilterError,
    PowerDashTransportError,
)
from pypowerdash.ingestion.normalize import unwrap_envelope
from pypowerdash.models import DailyUsage, FilterState, LatestReading, Metric, SeriesPoint, TimeWindows
from pypowerdash.sync.cycle import FetchCycle, FetchStatus
from pypowerdash.sync.derived import latest_by_metric, total_usage
from pypowerdash.sync.requests import RequestDescriptor
from pypowerdash.sync.synchronizer import DataSource, SourceSynchronizer

__all__ = [
    "__version__",
    "DailyUsage",
    "DashboardSnapshot",
    "DataSource",
    "FetchCycle",
    "FetchStatus",
    "FilterState",
    "LatestReading",
    "Metric",
    "PowerDashConfig",
    "PowerDashConfigError",
    "PowerDashError",
    "PowerDashFilterError",
    "PowerDashTransportError",
    "PowerDashboard",
    "RequestDescriptor",
    "SeriesPoint",
    "SourceSynchronizer",
    "SourceView",
    "TimeWindows",
    "latest_by_metric",
    "total_usage",
    "unwrap_envelope",
]
