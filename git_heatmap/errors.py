"""
Exceptions raised while building a heatmap.
"""


class HeatmapError(Exception):
    """Base exception for heatmap errors."""

    pass


class NoHistoryAvailable(HeatmapError):
    """The history tool failed and produced no usable output."""

    pass


class InvalidVaultLocation(HeatmapError):
    """No accessible working directory for the history tool."""

    pass


class DetailFetchFailed(HeatmapError):
    """The per-date detail query failed."""

    pass


class MalformedConfigValue(HeatmapError, ValueError):
    """An override in an embedded configuration block is not usable."""

    pass
