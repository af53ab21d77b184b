"""
Exception types raised by the aggregator.
"""


class SyncwatchError(Exception):
    """Base class for all aggregator errors."""


class TransportError(SyncwatchError):
    """Network, DNS or HTTP status failure talking to the daemon."""


class DecodeError(SyncwatchError):
    """Daemon returned JSON that does not have the expected shape."""


class ConfigError(SyncwatchError):
    """Missing or invalid startup configuration."""
