"""
Aggregator state shared by the reconcile and render steps.
"""
from .directory import DirectoryCache
from .models import PendingTable


class SyncState:
    """Everything the driving loop owns: pending transfers, names and the event watermark."""

    def __init__(self):
        self.pending: PendingTable = {}
        self.directory: DirectoryCache = DirectoryCache()
        self.since: int = 0

    def pending_count(self) -> int:
        """Number of (device, folder) entries still syncing."""
        return sum(len(folders) for folders in self.pending.values())
