"""
Event reconciliation for the Syncthing status aggregator.
Folds batches of daemon events into the pending-transfer table.
"""
import logging
from typing import Iterable, Union

from .config import COMPLETE_PCT
from .models import (
    ConnectionsResponse,
    DeviceDisconnectedEvent,
    FolderCompletionEvent,
    FolderProgress,
    PendingTable,
)
from .directory import DirectoryCache
from .state import SyncState


# Configure logger
logger = logging.getLogger(__name__)

EventType = Union[FolderCompletionEvent, DeviceDisconnectedEvent]


def needs_refresh(events: Iterable[EventType], directory: DirectoryCache) -> bool:
    """
    Check whether any FolderCompletion event names an uncached device or folder.

    Args:
        events: Batch of events about to be applied
        directory: Current name cache

    Returns:
        True if the directory should be refreshed before applying the batch
    """
    return any(
        not directory.knows(event.data.device, event.data.folder)
        for event in events
        if isinstance(event, FolderCompletionEvent)
    )


def apply_event(pending: PendingTable, event: EventType) -> None:
    """
    Apply a single event to the pending table in place.

    A completed folder is removed from its device's row, leaving the row in
    place even when it becomes empty. Any other completion value is stored
    as-is, including values lower than the previous one. A disconnect drops
    the device's whole row.
    """
    if isinstance(event, DeviceDisconnectedEvent):
        pending.pop(event.data.id, None)
        return

    data = event.data
    if data.completion == COMPLETE_PCT:
        row = pending.get(data.device)
        if row is not None:
            row.pop(data.folder, None)
    else:
        pending.setdefault(data.device, {})[data.folder] = FolderProgress(
            data.completion, data.need_bytes
        )


def prune_disconnected(pending: PendingTable, connections: ConnectionsResponse) -> None:
    """
    Drop rows for devices the daemon reports as not connected.

    Devices missing from the response are left alone.
    """
    for device_id, info in connections.connections.items():
        if not info.connected and device_id in pending:
            logger.debug(f"Pruning disconnected device {device_id}")
            del pending[device_id]


class EventReconciler:
    """Pulls event batches from the daemon and applies them to a SyncState."""

    def __init__(self, api_client):
        """
        Initialize the reconciler.

        Args:
            api_client: Client exposing ``get_events``, ``get_config`` and ``get_connections``
        """
        self.api_client = api_client

    def reconcile(self, state: SyncState) -> SyncState:
        """
        Run one reconciliation pass.

        Fetches events newer than the watermark, refreshes the directory at
        most once if the batch mentions unknown IDs, applies the events in
        order, advances the watermark and finally prunes disconnected devices.

        Args:
            state: Aggregator state, mutated in place

        Returns:
            The same state object
        """
        events = self.api_client.get_events(state.since)
        logger.debug(f"Received {len(events)} events since {state.since}")

        if needs_refresh(events, state.directory):
            state.directory.refresh(self.api_client)

        for event in events:
            apply_event(state.pending, event)

        if events:
            state.since = events[-1].id

        self.prune(state)
        return state

    def prune(self, state: SyncState) -> None:
        """Cross-check the pending table against live connection state."""
        prune_disconnected(state.pending, self.api_client.get_connections())
