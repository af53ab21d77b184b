"""
Tests for reconcile.py driven by a mock Syncthing client.
"""
import pytest

from syncwatch.models import FolderProgress, decode_connections, decode_events
from syncwatch.reconcile import EventReconciler, apply_event, needs_refresh, prune_disconnected
from syncwatch.directory import DirectoryCache
from syncwatch.state import SyncState
from syncwatch.tests.fixtures.mock_api_client import (
    MockApiClient,
    device_disconnected,
    folder_completion,
)

MIB = 1024 * 1024


@pytest.fixture
def state():
    """Empty aggregator state with watermark 0."""
    return SyncState()


@pytest.fixture
def mock_api_client():
    """Mock daemon knowing two devices and two folders, all connected."""
    return MockApiClient(
        devices={"D1": "laptop", "D2": "phone"},
        folders={"F1": "Documents", "F2": "Photos"},
        connections={"D1": True, "D2": True},
    )


def _apply(pending, *raw_events):
    for event in decode_events(list(raw_events)):
        apply_event(pending, event)


def test_partial_completion_inserts_entry():
    pending = {}
    _apply(pending, folder_completion(1, "D1", "F1", 50.0, MIB))

    assert pending == {"D1": {"F1": FolderProgress(50.0, MIB)}}


def test_full_completion_removes_only_that_folder():
    """A 100% event drops exactly one folder and leaves siblings alone."""
    pending = {
        "D1": {"F1": FolderProgress(10.0, 5), "F2": FolderProgress(20.0, 6)},
        "D2": {"F1": FolderProgress(30.0, 7)},
    }
    _apply(pending, folder_completion(1, "D1", "F1", 100.0))

    assert pending == {
        "D1": {"F2": FolderProgress(20.0, 6)},
        "D2": {"F1": FolderProgress(30.0, 7)},
    }


def test_last_folder_completion_leaves_empty_row():
    pending = {"D1": {"F1": FolderProgress(10.0, 5)}}
    _apply(pending, folder_completion(1, "D1", "F1", 100.0))

    assert pending == {"D1": {}}


def test_completion_for_unknown_device_does_not_create_row():
    pending = {}
    _apply(pending, folder_completion(1, "D1", "F1", 100.0))

    assert pending == {}


def test_completion_regression_overwrites():
    pending = {"D1": {"F1": FolderProgress(80.0, 100)}}
    _apply(pending, folder_completion(1, "D1", "F1", 40.0, 500))

    assert pending["D1"]["F1"] == FolderProgress(40.0, 500)


def test_disconnect_drops_row_updated_earlier_in_batch():
    pending = {}
    _apply(
        pending,
        folder_completion(1, "D1", "F1", 20.0, MIB),
        folder_completion(2, "D1", "F2", 70.0, MIB),
        folder_completion(3, "D2", "F1", 70.0, MIB),
        device_disconnected(4, "D1"),
    )

    assert pending == {"D2": {"F1": FolderProgress(70.0, MIB)}}


def test_needs_refresh_only_for_unknown_ids():
    directory = DirectoryCache()
    directory.devices = {"D1": "laptop"}
    directory.folders = {"F1": "Documents"}

    known = decode_events([folder_completion(1, "D1", "F1", 50.0)])
    unknown_folder = decode_events([folder_completion(1, "D1", "F9", 50.0)])
    unknown_device = decode_events([folder_completion(1, "D9", "F1", 50.0)])
    disconnect_only = decode_events([device_disconnected(1, "D9")])

    assert needs_refresh(known, directory) is False
    assert needs_refresh(unknown_folder, directory) is True
    assert needs_refresh(unknown_device, directory) is True
    assert needs_refresh(disconnect_only, directory) is False
    assert needs_refresh([], directory) is False


def test_prune_removes_only_reported_disconnected():
    pending = {
        "D1": {"F1": FolderProgress(10.0, 1)},
        "D2": {"F1": FolderProgress(10.0, 1)},
        "D3": {},
        "D4": {"F2": FolderProgress(10.0, 1)},
    }
    connections = decode_connections({
        "connections": {
            "D1": {"connected": False},
            "D2": {"connected": True},
            "D3": {"connected": False},
            "D5": {"connected": False},
        }
    })

    prune_disconnected(pending, connections)

    # D4 is absent from the response and must survive
    assert set(pending) == {"D2", "D4"}


def test_end_to_end_insert_then_clear():
    """Fresh state picks up a transfer, refreshes names once, then clears it."""
    client = MockApiClient(
        batches=[
            [folder_completion(1, "D1", "F1", 50.0, MIB)],
            [folder_completion(2, "D1", "F1", 100.0)],
        ],
        devices={"D1": "laptop"},
        folders={"F1": "Documents"},
        connections={"D1": True},
    )
    state = SyncState()
    reconciler = EventReconciler(client)

    reconciler.reconcile(state)

    assert client.config_calls == 1
    assert state.since == 1
    assert state.pending == {"D1": {"F1": FolderProgress(50.0, MIB)}}
    assert state.directory.device_name("D1") == "laptop"

    reconciler.reconcile(state)

    assert client.config_calls == 1
    assert state.since == 2
    assert state.pending_count() == 0
    assert client.since_requested == [0, 1]


def test_empty_batch_leaves_watermark(state, mock_api_client):
    state.since = 41
    reconciler = EventReconciler(mock_api_client)

    reconciler.reconcile(state)

    assert state.since == 41
    assert state.pending == {}
    assert mock_api_client.config_calls == 0


def test_prune_runs_even_without_events(state, mock_api_client):
    state.pending = {"D2": {"F2": FolderProgress(12.5, MIB)}}
    mock_api_client.connections["D2"] = False

    EventReconciler(mock_api_client).reconcile(state)

    assert mock_api_client.connections_calls == 1
    assert state.pending == {}


def test_single_refresh_for_many_unknown_ids(state, mock_api_client):
    mock_api_client.batches.append([
        folder_completion(5, "D1", "F1", 10.0, MIB),
        folder_completion(6, "D2", "F2", 20.0, MIB),
        folder_completion(7, "D3", "F3", 30.0, MIB),
    ])

    EventReconciler(mock_api_client).reconcile(state)

    assert mock_api_client.config_calls == 1
    assert state.since == 7
    assert state.pending_count() == 3


def test_refresh_replaces_directory_wholesale(state, mock_api_client):
    reconciler = EventReconciler(mock_api_client)
    mock_api_client.batches.append([folder_completion(1, "D1", "F1", 10.0)])
    reconciler.reconcile(state)
    assert mock_api_client.config_calls == 1

    # D1 is removed from the daemon config, D3 shows up
    del mock_api_client.devices["D1"]
    mock_api_client.devices["D3"] = "desktop"
    mock_api_client.batches.append([folder_completion(2, "D3", "F1", 10.0)])
    reconciler.reconcile(state)

    assert mock_api_client.config_calls == 2
    assert "D1" not in state.directory.devices
    assert state.directory.device_name("D1") == "D1"

    # D1 was lost by the replacement, so seeing it again refreshes once more
    mock_api_client.batches.append([folder_completion(3, "D1", "F1", 20.0)])
    reconciler.reconcile(state)

    assert mock_api_client.config_calls == 3


def test_known_ids_skip_refresh(state, mock_api_client):
    reconciler = EventReconciler(mock_api_client)
    mock_api_client.batches.extend([
        [folder_completion(1, "D1", "F1", 10.0)],
        [folder_completion(2, "D1", "F1", 30.0), folder_completion(3, "D2", "F2", 5.0)],
    ])

    reconciler.reconcile(state)
    reconciler.reconcile(state)

    assert mock_api_client.config_calls == 1
    assert state.since == 3
