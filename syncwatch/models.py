"""
Models for the Syncthing status aggregator.
Contains the daemon's wire schemas and the pending-table type definitions.
"""
from typing import Annotated, Any, Dict, List, Literal, NamedTuple, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .errors import DecodeError


class FolderCompletionData(BaseModel):
    """Payload of a FolderCompletion event."""

    completion: float
    need_bytes: int = Field(alias="needBytes", ge=0)
    device: str
    folder: str


class DeviceDisconnectedData(BaseModel):
    """Payload of a DeviceDisconnected event."""

    id: str


class FolderCompletionEvent(BaseModel):
    id: int
    type: Literal["FolderCompletion"]
    data: FolderCompletionData


class DeviceDisconnectedEvent(BaseModel):
    id: int
    type: Literal["DeviceDisconnected"]
    data: DeviceDisconnectedData


# Events share an envelope and are told apart by their "type" tag
Event = Annotated[
    Union[FolderCompletionEvent, DeviceDisconnectedEvent],
    Field(discriminator="type"),
]


class ConnectionInfo(BaseModel):
    connected: bool


class ConnectionsResponse(BaseModel):
    """Body of GET /rest/system/connections."""

    connections: Dict[str, ConnectionInfo]


class ConfiguredDevice(BaseModel):
    device_id: str = Field(alias="deviceID")
    name: str


class ConfiguredFolder(BaseModel):
    id: str
    label: str


class ConfigResponse(BaseModel):
    """Body of GET /rest/system/config."""

    devices: List[ConfiguredDevice]
    folders: List[ConfiguredFolder]


class FolderProgress(NamedTuple):
    """Sync progress of one folder towards one device."""

    completion: float
    need_bytes: int


# Type definitions for the aggregator state
DeviceID = str
FolderID = str
PendingTable = Dict[DeviceID, Dict[FolderID, FolderProgress]]


_event_batch = TypeAdapter(List[Event])


def decode_events(payload: Any) -> List[Union[FolderCompletionEvent, DeviceDisconnectedEvent]]:
    """
    Decode a batch returned by the events endpoint.

    Args:
        payload: Parsed JSON body

    Returns:
        Events in the order the daemon sent them

    Raises:
        DecodeError: If the payload is not a list of known events
    """
    try:
        return _event_batch.validate_python(payload)
    except ValidationError as e:
        raise DecodeError(f"Unexpected events payload: {e}") from e


def decode_connections(payload: Any) -> ConnectionsResponse:
    try:
        return ConnectionsResponse.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(f"Unexpected connections payload: {e}") from e


def decode_config(payload: Any) -> ConfigResponse:
    try:
        return ConfigResponse.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(f"Unexpected config payload: {e}") from e
