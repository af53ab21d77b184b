"""
Display-name lookups for device and folder IDs.
"""
import logging
from typing import Dict

from .models import ConfigResponse, DeviceID, FolderID


logger = logging.getLogger(__name__)


class DirectoryCache:
    """
    Device-ID to name and folder-ID to label mappings.

    The mappings are only ever replaced wholesale from the daemon's
    configuration. Lookups never fail: an unknown ID is shown as itself.
    """

    def __init__(self):
        self.devices: Dict[DeviceID, str] = {}
        self.folders: Dict[FolderID, str] = {}

    def refresh(self, api_client) -> None:
        """
        Replace both mappings from the daemon's configuration endpoint.

        Args:
            api_client: Client exposing ``get_config()``
        """
        logger.debug("Refreshing devices...")
        self.replace(api_client.get_config())
        logger.debug(
            f"Directory now holds {len(self.devices)} devices and {len(self.folders)} folders"
        )

    def replace(self, config: ConfigResponse) -> None:
        self.devices = {device.device_id: device.name for device in config.devices}
        self.folders = {folder.id: folder.label for folder in config.folders}

    def knows(self, device: DeviceID, folder: FolderID) -> bool:
        """True if both IDs are present in the cache."""
        return device in self.devices and folder in self.folders

    def device_name(self, device: DeviceID) -> str:
        return self.devices.get(device, device)

    def folder_name(self, folder: FolderID) -> str:
        return self.folders.get(folder, folder)
