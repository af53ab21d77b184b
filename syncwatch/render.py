"""
Rendering of the pending table into status-bar text and tooltip.
"""
import json
import math
from typing import Dict

from .config import STATUS_GLYPH, TOOLTIP_COLUMN_WIDTH
from .directory import DirectoryCache
from .models import PendingTable

BYTES_IN_MIB = 1024 * 1024
BYTES_IN_GIB = 1024 * 1024 * 1024


def _format_number(value: float) -> str:
    if value.is_integer():
        return f"{value:.0f}"
    return f"{value:.2f}"


def format_bytes(need_bytes: int) -> str:
    """
    Human-readable size in MiB, or GiB from 1 GiB upwards.

    Whole numbers have no decimals, anything else gets two:
    1610612736 -> "1.50 GiB", 2147483648 -> "2 GiB".
    """
    if need_bytes >= BYTES_IN_GIB:
        return f"{_format_number(need_bytes / BYTES_IN_GIB)} GiB"
    return f"{_format_number(need_bytes / BYTES_IN_MIB)} MiB"


def render_text(pending: PendingTable) -> str:
    """Compact status string, one token per pending folder, completion floored."""
    return " | ".join(
        f"{STATUS_GLYPH} {math.floor(progress.completion)}%/{format_bytes(progress.need_bytes)}"
        for folders in pending.values()
        for progress in folders.values()
    )


def render_tooltip(pending: PendingTable, directory: DirectoryCache) -> str:
    """Multi-line tooltip with device and folder names, completion rounded."""
    lines = []
    for device, folders in pending.items():
        device_label = f"{directory.device_name(device)}:"
        for folder, progress in folders.items():
            lines.append(
                f"{device_label:<{TOOLTIP_COLUMN_WIDTH}} "
                f"{directory.folder_name(folder):<{TOOLTIP_COLUMN_WIDTH}} "
                f"({progress.completion:.0f}%, {format_bytes(progress.need_bytes)})"
            )
    return "\n".join(lines)


def render_snapshot(pending: PendingTable, directory: DirectoryCache) -> Dict[str, str]:
    return {
        "text": render_text(pending),
        "tooltip": render_tooltip(pending, directory),
    }


def render_line(pending: PendingTable, directory: DirectoryCache) -> str:
    """Snapshot as a single JSON line for the status-bar host."""
    return json.dumps(render_snapshot(pending, directory), ensure_ascii=False)
