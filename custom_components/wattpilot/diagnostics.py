"""Diagnostics support for Wattpilot."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from datetime import date, datetime
import enum
from typing import Any

from wattpilot_lib import redact_for_diagnostics

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_PASSWORD
from homeassistant.core import HomeAssistant

from .const import CONF_SERIAL, DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import WattpilotDataUpdateCoordinator
from .hub import WattpilotHub


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    hub: WattpilotHub | None = data.get(DATA_HUB) if data else None
    coordinator: WattpilotDataUpdateCoordinator | None = (
        data.get(DATA_COORDINATOR) if data else None
    )
    snapshot = coordinator.data if coordinator is not None else None

    return {
        "entry_id": entry.entry_id,
        "host": entry.data.get(CONF_HOST),
        "serial": entry.data.get(CONF_SERIAL),
        "password_present": bool(entry.data.get(CONF_PASSWORD)),
        "connected": hub.is_ready if hub is not None else False,
        "snapshot_available": snapshot is not None,
        "snapshot": redact_for_diagnostics(_to_jsonable(snapshot)),
    }


def _to_jsonable(value: Any) -> Any:
    """Normalize snapshots to JSON-safe types."""
    if value is None:
        return None
    if is_dataclass(value):
        return {
            field.name: _to_jsonable(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, Mapping):
        return {str(key): _to_jsonable(val) for key, val in value.items()}
    if isinstance(value, list | tuple):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
