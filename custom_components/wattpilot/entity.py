"""Shared entity helpers for the Wattpilot integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import CONF_SERIAL, DOMAIN, MANUFACTURER
from .coordinator import WattpilotDataUpdateCoordinator
from .hub import WattpilotHub


def unique_base(hub: WattpilotHub, entry: ConfigEntry) -> str:
    """Return the stable unique ID base for this config entry."""
    if entry.unique_id:
        return entry.unique_id
    serial = entry.data.get(CONF_SERIAL) or hub.serial
    if serial:
        return str(serial)
    return entry.data[CONF_HOST]


def build_unique_id(base: str, kind: str, key: str) -> str:
    """Build a stable unique ID in <serial>:<kind>:<key> format."""
    return f"{base}:{kind}:{key}"


def device_info_for_entry(
    hub: WattpilotHub,
    coordinator: WattpilotDataUpdateCoordinator,
    entry: ConfigEntry,
) -> DeviceInfo:
    """Build device info for entities tied to a config entry."""
    snapshot = coordinator.data
    device = snapshot.device if snapshot is not None else None
    return DeviceInfo(
        identifiers={(DOMAIN, unique_base(hub, entry))},
        name=(device.name if device else None) or hub.name or entry.title,
        manufacturer=(device.manufacturer if device else None) or MANUFACTURER,
        model=device.device_type if device else None,
        sw_version=device.version if device else None,
        serial_number=device.serial if device else None,
    )


class WattpilotEntity(CoordinatorEntity[WattpilotDataUpdateCoordinator]):
    """Base entity bound to one charger property."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: WattpilotDataUpdateCoordinator,
        hub: WattpilotHub,
        entry: ConfigEntry,
        kind: str,
        key: str,
    ) -> None:
        super().__init__(coordinator)
        self._hub = hub
        self._attr_unique_id = build_unique_id(unique_base(hub, entry), kind, key)
        self._attr_device_info = device_info_for_entry(hub, coordinator, entry)

    @property
    def available(self) -> bool:
        """Return if the charger session is initialized."""
        return self._hub.is_ready
