"""Set up the Wattpilot integration."""

from __future__ import annotations

import contextlib
import logging
import sys
from pathlib import Path

_VENDOR_PATH = Path(__file__).resolve().parent / "vendor" / "wattpilot"
if _VENDOR_PATH.exists() and str(_VENDOR_PATH) not in sys.path:
    sys.path.insert(0, str(_VENDOR_PATH))

from wattpilot_lib.errors import (
    WattpilotAuthError,
    WattpilotConnectionError,
    WattpilotProtocolError,
    WattpilotTimeoutError,
)

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_PASSWORD, Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady

from .const import CONF_SERIAL, DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import WattpilotDataUpdateCoordinator
from .hub import WattpilotHub

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.SENSOR,
    Platform.SWITCH,
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Wattpilot from a config entry."""
    host = entry.data[CONF_HOST]
    password = entry.data.get(CONF_PASSWORD)
    if not password:
        raise ConfigEntryAuthFailed("Password is missing; reauthentication required")
    hub = WattpilotHub(hass, host, password)
    try:
        await hub.async_connect()
    except WattpilotAuthError as err:
        raise ConfigEntryAuthFailed("The charger rejected the password") from err
    except (
        WattpilotConnectionError,
        WattpilotTimeoutError,
        WattpilotProtocolError,
    ) as err:
        _LOGGER.exception("Failed to set up connection to %s", host)
        with contextlib.suppress(Exception):
            await hub.async_disconnect()
        raise ConfigEntryNotReady(
            "The charger did not finish initializing; check the host"
        ) from err

    serial = hub.serial
    if serial and entry.data.get(CONF_SERIAL) != serial:
        hass.config_entries.async_update_entry(
            entry, data={**entry.data, CONF_SERIAL: serial}
        )

    coordinator = WattpilotDataUpdateCoordinator(hass, hub, entry)
    await coordinator.async_start()
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        DATA_HUB: hub,
        DATA_COORDINATOR: coordinator,
    }
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a Wattpilot config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if data is not None:
        coordinator: WattpilotDataUpdateCoordinator | None = data.get(DATA_COORDINATOR)
        hub: WattpilotHub | None = data.get(DATA_HUB)
        if coordinator is not None:
            await coordinator.async_stop()
        if hub is not None:
            await hub.async_disconnect()
    return unload_ok
