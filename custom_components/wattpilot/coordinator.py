"""Data update coordinator for the Wattpilot integration."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import contextlib
import logging
from typing import Any

from wattpilot_lib import WattpilotSnapshot
from wattpilot_lib.events import ConnectionStateChanged, StatusUpdated

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .const import DEBOUNCE_SECONDS, DOMAIN
from .hub import WattpilotHub

_LOGGER = logging.getLogger(__name__)


class WattpilotDataUpdateCoordinator(DataUpdateCoordinator[WattpilotSnapshot | None]):
    """Push charger snapshots to entities, debouncing status bursts."""

    def __init__(
        self,
        hass: HomeAssistant,
        hub: WattpilotHub,
        entry: ConfigEntry,
        *,
        debounce_seconds: float = DEBOUNCE_SECONDS,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(hass, _LOGGER, name=DOMAIN, config_entry=entry)
        self._hub = hub
        self._debounce_seconds = debounce_seconds
        self._debounce_task: asyncio.Task[None] | None = None
        self._unsubscribe: Callable[[], None] | None = None

    async def async_start(self) -> None:
        """Subscribe to hub events and seed snapshot data."""
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._unsubscribe = self._hub.subscribe(self._handle_event)
        self._set_snapshot(self._hub.get_snapshot())

    async def async_stop(self) -> None:
        """Stop coordinating updates and clean up resources."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._debounce_task is not None:
            self._debounce_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._debounce_task
            self._debounce_task = None

    def _handle_event(self, event: Any) -> None:
        """Handle client events on the Home Assistant event loop."""
        self.hass.loop.call_soon_threadsafe(self._process_event, event)

    @callback
    def _process_event(self, event: Any) -> None:
        if isinstance(event, ConnectionStateChanged):
            _LOGGER.debug(
                "Connection state changed: connected=%s reason=%s",
                event.connected,
                event.reason,
            )
            self._set_snapshot(self._hub.get_snapshot())
            return
        if isinstance(event, StatusUpdated):
            if self._debounce_task is None or self._debounce_task.done():
                self._debounce_task = self.hass.async_create_task(
                    self._async_debounced_update()
                )

    async def _async_debounced_update(self) -> None:
        await asyncio.sleep(self._debounce_seconds)
        self._set_snapshot(self._hub.get_snapshot())

    def _set_snapshot(self, snapshot: WattpilotSnapshot | None) -> None:
        self.async_set_updated_data(snapshot)
