"""Hub wrapper for the Wattpilot client lifecycle."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import contextlib
import logging
from typing import Any

from wattpilot_lib import ClientConfig, WattpilotClient, WattpilotSnapshot
from wattpilot_lib.errors import (
    WattpilotCommandError,
    WattpilotError,
    WattpilotNotFoundError,
    WattpilotNotReadyError,
)
from wattpilot_lib.events import ConnectionStateChanged
from wattpilot_lib.transport import AiohttpTransport

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.aiohttp_client import async_get_clientsession

_LOGGER = logging.getLogger(__name__)


class WattpilotHub:
    """Manage a single Wattpilot client instance."""

    def __init__(self, hass: HomeAssistant, host: str, password: str) -> None:
        """Initialize the hub wrapper."""
        self._hass = hass
        self._host = host
        self._password = password
        self._client: WattpilotClient | None = None
        self._connection_unsubscribe: Callable[[], None] | None = None
        self._connect_lock = asyncio.Lock()
        self._unavailable_logged = False
        self._callbacks: dict[Callable[[Any], None], Callable[[], None] | None] = {}

    @property
    def client(self) -> WattpilotClient | None:
        """Return the underlying client."""
        return self._client

    @property
    def host(self) -> str:
        return self._host

    @property
    def is_ready(self) -> bool:
        """Return if the charger session is initialized."""
        if self._client is None:
            return False
        return self._client.is_initialized

    @property
    def serial(self) -> str | None:
        return self._client.serial if self._client is not None else None

    @property
    def name(self) -> str | None:
        return self._client.name if self._client is not None else None

    async def async_connect(self) -> None:
        """Connect the client and wait for the first full status."""
        async with self._connect_lock:
            await self._async_disconnect()
            session = async_get_clientsession(self._hass)
            client = WattpilotClient(
                self._host,
                self._password,
                ClientConfig(),
                transport_factory=lambda: AiohttpTransport(session),
            )
            self._client = client
            try:
                await client.async_connect()
            except Exception:
                with contextlib.suppress(Exception):
                    await client.async_disconnect()
                self._client = None
                raise
            self._connection_unsubscribe = client.subscribe(
                self._handle_connection_event
            )
            self._resubscribe_callbacks()

    async def async_disconnect(self) -> None:
        """Disconnect the client and unregister event handlers."""
        async with self._connect_lock:
            await self._async_disconnect()

    async def _async_disconnect(self) -> None:
        if self._connection_unsubscribe is not None:
            self._connection_unsubscribe()
            self._connection_unsubscribe = None
        self._clear_subscriptions()
        client = self._client
        self._client = None
        if client is not None:
            await client.async_disconnect()

    def get_snapshot(self) -> WattpilotSnapshot | None:
        """Return the latest client snapshot."""
        client = self._client
        if client is None:
            return None
        return client.snapshot

    def get_value(self, name: str) -> Any:
        """Return a property value, or None while it is unavailable."""
        client = self._client
        if client is None:
            return None
        try:
            return client.get_property(name)
        except (WattpilotNotReadyError, WattpilotNotFoundError):
            return None
        except WattpilotError as err:
            _LOGGER.debug("Property %s unavailable: %s", name, err)
            return None

    async def async_set_property(self, name: str, value: Any) -> int:
        """Write a property and wait for the charger to confirm it."""
        client = self._client
        if client is None:
            raise HomeAssistantError("Charger is not connected.")
        try:
            return await client.async_set_property(name, value, wait=True)
        except WattpilotCommandError as err:
            raise HomeAssistantError(
                f"Charger rejected {name}: {err.device_message or err}"
            ) from err
        except WattpilotError as err:
            raise HomeAssistantError(str(err)) from err

    def subscribe(self, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Subscribe to client events; survives reconnects of the hub."""
        if callback not in self._callbacks:
            self._callbacks[callback] = None
        client = self._client
        if client is not None and self._callbacks[callback] is None:
            self._callbacks[callback] = client.subscribe(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Callable[[Any], None]) -> bool:
        """Unsubscribe from client events."""
        if callback not in self._callbacks:
            return False
        unsubscribe = self._callbacks.pop(callback)
        if unsubscribe is not None:
            unsubscribe()
        return True

    def _resubscribe_callbacks(self) -> None:
        """Re-register callbacks on a new client."""
        client = self._client
        if client is None:
            return
        for cb in list(self._callbacks):
            self._callbacks[cb] = client.subscribe(cb)

    def _clear_subscriptions(self) -> None:
        for cb, unsubscribe in list(self._callbacks.items()):
            if unsubscribe is not None:
                unsubscribe()
            self._callbacks[cb] = None

    def _handle_connection_event(self, event: Any) -> None:
        """Log connection loss once and its recovery."""
        if not isinstance(event, ConnectionStateChanged):
            return
        if not event.connected:
            self._log_unavailable()
        elif self._unavailable_logged:
            _LOGGER.info("Charger connection restored")
            self._unavailable_logged = False

    def _log_unavailable(self) -> None:
        if self._unavailable_logged:
            return
        _LOGGER.info("Charger connection lost")
        self._unavailable_logged = True
