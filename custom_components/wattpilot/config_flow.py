"""Config flow for the Wattpilot integration."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from wattpilot_lib import ClientConfig, WattpilotClient
from wattpilot_lib.errors import (
    WattpilotAuthError,
    WattpilotConnectionError,
    WattpilotError,
    WattpilotTimeoutError,
)
from wattpilot_lib.transport import AiohttpTransport
import voluptuous as vol

from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_HOST, CONF_PASSWORD
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.selector import selector

from .const import CONF_SERIAL, DOMAIN

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): cv.string,
        vol.Required(CONF_PASSWORD): selector({"text": {"type": "password"}}),
    }
)

STEP_REAUTH_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_PASSWORD): selector({"text": {"type": "password"}}),
    }
)


class WattpilotConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Wattpilot."""

    VERSION = 1
    MINOR_VERSION = 1

    def __init__(self) -> None:
        """Initialize the flow."""
        self._reauth_entry: Any | None = None

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}
        if user_input is not None:
            host = user_input[CONF_HOST].strip()
            password = user_input[CONF_PASSWORD]
            self._async_abort_entries_match({CONF_HOST: host})
            info = await self._async_validate(host, password, errors)
            if info is not None:
                serial, title = info
                await self.async_set_unique_id(serial)
                self._abort_if_unique_id_configured(updates={CONF_HOST: host})
                return self.async_create_entry(
                    title=title,
                    data={CONF_HOST: host, CONF_PASSWORD: password, CONF_SERIAL: serial},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> ConfigFlowResult:
        """Handle a rejected password."""
        entry_id = self.context.get("entry_id")
        self._reauth_entry = (
            self.hass.config_entries.async_get_entry(entry_id)
            if entry_id is not None
            else None
        )
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for a new password and verify it."""
        errors: dict[str, str] = {}
        entry = self._reauth_entry
        if entry is None:
            return self.async_abort(reason="missing_context")
        if user_input is not None:
            password = user_input[CONF_PASSWORD]
            info = await self._async_validate(entry.data[CONF_HOST], password, errors)
            if info is not None:
                self.hass.config_entries.async_update_entry(
                    entry, data={**entry.data, CONF_PASSWORD: password}
                )
                await self.hass.config_entries.async_reload(entry.entry_id)
                return self.async_abort(reason="reauth_successful")

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=STEP_REAUTH_DATA_SCHEMA,
            errors=errors,
        )

    async def _async_validate(
        self, host: str, password: str, errors: dict[str, str]
    ) -> tuple[str, str] | None:
        """Connect once; return (serial, title) or fill errors."""
        session = async_get_clientsession(self.hass)
        client = WattpilotClient(
            host,
            password,
            ClientConfig(),
            transport_factory=lambda: AiohttpTransport(session),
        )
        try:
            await client.async_connect()
            serial = client.serial
            title = client.name or host
        except WattpilotAuthError:
            errors["base"] = "invalid_auth"
        except (WattpilotConnectionError, WattpilotTimeoutError):
            errors["base"] = "cannot_connect"
        except WattpilotError:
            _LOGGER.exception("Unexpected error validating %s", host)
            errors["base"] = "unknown"
        finally:
            await client.async_disconnect()

        if errors:
            return None
        if not serial:
            errors["base"] = "unknown"
            return None
        return serial, title
