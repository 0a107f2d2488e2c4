"""Switches for writable Wattpilot boolean properties."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

from homeassistant.components.switch import SwitchEntity, SwitchEntityDescription
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import WattpilotDataUpdateCoordinator
from .entity import WattpilotEntity
from .hub import WattpilotHub

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class WattpilotSwitchDescription(SwitchEntityDescription):
    """Describe a switch backed by one boolean wire key."""

    property_key: str


SWITCHES: tuple[WattpilotSwitchDescription, ...] = (
    WattpilotSwitchDescription(
        key="use_pv_surplus",
        property_key="fup",
        name="Use PV surplus",
    ),
    WattpilotSwitchDescription(
        key="led_save_energy",
        property_key="lse",
        name="LED energy saving",
        entity_category=EntityCategory.CONFIG,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up switches for properties the charger has reported."""
    data = hass.data[DOMAIN][entry.entry_id]
    hub: WattpilotHub = data[DATA_HUB]
    coordinator: WattpilotDataUpdateCoordinator = data[DATA_COORDINATOR]
    known: set[str] = set()

    def _async_add_switches() -> None:
        snapshot = coordinator.data
        if snapshot is None:
            _LOGGER.debug("Switches skipped because snapshot is unavailable")
            return
        entities: list[WattpilotSwitch] = []
        for description in SWITCHES:
            if description.key in known:
                continue
            if not isinstance(snapshot.status.get(description.property_key), bool):
                continue
            known.add(description.key)
            entities.append(WattpilotSwitch(coordinator, hub, entry, description))
        if entities:
            async_add_entities(entities)

    _async_add_switches()
    entry.async_on_unload(coordinator.async_add_listener(_async_add_switches))


class WattpilotSwitch(WattpilotEntity, SwitchEntity):
    """Representation of a writable boolean property."""

    entity_description: WattpilotSwitchDescription

    def __init__(
        self,
        coordinator: WattpilotDataUpdateCoordinator,
        hub: WattpilotHub,
        entry: ConfigEntry,
        description: WattpilotSwitchDescription,
    ) -> None:
        """Initialize the switch."""
        super().__init__(coordinator, hub, entry, "switch", description.key)
        self.entity_description = description

    @property
    def is_on(self) -> bool | None:
        """Return the reported property value."""
        value = self._hub.get_value(self.entity_description.property_key)
        return value if isinstance(value, bool) else None

    async def async_turn_on(self, **kwargs: Any) -> None:
        await self._hub.async_set_property(self.entity_description.property_key, True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self._hub.async_set_property(self.entity_description.property_key, False)
