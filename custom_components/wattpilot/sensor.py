"""Sensors for the Wattpilot integration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import (
    EntityCategory,
    UnitOfElectricCurrent,
    UnitOfElectricPotential,
    UnitOfEnergy,
    UnitOfPower,
)
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import WattpilotDataUpdateCoordinator
from .entity import WattpilotEntity
from .hub import WattpilotHub

CAR_STATES = {
    1: "idle",
    2: "charging",
    3: "wait_car",
    4: "complete",
    5: "error",
}


@dataclass(frozen=True, slots=True, kw_only=True)
class WattpilotSensorDescription(SensorEntityDescription):
    """Describe a Wattpilot sensor."""

    value_fn: Callable[[WattpilotHub], Any]


def _property(name: str) -> Callable[[WattpilotHub], Any]:
    return lambda hub: hub.get_value(name)


def _power(name: str) -> WattpilotSensorDescription:
    return WattpilotSensorDescription(
        key=name,
        name="Power" if name == "power" else f"Power L{name[-1]}",
        device_class=SensorDeviceClass.POWER,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfPower.WATT,
        value_fn=_property(name),
    )


def _phase(prefix: str, phase: int, device_class: SensorDeviceClass, unit: str) -> WattpilotSensorDescription:
    name = f"{prefix}{phase}"
    label = "Current" if prefix == "amps" else "Voltage"
    return WattpilotSensorDescription(
        key=name,
        name=f"{label} L{phase}",
        device_class=device_class,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=unit,
        value_fn=_property(name),
    )


def _car_state(hub: WattpilotHub) -> str | None:
    value = hub.get_value("car")
    if value is None:
        return None
    return CAR_STATES.get(value, "unknown")


SENSORS: tuple[WattpilotSensorDescription, ...] = (
    _power("power"),
    _power("power1"),
    _power("power2"),
    _power("power3"),
    *(_phase("amps", i, SensorDeviceClass.CURRENT, UnitOfElectricCurrent.AMPERE) for i in (1, 2, 3)),
    *(_phase("voltage", i, SensorDeviceClass.VOLTAGE, UnitOfElectricPotential.VOLT) for i in (1, 2, 3)),
    WattpilotSensorDescription(
        key="eto",
        name="Energy total",
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL_INCREASING,
        native_unit_of_measurement=UnitOfEnergy.WATT_HOUR,
        value_fn=_property("eto"),
    ),
    WattpilotSensorDescription(
        key="wh",
        name="Energy since car connected",
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL,
        native_unit_of_measurement=UnitOfEnergy.WATT_HOUR,
        value_fn=_property("wh"),
    ),
    WattpilotSensorDescription(
        key="amp",
        name="Requested current",
        device_class=SensorDeviceClass.CURRENT,
        native_unit_of_measurement=UnitOfElectricCurrent.AMPERE,
        value_fn=_property("amp"),
    ),
    WattpilotSensorDescription(
        key="car",
        name="Car state",
        device_class=SensorDeviceClass.ENUM,
        options=[*CAR_STATES.values(), "unknown"],
        value_fn=_car_state,
    ),
    WattpilotSensorDescription(
        key="connection",
        name="Connection",
        device_class=SensorDeviceClass.ENUM,
        options=["connected", "disconnected"],
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda hub: "connected" if hub.is_ready else "disconnected",
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up Wattpilot sensors from a config entry."""
    data = hass.data[DOMAIN][entry.entry_id]
    hub: WattpilotHub = data[DATA_HUB]
    coordinator: WattpilotDataUpdateCoordinator = data[DATA_COORDINATOR]
    async_add_entities(
        WattpilotSensor(coordinator, hub, entry, description) for description in SENSORS
    )


class WattpilotSensor(WattpilotEntity, SensorEntity):
    """Representation of a Wattpilot sensor."""

    entity_description: WattpilotSensorDescription

    def __init__(
        self,
        coordinator: WattpilotDataUpdateCoordinator,
        hub: WattpilotHub,
        entry: ConfigEntry,
        description: WattpilotSensorDescription,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, hub, entry, "sensor", description.key)
        self.entity_description = description

    @property
    def available(self) -> bool:
        """Keep the connection sensor available while the charger is down."""
        if self.entity_description.key == "connection":
            return True
        return super().available

    @property
    def native_value(self) -> Any:
        """Return the current value."""
        return self.entity_description.value_fn(self._hub)
