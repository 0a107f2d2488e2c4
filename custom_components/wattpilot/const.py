"""Constants for wattpilot."""

DOMAIN = "wattpilot"
MANUFACTURER = "Fronius"

CONF_SERIAL = "serial"

DATA_HUB = "hub"
DATA_COORDINATOR = "coordinator"

DEBOUNCE_SECONDS = 0.5
