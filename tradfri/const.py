"""Constants for the IKEA TRÅDFRI gateway API."""
from __future__ import annotations

# Endpoints
ENDPOINT_DEVICES = "15001"

# Device attributes
KEY_LIGHT = "3311"

# Light attributes
KEY_ON_OFF = "5850"
KEY_BRIGHTNESS = "5851"
KEY_COLOR_HEX = "5706"
KEY_HUE = "5707"
KEY_SATURATION = "5708"
KEY_COLOR_X = "5709"
KEY_COLOR_Y = "5710"
KEY_COLOR_TEMPERATURE = "5711"
KEY_TRANSITION_TIME = "5712"

# Gateway bridge messages
KEY_COMMAND = "command"
KEY_ENDPOINT = "endpoint"
KEY_TAN = "tan"
KEY_SUCCESS = "success"
KEY_PAYLOAD = "payload"
KEY_ERROR = "error"
KEY_OBSERVE = "observe"
KEY_OBSERVE_UPDATE = f"{KEY_OBSERVE}-update"

DEFAULT_PORT = 8088
DEFAULT_OBSERVE_DELAY = 1.0
DEFAULT_HEARTBEAT = 30.0
DEFAULT_RECONNECT_DELAY = 5.0
DEFAULT_REQUEST_TIMEOUT = 10.0

MAX_HUE = 65535
MAX_SATURATION = 254
MAX_COLOR_XY = 65535


def device_endpoint(instance_id: int) -> str:
    return f"{ENDPOINT_DEVICES}/{instance_id}"
