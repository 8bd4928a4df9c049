"""High level light device."""
from __future__ import annotations

from enum import Enum

from tradfri import const
from tradfri.color import ColorRGB, ColorXY, hs_to_rgb, rgb_to_xy
from tradfri.events import EventHandler, EventKind
from tradfri.observer import LightObserver
from tradfri.properties import LightProperties
from tradfri.transport import Transport
from tradfri.updates import UpdateQueue


class DeviceType(Enum):
    UNKNOWN = "unknown"
    LIGHT = "light"
    PLUG = "plug"
    REMOTE = "remote"
    MOTION_SENSOR = "motion_sensor"


class Light:
    """A TRÅDFRI light.

    Attribute reads come from the observer's snapshot, so they only follow
    the device while observing. Writes either go out immediately
    (``set_*``) or are staged with ``update_*`` and sent together by
    :meth:`apply_updates`.
    """

    device_type = DeviceType.LIGHT

    def __init__(
        self,
        instance_id: int,
        transport: Transport,
        *,
        name: str | None = None,
        properties: LightProperties | None = None,
        delay: float | None = None,
    ) -> None:
        self._instance_id = instance_id
        self._name = name
        endpoint = const.device_endpoint(instance_id)
        self._updates = UpdateQueue(endpoint, transport)
        self._observer = LightObserver(
            instance_id, transport, properties=properties, delay=delay
        )

    def __repr__(self) -> str:
        return f"<Light {self._instance_id} {self._name!r}>"

    @property
    def instance_id(self) -> int:
        return self._instance_id

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def properties(self) -> LightProperties:
        return self._observer.snapshot

    @property
    def pending(self) -> LightProperties:
        return self._updates.pending

    @property
    def observer(self) -> LightObserver:
        return self._observer

    # State

    @property
    def on(self) -> bool | None:
        return self.properties.on

    @property
    def brightness(self) -> int | None:
        return self.properties.brightness

    @property
    def color_hex(self) -> str | None:
        return self.properties.color_hex

    @property
    def hue(self) -> int | None:
        return self.properties.hue

    @property
    def saturation(self) -> int | None:
        return self.properties.saturation

    @property
    def color_x(self) -> int | None:
        return self.properties.color_x

    @property
    def color_y(self) -> int | None:
        return self.properties.color_y

    @property
    def color_xy(self) -> ColorXY | None:
        props = self.properties
        if props.color_x is None or props.color_y is None:
            return None
        return ColorXY(props.color_x, props.color_y)

    @property
    def color_rgb(self) -> ColorRGB:
        """RGB derived from hue and saturation; unknown values count as 0."""
        props = self.properties
        return hs_to_rgb(props.hue or 0, props.saturation or 0)

    @property
    def color_temperature(self) -> int | None:
        return self.properties.color_temperature

    # Observation

    async def start_observing(self) -> bool:
        return await self._observer.start()

    async def stop_observing(self) -> bool:
        return await self._observer.stop()

    def register(self, kind: EventKind, handler: EventHandler) -> None:
        self._observer.register(kind, handler)

    # Staged updates

    def update_on(self, on: bool) -> None:
        self._updates.stage("on", on)

    def update_brightness(self, brightness: int) -> None:
        self._updates.stage("brightness", brightness)

    def update_color_hex(self, color_hex: str) -> None:
        self._updates.stage("color_hex", color_hex)

    def update_hue(self, hue: int) -> None:
        self._updates.stage("hue", hue)

    def update_saturation(self, saturation: int) -> None:
        self._updates.stage("saturation", saturation)

    def update_color_xy(self, color_x: int, color_y: int) -> None:
        self._updates.stage("color_x", color_x)
        self._updates.stage("color_y", color_y)

    def update_color(self, color: ColorXY | ColorRGB) -> None:
        if isinstance(color, ColorRGB):
            color = rgb_to_xy(color)
        self.update_color_xy(color.x, color.y)

    def update_color_rgb(self, red: int, green: int, blue: int) -> None:
        self.update_color(ColorRGB(red, green, blue))

    def update_color_temperature(self, color_temperature: int) -> None:
        self._updates.stage("color_temperature", color_temperature)

    def update_transition_time(self, transition_time: int) -> None:
        self._updates.stage("transition_time", transition_time)

    async def apply_updates(self, transition_time: int | None = None) -> bool:
        return await self._updates.flush(transition_time)

    # Immediate updates

    async def set_on(self, on: bool, transition_time: int | None = None) -> bool:
        return await self._updates.send(
            LightProperties(on=on, transition_time=transition_time)
        )

    async def set_brightness(
        self, brightness: int, transition_time: int | None = None
    ) -> bool:
        return await self._updates.send(
            LightProperties(brightness=brightness, transition_time=transition_time)
        )

    async def set_color_hex(
        self, color_hex: str, transition_time: int | None = None
    ) -> bool:
        return await self._updates.send(
            LightProperties(color_hex=color_hex, transition_time=transition_time)
        )

    async def set_hue(self, hue: int, transition_time: int | None = None) -> bool:
        return await self._updates.send(
            LightProperties(hue=hue, transition_time=transition_time)
        )

    async def set_saturation(
        self, saturation: int, transition_time: int | None = None
    ) -> bool:
        return await self._updates.send(
            LightProperties(saturation=saturation, transition_time=transition_time)
        )

    async def set_color_xy(
        self, color_x: int, color_y: int, transition_time: int | None = None
    ) -> bool:
        return await self._updates.send(
            LightProperties(
                color_x=color_x, color_y=color_y, transition_time=transition_time
            )
        )

    async def set_color(
        self, color: ColorXY | ColorRGB, transition_time: int | None = None
    ) -> bool:
        if isinstance(color, ColorRGB):
            color = rgb_to_xy(color)
        return await self.set_color_xy(color.x, color.y, transition_time)

    async def set_color_rgb(
        self, red: int, green: int, blue: int, transition_time: int | None = None
    ) -> bool:
        return await self.set_color(ColorRGB(red, green, blue), transition_time)

    async def set_color_temperature(
        self, color_temperature: int, transition_time: int | None = None
    ) -> bool:
        return await self._updates.send(
            LightProperties(
                color_temperature=color_temperature, transition_time=transition_time
            )
        )
