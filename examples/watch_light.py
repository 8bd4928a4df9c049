#!/usr/bin/env python
"""Watch a TRÅDFRI light and print its change events."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os

from tradfri import const
from tradfri.events import DeviceEvent, EventKind
from tradfri.light import Light
from tradfri.transport import GatewayBridgeTransport


def print_event(event: DeviceEvent) -> None:
    print(f"{event.kind.value}: {event.old!r} -> {event.new!r}")


async def run(args: argparse.Namespace) -> None:
    """Run the watch example."""
    async with GatewayBridgeTransport(args.host, port=args.port) as transport:
        light = Light(args.light, transport, delay=args.delay)
        for kind in EventKind:
            light.register(kind, print_event)

        if args.brightness is not None:
            light.update_on(True)
            light.update_brightness(args.brightness)
            ok = await light.apply_updates(args.transition)
            print(f"update sent: {ok}")

        if not await light.start_observing():
            print("Failed to observe light")
            return
        try:
            await asyncio.sleep(args.duration)
        finally:
            await light.stop_observing()


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Print change events of a TRÅDFRI light."
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("TRADFRI_HOST", "tradfri.local"),
        help="Gateway bridge host (env: TRADFRI_HOST)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=const.DEFAULT_PORT,
        help=f"Gateway bridge port (default: {const.DEFAULT_PORT})",
    )
    parser.add_argument("light", type=int, help="Instance id of the light")
    parser.add_argument(
        "--duration",
        type=float,
        default=60.0,
        help="Seconds to watch",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Debounce delay in seconds (env: TRADFRI_OBSERVE_DELAY)",
    )
    parser.add_argument(
        "--brightness",
        type=int,
        default=None,
        help="Turn the light on at this brightness before watching",
    )
    parser.add_argument(
        "--transition",
        type=int,
        default=None,
        help="Transition time in tenths of a second",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args()


def main() -> None:
    """Entry point."""
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
