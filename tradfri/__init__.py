"""TRÅDFRI Client package.

A Python library for controlling and observing IKEA TRÅDFRI lights.

Includes:
- Color conversions between RGB, hue/saturation and xy (gamut clamped)
- Staged light updates sent as a single request
- Observers that report attribute changes and added/removed devices
"""

__version__ = "0.1.0"
