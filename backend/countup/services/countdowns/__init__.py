"""Countdown domain services: CRUD rules and live update channels.

These modules take their store (or fetch callable) as a constructor
argument and are imported by HTTP routes and socket handlers, keeping
transport concerns separated from the clamp rules and the polling loop.
"""

from .crud import CountdownService
from .live import LiveUpdateChannel, ChannelState, format_frame, open_channel_count

__all__ = [
    'CountdownService',
    'LiveUpdateChannel',
    'ChannelState',
    'format_frame',
    'open_channel_count',
]
