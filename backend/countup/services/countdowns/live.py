"""Periodic snapshot feed for a single countdown.

A channel re-fetches its countdown on a fixed period and produces
``data: <json>`` frames. It is bound to one client connection: closing the
generator (client disconnect) or calling ``close()`` stops the loop at once.
"""

import enum
import json
import logging
import threading
from typing import Any, Callable, Dict, Iterator, Set

from countup.errors import NotFound, TransientFetchError


logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SEC = 10.0
FETCH_ERROR_MESSAGE = 'Failed to fetch countdown'

Fetch = Callable[[int], Dict[str, Any]]

_open_channels: Set['LiveUpdateChannel'] = set()
_open_channels_lock = threading.Lock()


class ChannelState(str, enum.Enum):
    OPEN = 'open'
    STREAMING = 'streaming'
    CLOSED = 'closed'


def format_frame(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


def open_channel_count() -> int:
    with _open_channels_lock:
        return len(_open_channels)


class LiveUpdateChannel:
    def __init__(self, countdown_id: int, fetch: Fetch, interval: float = DEFAULT_INTERVAL_SEC):
        self.countdown_id = countdown_id
        self.interval = interval
        self._fetch = fetch
        self._stop = threading.Event()
        self.state = ChannelState.OPEN

    @property
    def closed(self) -> bool:
        return self.state is ChannelState.CLOSED

    def poll(self) -> Dict[str, Any]:
        """Fetch one snapshot; lookup and database failures become error payloads."""
        try:
            return self._fetch(self.countdown_id)
        except NotFound as exc:
            return {'error': exc.message}
        except TransientFetchError as exc:
            logger.warning(f"[stream-fetch-failed] countdown={self.countdown_id} error={exc}")
            return {'error': FETCH_ERROR_MESSAGE}

    def payloads(self) -> Iterator[Dict[str, Any]]:
        """Yield the current snapshot now and then once per interval until closed."""
        if self.closed:
            return
        # Registered only once the body is actually being streamed
        with _open_channels_lock:
            _open_channels.add(self)
        try:
            yield self.poll()
            self.state = ChannelState.STREAMING
            while not self._stop.wait(self.interval):
                yield self.poll()
        except Exception:
            logger.exception(f"[stream-error] countdown={self.countdown_id}")
            raise
        finally:
            self.close()

    def frames(self) -> Iterator[str]:
        try:
            for payload in self.payloads():
                yield format_frame(payload)
        finally:
            self.close()

    def close(self) -> None:
        with _open_channels_lock:
            _open_channels.discard(self)
        if self.closed:
            return
        self._stop.set()
        self.state = ChannelState.CLOSED
        logger.debug(f"[stream-close] countdown={self.countdown_id}")
