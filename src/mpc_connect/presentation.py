"""
Presentation surfaces for companion URLs.

A presenter shows the URL to the user (browser window, QR code, console)
and returns a handle, or None when nothing could be shown.
"""

import logging
import webbrowser
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class Presenter(Protocol):
    def present_request(self, url: str) -> Optional[Any]: ...


class BrowserPresenter:
    """Opens the companion page in a new browser window."""

    def present_request(self, url: str) -> Optional[Any]:
        try:
            opened = webbrowser.open_new(url)
        except webbrowser.Error as e:
            logger.warning("Could not open browser: %s", e)
            return None
        return url if opened else None


class CallbackPresenter:
    def __init__(self, callback: Callable[[str], Optional[Any]]):
        self._callback = callback

    def present_request(self, url: str) -> Optional[Any]:
        return self._callback(url)
