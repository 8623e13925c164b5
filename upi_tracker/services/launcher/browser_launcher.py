"""
Payment App Launcher

Hands the outbound payment URI to the operating system, which opens the
registered UPI app (or an app chooser).

IMPORTANT BOUNDARIES:
1. Launching is fire-and-forget; there is no completion signal
2. The launcher NEVER reports whether a payment happened
3. The only observable failure is "could not open the URI at all"
"""

import webbrowser
from abc import ABC, abstractmethod


class LaunchError(Exception):
    """The payment app could not be launched."""

    def __init__(self, uri: str, message: str):
        self.uri = uri
        super().__init__(message)


class PaymentLauncher(ABC):
    """Anything that can open a payment URI."""

    @abstractmethod
    def launch(self, uri: str) -> None:
        """
        Open the URI.

        Raises:
            LaunchError: If the environment cannot open it
        """
        pass


class WebBrowserLauncher(PaymentLauncher):
    """
    Opens payment URIs through the stdlib `webbrowser` registry.

    On a desktop this hands `upi://` links to whatever handler the OS has
    registered; when none is available `webbrowser.open` returns False.
    """

    def launch(self, uri: str) -> None:
        try:
            opened = webbrowser.open(uri)
        except webbrowser.Error as e:
            raise LaunchError(uri, f"Could not open payment app: {e}")

        if not opened:
            raise LaunchError(
                uri,
                "No app on this device can open UPI payment links"
            )
