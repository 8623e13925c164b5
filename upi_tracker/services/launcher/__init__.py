"""Payment app launcher package."""

from upi_tracker.services.launcher.browser_launcher import (
    LaunchError,
    PaymentLauncher,
    WebBrowserLauncher,
)

__all__ = [
    "LaunchError",
    "PaymentLauncher",
    "WebBrowserLauncher",
]
