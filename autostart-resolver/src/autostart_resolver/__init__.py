"""autostart-resolver.

Opens the most specific settings screen that lets a user exempt an app from
vendor background-start restrictions on an Android device:

- a static vendor -> settings activity catalog
- an availability probe backed by the device package manager
- a three-tier fallback ladder (vendor screen, app details, settings root)
"""

__all__ = [
    "catalog",
    "cli",
    "config",
    "resolver",
    "runtime",
    "service",
]
