"""Accessibility helpers: live-region announcements."""

from formcheck.a11y.announcer import Announcer, LiveRegion, Priority

__all__ = ["Announcer", "LiveRegion", "Priority"]
