"""
Analytics module for SUPER Bot API

Thin interface over the PostHog client.
"""

from .posthog_client import capture_event, flush_events, get_posthog_client

__all__ = ["capture_event", "flush_events", "get_posthog_client"]
