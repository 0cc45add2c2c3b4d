"""HubHook - signed webhook receiver for hub-style subscriptions."""

__version__ = "0.1.0"
