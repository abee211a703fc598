"""Dashboard client: relay REST calls, a local board mirror and the push channel."""

from boardsync.dashboard.client import RelayClient
from boardsync.dashboard.exceptions import RelayError
from boardsync.dashboard.mirror import BoardDirectory, BoardMirror
from boardsync.dashboard.session import DashboardSession, push_url_for

__all__ = [
    "BoardDirectory",
    "BoardMirror",
    "DashboardSession",
    "RelayClient",
    "RelayError",
    "push_url_for",
]
