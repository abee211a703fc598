"""boardsync - real-time relay in front of the Trello boards API."""

__version__ = "0.1.0"
