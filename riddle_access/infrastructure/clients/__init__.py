"""
Infrastructure Clients

Riddle sources for HTTP and the local filesystem.
"""

from .http_riddle_source import HttpRiddleSource
from .local_riddle_source import LocalRiddleSource

__all__ = ["HttpRiddleSource", "LocalRiddleSource"]
