"""Shared pytest fixtures and helpers for the accounts tests."""

from .api import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
