"""Account providers."""

from .base import AccountProvider
from .demo import DemoAccountProvider

__all__ = ["AccountProvider", "DemoAccountProvider"]
