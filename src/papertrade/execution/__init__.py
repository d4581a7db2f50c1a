"""Execution collaborators."""

from .base import ExecutionClient
from .paper import PaperExecutionClient
from .supabase_trades import SupabaseTradesClient

__all__ = ["ExecutionClient", "PaperExecutionClient", "SupabaseTradesClient"]
