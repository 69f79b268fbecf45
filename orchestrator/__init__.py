"""Orchestrator package for audit run coordination."""

from .run_context import RunContext
from .orchestrator import Orchestrator, resolve_regions

__all__ = ['RunContext', 'Orchestrator', 'resolve_regions']
