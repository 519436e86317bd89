"""Shared test doubles: the in-memory sinks."""

from __future__ import annotations

from textrouter.sinks.memory_sink import MemoryQueueSink, MemoryRepositorySink

__all__ = ["MemoryQueueSink", "MemoryRepositorySink"]
