"""Per-client event timeline: lines of events, consolidation and multi-client sync."""

__version__ = "1.0.0"
