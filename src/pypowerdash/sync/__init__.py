"""Synchronization layer.

This package owns the per-source fetch lifecycle: request derivation,
generation-checked state transitions, and the derived views computed from
the synchronized collections.
"""
