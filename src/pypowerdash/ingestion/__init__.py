"""Ingestion layer.

This package contains the response-side helpers that turn raw JSON from the
power API into normalized payloads and typed collections.
"""

__all__: list[str] = []
