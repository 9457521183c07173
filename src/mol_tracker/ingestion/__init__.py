"""Reference data ingestion.

Loads the skill catalog from a bundled file, a configured path or a URL.
"""

from __future__ import annotations

from mol_tracker.ingestion.catalog_loader import (
    fetch_catalog_text,
    load_bundled_catalog,
    load_catalog,
    parse_catalog,
    read_catalog_text,
)


__all__ = [
    "fetch_catalog_text",
    "load_bundled_catalog",
    "load_catalog",
    "parse_catalog",
    "read_catalog_text",
]
