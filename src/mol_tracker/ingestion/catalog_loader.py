"""Skill catalog loading.

The catalog is fetched once at startup from a local JSON file or an http(s)
URL. Any failure (unreachable URL, missing file, malformed JSON, wrong
shape) is logged and replaced by an empty catalog: the tracker keeps working,
it just has nothing to browse.

Expected shape::

    {
        "domains": {"shaping": {"name": "Shaping", "defaultLevel": 0, "free": true}},
        "spells": {"shaping": [{"name": "Mana Bolt", "defaultLevel": 0}]},
        "weaponSkills": {"swords": {"name": "Swords"}},
        "combatTechniques": {"riposte": {"name": "Riposte", "applicableWeapons": ["swords"]}},
        "generalSkills": [{"name": "Herbalism"}]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pydantic
import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mol_tracker.core.config import BUNDLED_CATALOG_PATH, get_settings
from mol_tracker.core.exceptions import CatalogError
from mol_tracker.core.logging import get_logger
from mol_tracker.models.catalog import SkillCatalog


logger = get_logger(__name__)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_catalog_text(
    url: str,
    *,
    timeout_seconds: float = 10.0,
    max_attempts: int = 3,
    retry_wait_seconds: float = 1.0,
) -> str:
    """Download catalog JSON, retrying connection errors and timeouts.

    Raises:
        CatalogError: The request failed or returned an error status.
    """

    @retry(
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=retry_wait_seconds, max=10 * retry_wait_seconds),
        reraise=True,
    )
    def _get() -> str:
        response = requests.get(url, headers={"Accept": "application/json"}, timeout=timeout_seconds)
        response.raise_for_status()
        return response.text

    try:
        return _get()
    except requests.RequestException as exc:
        raise CatalogError(f"Failed to fetch catalog: {exc}", source=url) from exc


def read_catalog_text(path: str | Path) -> str:
    """Read catalog JSON from disk.

    Raises:
        CatalogError: The file cannot be read.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogError(f"Failed to read catalog: {exc}", source=str(path)) from exc


def parse_catalog(text: str | bytes, *, source: str | None = None) -> SkillCatalog:
    """Validate catalog JSON.

    Raises:
        CatalogError: Malformed JSON or an unexpected shape.
    """
    try:
        data: Any = json.loads(text)
        return SkillCatalog.model_validate(data)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog is not valid JSON: {exc}", source=source) from exc
    except pydantic.ValidationError as exc:
        raise CatalogError(
            "Catalog does not match the expected shape",
            source=source,
            details={"error_count": exc.error_count()},
        ) from exc


def load_catalog(
    source: str | Path | None = None,
    *,
    timeout_seconds: float | None = None,
    max_attempts: int | None = None,
    retry_wait_seconds: float = 1.0,
) -> SkillCatalog:
    """Load the skill catalog, falling back to an empty one on any failure.

    Args:
        source: File path or http(s) URL. Defaults to the configured source.
        timeout_seconds: URL request timeout; defaults to settings.
        max_attempts: URL attempts; defaults to settings.
        retry_wait_seconds: Base backoff between URL attempts.

    Returns:
        The loaded catalog, or ``SkillCatalog.empty()``.
    """
    settings = get_settings().catalog
    source = str(source if source is not None else settings.source)

    try:
        if _is_url(source):
            text = fetch_catalog_text(
                source,
                timeout_seconds=timeout_seconds or settings.timeout_seconds,
                max_attempts=max_attempts or settings.max_retries,
                retry_wait_seconds=retry_wait_seconds,
            )
        else:
            text = read_catalog_text(source)
        catalog = parse_catalog(text, source=source)
    except CatalogError as exc:
        logger.error("Failed to load catalog, using empty catalog", error=exc.message, source=source)
        return SkillCatalog.empty()

    logger.info(
        "Catalog loaded",
        source=source,
        domains=len(catalog.domains),
        spells=sum(len(s) for s in catalog.spells.values()),
        weapons=len(catalog.weapon_skills),
        techniques=len(catalog.combat_techniques),
        general=len(catalog.general_skills),
    )
    return catalog


def load_bundled_catalog() -> SkillCatalog:
    """Load the catalog shipped with the package."""
    return load_catalog(BUNDLED_CATALOG_PATH)


__all__ = [
    "fetch_catalog_text",
    "read_catalog_text",
    "parse_catalog",
    "load_catalog",
    "load_bundled_catalog",
]
