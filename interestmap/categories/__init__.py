"""Category table loader: reads the keyword categories from YAML.

The table is read-only configuration: loaded once per file path, cached for
the life of the process, and shared by every request.  The bundled
``default.yaml`` lives next to this module; point
``INTERESTMAP_CATEGORIES_FILE`` at another file to swap it.

Public API::

    from interestmap.categories import load_categories, DEFAULT_CATEGORIES_FILE
"""

from __future__ import annotations

from functools import cache
from pathlib import Path
from typing import Any

import yaml

from interestmap.analysis.models import Category, CategorySpec

DEFAULT_CATEGORIES_FILE = Path(__file__).resolve().parent / "default.yaml"


# ---------------------------------------------------------------------------
# YAML → dataclass parsing
# ---------------------------------------------------------------------------


def _str(value: Any) -> str:
    """Convert a YAML value to a stripped string (``None`` → ``""``)."""
    if value is None:
        return ""
    return str(value).strip()


def _require(raw: dict[str, Any], key: str, filename: str) -> Any:
    """Return raw[key] or raise ValueError with a clear message."""
    if key not in raw:
        msg = f"{filename}: missing required key '{key}'"
        raise ValueError(msg)
    return raw[key]


def _parse_category(raw: dict[str, Any], filename: str) -> Category:
    if not isinstance(raw, dict):
        msg = f"{filename}: each category must be a mapping, got {type(raw).__name__}"
        raise ValueError(msg)
    name = _str(_require(raw, "name", filename))
    if not name:
        msg = f"{filename}: category name must not be empty"
        raise ValueError(msg)
    raw_keywords = raw.get("keywords", []) or []
    # YAML reads "yes"/"no"/numbers as non-strings; keywords are always text
    keywords = tuple(kw for kw in (_str(k).lower() for k in raw_keywords) if kw)
    return Category(name=name, keywords=keywords, colour=_str(raw.get("colour")))


def _parse_spec(raw: Any, filename: str) -> CategorySpec:
    """Validate and convert a raw YAML document to a CategorySpec."""
    if not isinstance(raw, dict):
        msg = f"{filename}: expected a mapping at the top level"
        raise ValueError(msg)
    raw_categories = _require(raw, "categories", filename) or []
    categories = tuple(_parse_category(c, filename) for c in raw_categories)
    if not categories:
        msg = f"{filename}: at least one category is required"
        raise ValueError(msg)

    names = [c.name for c in categories]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        msg = f"{filename}: duplicate category names {duplicates}"
        raise ValueError(msg)

    catch_all = [_str(c.get("name")) for c in raw_categories if c.get("catch_all")]
    if len(catch_all) != 1:
        msg = (
            f"{filename}: exactly one category must set 'catch_all: true' "
            f"(found {len(catch_all)})"
        )
        raise ValueError(msg)

    return CategorySpec(categories=categories, catch_all=catch_all[0])


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@cache
def _load(path: Path) -> CategorySpec:
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    return _parse_spec(raw, path.name)


def load_categories(path: Path | None = None) -> CategorySpec:
    """Return the category table from ``path`` (default: the bundled table).

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not a valid category table.
    """
    target = (path or DEFAULT_CATEGORIES_FILE).expanduser().resolve()
    if not target.is_file():
        raise FileNotFoundError(f"Category file not found: {target}")
    return _load(target)
