from __future__ import annotations

import unicodedata

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.config import settings

# Characters NFKD leaves intact; "&" follows the Portuguese reading.
_EXTRA_LATIN = {
    "&": " e ",
    "ß": "ss",
    "æ": "ae",
    "œ": "oe",
    "ø": "o",
    "đ": "d",
    "ð": "d",
    "ł": "l",
    "þ": "th",
}


def _fold(text: str) -> str:
    text = "".join(_EXTRA_LATIN.get(ch, ch) for ch in text.lower())
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def generate_slug(value: str, fallback: str | None = None) -> str:
    raw = str(value or "").strip()
    default = fallback or settings.SLUG_FALLBACK
    if not raw:
        return default
    out: list[str] = []
    prev_dash = False
    for ch in _fold(raw):
        if ("a" <= ch <= "z") or ("0" <= ch <= "9"):
            out.append(ch)
            prev_dash = False
            continue
        if not prev_dash:
            out.append("-")
            prev_dash = True
    slug = "".join(out).strip("-")
    return slug or default


def unique_slug(db: Session, model: type, base_value: str, *, exclude_id: int | None = None) -> str:
    """Return ``base_value`` or the first free ``base_value-N`` for ``model.slug``."""
    column = model.__table__.c.slug
    max_len = getattr(column.type, "length", None)
    base = base_value.strip("-") or settings.SLUG_FALLBACK
    if max_len:
        base = base[:max_len]

    def _taken(candidate: str) -> bool:
        stmt = select(model.id).where(model.slug == candidate)
        if exclude_id is not None:
            stmt = stmt.where(model.id != exclude_id)
        return db.scalar(stmt.limit(1)) is not None

    if not _taken(base):
        return base

    idx = 2
    while True:
        suffix = f"-{idx}"
        candidate = base
        if max_len and len(candidate) + len(suffix) > max_len:
            candidate = candidate[: max_len - len(suffix)]
        candidate = (candidate + suffix).strip("-")
        if not _taken(candidate):
            return candidate
        idx += 1
