from __future__ import annotations

import random
import re
import time
import unicodedata
from typing import Awaitable, Callable, MutableSet

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

DEFAULT_MAX_ATTEMPTS = 100


def slugify(name: str) -> str:
    """
    Convert a display name into a lowercase, hyphen-separated, URL-safe slug.

    Accents are folded to ASCII, every run of other characters becomes a
    single hyphen and leading/trailing hyphens are dropped, so
    ``slugify(slugify(x)) == slugify(x)``.
    """
    normalized = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", normalized.lower()).strip("-")


def capitalize_first_letter(value: str) -> str:
    return value[:1].upper() + value[1:]


async def resolve_unique_slug(
    base: str,
    exists: Callable[[str], Awaitable[bool]],
    *,
    fallback: str = "department",
) -> str:
    """Return ``base``, or ``base-1``, ``base-2``... whichever ``exists`` reports unused."""
    base = base or fallback
    slug = base
    counter = 1
    while await exists(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def generate_unique_slug(
    existing: MutableSet[str],
    make_name: Callable[[], str],
    *,
    prefix: str = "course",
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: random.Random | None = None,
) -> tuple[str, str]:
    """
    Draw a ``(slug, name)`` pair whose slug is not in ``existing``.

    Used by the seeders, which check an in-process set instead of the
    database. Each attempt tries the bare slug, then a random 0-999 suffix.
    Once ``max_attempts`` is spent a millisecond timestamp name is used.
    The accepted slug is added to ``existing``.
    """
    rng = rng or random
    for _ in range(max_attempts):
        name = make_name()
        slug = slugify(name)
        if slug and slug not in existing:
            existing.add(slug)
            return slug, name

        with_suffix = f"{slug or prefix}-{rng.randint(0, 999)}"
        if with_suffix not in existing:
            existing.add(with_suffix)
            return with_suffix, name

    stamp = time.time_ns() // 1_000_000
    fallback_slug = f"{prefix}-{stamp}"
    while fallback_slug in existing:
        stamp += 1
        fallback_slug = f"{prefix}-{stamp}"
    existing.add(fallback_slug)
    return fallback_slug, f"{prefix.capitalize()} {stamp}"
