# tests/test_slugs.py
from __future__ import annotations

import itertools
import random

import pytest

from ADMS.utils.slugs import (
    capitalize_first_letter,
    generate_unique_slug,
    resolve_unique_slug,
    slugify,
)


class _FixedRandom:
    """randint always lands on the same value."""

    def __init__(self, value: int):
        self.value = value

    def randint(self, a: int, b: int) -> int:
        return self.value


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Mathematics", "mathematics"),
        ("Computer Science", "computer-science"),
        ("  Arts & Humanities!  ", "arts-humanities"),
        ("Café Déjà-Vu", "cafe-deja-vu"),
        ("R&D -- 2024", "r-d-2024"),
        ("!!!", ""),
    ],
)
def test_slugify_examples(name, expected):
    assert slugify(name) == expected


@pytest.mark.parametrize("name", ["Applied Physics", "Über Ökonomie", "a  b--c", "MiXeD_case 42"])
def test_slugify_is_deterministic_and_idempotent(name):
    once = slugify(name)
    assert once == slugify(name)
    assert slugify(once) == once
    assert not once.startswith("-") and not once.endswith("-")
    assert set(once) <= set("abcdefghijklmnopqrstuvwxyz0123456789-")


def test_capitalize_first_letter():
    assert capitalize_first_letter("mathematics") == "Mathematics"
    assert capitalize_first_letter("mATH") == "MATH"
    assert capitalize_first_letter("") == ""


# ---------------------------------------------------------------------------
# resolve_unique_slug: sequential suffixes against an async oracle
# ---------------------------------------------------------------------------

def _oracle(taken: set[str]):
    async def exists(candidate: str) -> bool:
        return candidate in taken
    return exists


@pytest.mark.anyio
async def test_resolve_returns_base_when_free():
    assert await resolve_unique_slug("math", _oracle(set())) == "math"


@pytest.mark.anyio
async def test_resolve_appends_first_free_counter():
    assert await resolve_unique_slug("math", _oracle({"math"})) == "math-1"
    assert await resolve_unique_slug("math", _oracle({"math", "math-1"})) == "math-2"
    # a gap is reused
    assert await resolve_unique_slug("math", _oracle({"math", "math-2"})) == "math-1"


@pytest.mark.anyio
async def test_resolve_empty_base_uses_fallback():
    assert await resolve_unique_slug("", _oracle(set())) == "department"
    assert await resolve_unique_slug("", _oracle({"department"})) == "department-1"
    assert await resolve_unique_slug("", _oracle(set()), fallback="course") == "course"


# ---------------------------------------------------------------------------
# generate_unique_slug: in-memory set, random suffix, timestamp fallback
# ---------------------------------------------------------------------------

def test_generate_takes_bare_slug_and_records_it():
    existing: set[str] = set()
    slug, name = generate_unique_slug(existing, lambda: "Organic Chemistry")
    assert (slug, name) == ("organic-chemistry", "Organic Chemistry")
    assert existing == {"organic-chemistry"}


def test_generate_adds_random_suffix_on_collision():
    existing = {"organic-chemistry"}
    slug, name = generate_unique_slug(existing, lambda: "Organic Chemistry", rng=_FixedRandom(42))
    assert slug == "organic-chemistry-42"
    assert name == "Organic Chemistry"
    assert "organic-chemistry-42" in existing


def test_generate_falls_back_to_timestamp_after_max_attempts():
    existing = {"same", "same-7"}
    slug, name = generate_unique_slug(
        existing, lambda: "Same", prefix="course", max_attempts=3, rng=_FixedRandom(7)
    )
    assert slug.startswith("course-")
    stamp = slug.removeprefix("course-")
    assert stamp.isdigit()
    assert name == f"Course {stamp}"
    assert slug in existing


def test_generate_never_repeats_a_slug():
    existing: set[str] = set()
    names = itertools.cycle(["Biology", "Biology", "Biology", "Chemistry"])
    rng = random.Random(3)
    slugs = [
        generate_unique_slug(existing, lambda: next(names), rng=rng)[0]
        for _ in range(100)
    ]
    assert len(set(slugs)) == len(slugs) == 100
    assert all(s == slugify(s) for s in slugs)
