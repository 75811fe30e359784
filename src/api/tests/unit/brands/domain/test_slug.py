"""Unit tests for workspace slug generation."""

from datetime import UTC, datetime

import pytest

from brands.domain.slug import FALLBACK_SLUG, MAX_SLUG_LENGTH, slug_candidates, slugify


class TestSlugify:
    """Tests for slugify."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Acme Co", "acme-co"),
            ("  Acme   Co  ", "acme-co"),
            ("Café Acme & Co.", "cafe-acme-co"),
            ("ACME--co!!", "acme-co"),
            ("123 Studio", "123-studio"),
        ],
    )
    def test_slugifies_names(self, name, expected):
        assert slugify(name) == expected

    def test_falls_back_when_nothing_is_left(self):
        assert slugify("!!!") == FALLBACK_SLUG
        assert slugify("日本") == FALLBACK_SLUG

    def test_truncates_without_trailing_hyphen(self):
        slug = slugify("a" * 49 + " bcd")

        assert len(slug) <= MAX_SLUG_LENGTH
        assert not slug.endswith("-")


class TestSlugCandidates:
    """Tests for the collision sequence."""

    def test_sequence_order(self):
        now = datetime(2026, 1, 1, tzinfo=UTC)

        candidates = list(slug_candidates("acme-co", now))

        assert candidates[0] == "acme-co"
        assert candidates[1] == "acme-co-1"
        assert candidates[10] == "acme-co-10"
        assert candidates[11] == f"acme-co-{int(now.timestamp() * 1000)}"
        assert len(candidates) == 12

    def test_candidates_are_pairwise_distinct(self):
        candidates = list(slug_candidates("brand", datetime.now(UTC)))

        assert len(candidates) == len(set(candidates))
