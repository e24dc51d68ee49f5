# insights/tests/test_cache.py
"""
AI Response Cache Tests
=======================

1. Hit before expiry returns stored content without generating
2. Expired entry regenerates and its row is removed
3. force_refresh always regenerates and overwrites
4. Identical keys under two organizations are isolated
5. Failure paths: generator errors, stale-delete errors, bad inputs
"""

from __future__ import annotations

import datetime
from unittest.mock import MagicMock, patch

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase

from insights.cache import (
    CACHE_KEY_MAX_LENGTH,
    DatabaseCacheStore,
    ResponseCache,
    make_cache_key,
)
from insights.exceptions import GenerationError
from insights.models import AICache
from workforce.tests.factories import create_organization


class FakeClock:
    """Settable clock for deterministic expiry."""

    def __init__(self, now: datetime.datetime) -> None:
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += datetime.timedelta(**kwargs)


START = datetime.datetime(2024, 1, 15, 12, 0, 0, tzinfo=datetime.timezone.utc)


# ===========================================================================
# KEY DERIVATION
# ===========================================================================


class TestMakeCacheKey(SimpleTestCase):

    def test_kind_only(self) -> None:
        self.assertEqual(make_cache_key("skill-gap"), "skill-gap")

    def test_qualifier_is_normalized(self) -> None:
        self.assertEqual(make_cache_key("smart-assign", "  Python "), "smart-assign:python")
        self.assertEqual(
            make_cache_key("smart-assign", "PYTHON"), make_cache_key("smart-assign", "python")
        )

    def test_long_qualifier_is_hashed(self) -> None:
        key = make_cache_key("smart-assign", "x" * 400)

        self.assertLessEqual(len(key), CACHE_KEY_MAX_LENGTH)
        self.assertTrue(key.startswith("smart-assign:"))
        self.assertEqual(key, make_cache_key("smart-assign", "X" * 400))


# ===========================================================================
# CACHE BEHAVIOUR (database-backed)
# ===========================================================================


class TestResponseCache(TestCase):

    def setUp(self) -> None:
        self.org = create_organization("Acme")
        self.clock = FakeClock(START)
        self.cache = ResponseCache(clock=self.clock)

    def test_miss_generates_and_stores(self) -> None:
        generate = MagicMock(return_value='{"insight": "first"}')

        result = self.cache.get_or_compute(self.org.pk, "daily-insight", 24, False, generate)

        self.assertEqual(result, '{"insight": "first"}')
        generate.assert_called_once_with()
        entry = AICache.objects.get(organization=self.org, cache_key="daily-insight")
        self.assertEqual(entry.content, '{"insight": "first"}')
        self.assertEqual(entry.expires_at, START + datetime.timedelta(hours=24))

    def test_hit_before_expiry_skips_generation(self) -> None:
        self.cache.get_or_compute(self.org.pk, "daily-insight", 24, False, lambda: "stored")
        self.clock.advance(hours=23, minutes=59)
        generate = MagicMock(return_value="fresh")

        result = self.cache.get_or_compute(self.org.pk, "daily-insight", 24, False, generate)

        self.assertEqual(result, "stored")
        generate.assert_not_called()

    def test_entry_expiring_exactly_now_is_still_a_hit(self) -> None:
        self.cache.get_or_compute(self.org.pk, "daily-insight", 24, False, lambda: "stored")
        self.clock.advance(hours=24)

        result = self.cache.get_or_compute(self.org.pk, "daily-insight", 24, False, lambda: "fresh")

        self.assertEqual(result, "stored")

    def test_expired_entry_regenerates_and_replaces_row(self) -> None:
        self.cache.get_or_compute(self.org.pk, "skill-gap", 24, False, lambda: "old")
        old_id = AICache.objects.get(cache_key="skill-gap").id
        self.clock.advance(hours=25)

        result = self.cache.get_or_compute(self.org.pk, "skill-gap", 24, False, lambda: "new")

        self.assertEqual(result, "new")
        self.assertFalse(AICache.objects.filter(id=old_id).exists())
        entry = AICache.objects.get(organization=self.org, cache_key="skill-gap")
        self.assertEqual(entry.content, "new")
        self.assertEqual(entry.expires_at, self.clock.now + datetime.timedelta(hours=24))

    def test_force_refresh_regenerates_and_overwrites(self) -> None:
        self.cache.get_or_compute(self.org.pk, "skill-gap", 24, False, lambda: "old")
        self.clock.advance(hours=1)
        generate = MagicMock(return_value="new")

        result = self.cache.get_or_compute(self.org.pk, "skill-gap", 24, True, generate)

        self.assertEqual(result, "new")
        generate.assert_called_once_with()
        entry = AICache.objects.get(organization=self.org, cache_key="skill-gap")
        self.assertEqual(entry.content, "new")
        self.assertEqual(entry.expires_at, self.clock.now + datetime.timedelta(hours=24))
        self.assertEqual(AICache.objects.count(), 1)

    def test_organizations_are_isolated(self) -> None:
        other = create_organization("Globex")
        self.cache.get_or_compute(self.org.pk, "skill-gap", 24, False, lambda: "acme")

        result = self.cache.get_or_compute(other.pk, "skill-gap", 24, False, lambda: "globex")

        self.assertEqual(result, "globex")
        self.assertEqual(
            self.cache.get_or_compute(self.org.pk, "skill-gap", 24, False, lambda: "unused"),
            "acme",
        )
        self.assertEqual(AICache.objects.filter(cache_key="skill-gap").count(), 2)

    def test_generator_error_propagates_and_nothing_is_cached(self) -> None:
        def failing():
            raise GenerationError("provider down", "CONNECTION_ERROR")

        with self.assertRaises(GenerationError):
            self.cache.get_or_compute(self.org.pk, "skill-gap", 24, False, failing)

        self.assertFalse(AICache.objects.exists())

    def test_generator_error_keeps_expired_entry_out(self) -> None:
        self.cache.get_or_compute(self.org.pk, "skill-gap", 24, False, lambda: "old")
        self.clock.advance(hours=48)

        def failing():
            raise GenerationError("timeout", "TIMEOUT")

        with self.assertRaises(GenerationError):
            self.cache.get_or_compute(self.org.pk, "skill-gap", 24, False, failing)

        self.assertFalse(AICache.objects.exists())

    def test_stale_delete_failure_is_logged_and_regeneration_continues(self) -> None:
        self.cache.get_or_compute(self.org.pk, "skill-gap", 24, False, lambda: "old")
        self.clock.advance(hours=25)

        with patch.object(DatabaseCacheStore, "delete", side_effect=DatabaseError("locked")):
            with self.assertLogs("insights.cache", level="WARNING") as logs:
                result = self.cache.get_or_compute(
                    self.org.pk, "skill-gap", 24, False, lambda: "new"
                )

        self.assertEqual(result, "new")
        self.assertIn("locked", logs.output[0])
        self.assertEqual(AICache.objects.get(cache_key="skill-gap").content, "new")

    def test_non_positive_ttl_is_rejected_before_reading(self) -> None:
        store = MagicMock()
        cache = ResponseCache(store=store, clock=self.clock)

        for ttl in (0, -1):
            with self.assertRaises(ValueError):
                cache.get_or_compute(self.org.pk, "skill-gap", ttl, False, lambda: "x")

        store.get.assert_not_called()

    def test_non_string_result_is_rejected_and_not_cached(self) -> None:
        with self.assertRaises(TypeError):
            self.cache.get_or_compute(self.org.pk, "skill-gap", 24, False, lambda: {"a": 1})

        self.assertFalse(AICache.objects.exists())


class TestStorageErrors(SimpleTestCase):
    """Storage failures on lookup and upsert are not swallowed."""

    def test_lookup_error_propagates(self) -> None:
        store = MagicMock()
        store.get.side_effect = DatabaseError("connection lost")
        generate = MagicMock()

        with self.assertRaises(DatabaseError):
            ResponseCache(store=store).get_or_compute("org", "k", 1, False, generate)

        generate.assert_not_called()

    def test_upsert_error_propagates(self) -> None:
        store = MagicMock()
        store.get.return_value = None
        store.upsert.side_effect = DatabaseError("disk full")

        with self.assertRaises(DatabaseError):
            ResponseCache(store=store).get_or_compute("org", "k", 1, False, lambda: "x")

    def test_force_refresh_does_not_read(self) -> None:
        store = MagicMock()

        ResponseCache(store=store, clock=FakeClock(START)).get_or_compute(
            "org", "k", 6, True, lambda: "x"
        )

        store.get.assert_not_called()
        store.upsert.assert_called_once_with(
            "org", "k", "x", START + datetime.timedelta(hours=6)
        )
