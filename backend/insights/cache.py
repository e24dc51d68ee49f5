# insights/cache.py
"""
Per-organization, TTL-based cache of AI answers.

Entries live in the ``AICache`` table, keyed by (organization, cache_key).
There is no background sweeper: an expired entry is deleted by the lookup
that finds it, and the answer is regenerated.

No lock is taken around generation. Two concurrent misses for the same key
both call the provider and both upsert; the last write wins.
"""

import hashlib
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from .models import AICache

# Configure logging for cache hit/miss monitoring
logger = logging.getLogger(__name__)

CACHE_KEY_MAX_LENGTH = 255


def make_cache_key(kind: str, qualifier: Optional[str] = None) -> str:
    """
    Build a cache key such as ``skill-gap`` or ``smart-assign:python``.

    The qualifier is stripped and lower-cased so that "Python " and "python"
    share an entry. Keys that would not fit the column fall back to the
    SHA256 digest of the normalized qualifier.
    """
    if qualifier is None:
        return kind

    normalized = qualifier.strip().lower()
    key = f"{kind}:{normalized}"
    if len(key) > CACHE_KEY_MAX_LENGTH:
        digest = hashlib.sha256(normalized.encode()).hexdigest()
        key = f"{kind}:{digest}"
    return key


class DatabaseCacheStore:
    """ORM-backed storage for cache entries. Errors are not retried."""

    def get(self, org_id, cache_key: str) -> Optional[AICache]:
        return AICache.objects.filter(organization_id=org_id, cache_key=cache_key).first()

    def upsert(self, org_id, cache_key: str, content: str, expires_at: datetime) -> AICache:
        entry, _ = AICache.objects.update_or_create(
            organization_id=org_id,
            cache_key=cache_key,
            defaults={"content": content, "expires_at": expires_at},
        )
        return entry

    def delete(self, entry_id) -> None:
        # Savepoint, so a failed delete leaves any outer transaction usable
        with transaction.atomic():
            AICache.objects.filter(id=entry_id).delete()


class ResponseCache:
    """
    Read-through cache in front of an AI generation callable.

    Args:
        store: storage collaborator with get/upsert/delete
            (defaults to ``DatabaseCacheStore``).
        clock: zero-argument callable returning an aware datetime
            (defaults to ``django.utils.timezone.now``).
    """

    def __init__(
        self,
        store: Optional[DatabaseCacheStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store or DatabaseCacheStore()
        self.clock = clock or timezone.now

    def get_or_compute(
        self,
        org_id,
        cache_key: str,
        ttl_hours: float,
        force_refresh: bool,
        generate: Callable[[], str],
    ) -> str:
        """
        Return the cached content for (org_id, cache_key) if it has not
        expired; otherwise call ``generate``, store its result for
        ``ttl_hours`` and return it.

        Exceptions from ``generate`` propagate and nothing is stored. Storage
        errors on lookup and upsert propagate too; only the removal of an
        expired entry is best-effort.
        """
        if ttl_hours <= 0:
            raise ValueError(f"ttl_hours must be positive, got {ttl_hours}")

        if not force_refresh:
            entry = self.store.get(org_id, cache_key)
            if entry is not None:
                if entry.expires_at < self.clock():
                    logger.info(f"AI Cache Expired: {cache_key} (org {org_id})")
                    self._discard(entry, cache_key)
                else:
                    logger.debug(f"AI Cache Hit: {cache_key} (org {org_id})")
                    return entry.content
            else:
                logger.info(f"AI Cache Miss: {cache_key} (org {org_id}). Invoking AI Service.")
        else:
            logger.info(f"AI Cache Refresh: {cache_key} (org {org_id}). Invoking AI Service.")

        result = generate()
        if not isinstance(result, str):
            raise TypeError(
                f"generate() must return str, got {type(result).__name__}"
            )

        expires_at = self.clock() + timedelta(hours=ttl_hours)
        self.store.upsert(org_id, cache_key, result, expires_at)
        return result

    def _discard(self, entry: AICache, cache_key: str) -> None:
        try:
            self.store.delete(entry.id)
        except DatabaseError as e:
            logger.warning(f"Failed to delete expired AI cache entry {cache_key}: {e}")
