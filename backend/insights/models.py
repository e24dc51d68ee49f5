import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class AICache(models.Model):
    """
    One cached AI answer per (organization, cache_key). Expired rows are
    removed lazily by the next lookup that finds them.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    organization = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='ai_cache_entries',
        verbose_name=_("organization")
    )
    cache_key = models.CharField(max_length=255, verbose_name=_("cache key"))

    # Opaque to the cache; callers store JSON text
    content = models.TextField(verbose_name=_("content"))

    expires_at = models.DateTimeField(db_index=True, verbose_name=_("expires at"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        verbose_name = _("AI cache entry")
        verbose_name_plural = _("AI cache entries")
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'cache_key'],
                name='unique_ai_cache_key_per_organization',
            ),
        ]

    def __str__(self):
        return f"{self.cache_key} (expires {self.expires_at:%Y-%m-%d %H:%M})"
