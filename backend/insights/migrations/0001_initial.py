import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AICache',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('cache_key', models.CharField(max_length=255, verbose_name='cache key')),
                ('content', models.TextField(verbose_name='content')),
                ('expires_at', models.DateTimeField(db_index=True, verbose_name='expires at')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ai_cache_entries', to=settings.AUTH_USER_MODEL, verbose_name='organization')),
            ],
            options={
                'verbose_name': 'AI cache entry',
                'verbose_name_plural': 'AI cache entries',
                'constraints': [models.UniqueConstraint(fields=('organization', 'cache_key'), name='unique_ai_cache_key_per_organization')],
            },
        ),
    ]
