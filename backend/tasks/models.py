import uuid

from django.db import models
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .choices import TaskPriority, TaskStatus


class Task(models.Model):
    """
    A unit of work assigned to one employee of an organization.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    organization = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tasks',
        verbose_name=_("organization")
    )

    # Deleting an employee deletes their tasks
    employee = models.ForeignKey(
        'employees.Employee',
        on_delete=models.CASCADE,
        related_name='tasks',
        verbose_name=_("assigned employee")
    )

    title = models.CharField(max_length=255, verbose_name=_("title"))
    description = models.TextField(blank=True, default='', verbose_name=_("description"))

    status = models.CharField(
        max_length=20,
        choices=TaskStatus.choices,
        default=TaskStatus.TODO,
        db_index=True,
        verbose_name=_("status")
    )
    priority = models.CharField(
        max_length=10,
        choices=TaskPriority.choices,
        default=TaskPriority.MEDIUM,
        verbose_name=_("priority")
    )

    deadline = models.DateTimeField(
        null=True, blank=True,
        verbose_name=_("deadline"),
        help_text=_("The deadline for the task.")
    )
    completed_at = models.DateTimeField(
        null=True, blank=True,
        verbose_name=_("completed at"),
        help_text=_("Set when the task enters COMPLETED, cleared when it leaves it.")
    )

    # On-chain proof of completion, recorded by the client after the fact
    tx_hash = models.CharField(max_length=255, null=True, blank=True, verbose_name=_("transaction hash"))
    skill_required = models.CharField(max_length=100, null=True, blank=True, verbose_name=_("skill required"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("Task")
        verbose_name_plural = _("Tasks")
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['organization', 'status'], name='task_org_status_idx'),
        ]

    def __str__(self):
        return f"{self.title} [{self.status}]"

    def set_status(self, status, now=None):
        """
        Move the task to ``status`` keeping completed_at in step with it:
        stamped on entering COMPLETED, cleared on leaving it. Re-completing an
        already completed task keeps the original timestamp.
        """
        if status == TaskStatus.COMPLETED:
            if self.status != TaskStatus.COMPLETED or self.completed_at is None:
                self.completed_at = now or timezone.now()
        else:
            self.completed_at = None
        self.status = status
