import uuid

from django.db import models
from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.utils.translation import gettext_lazy as _


class Employee(models.Model):
    """
    A member of an organization's workforce. Tasks are assigned to employees
    and productivity scores are computed per employee.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Tenant boundary: every employee belongs to exactly one organization
    organization = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='employees',
        verbose_name=_("organization")
    )

    name = models.CharField(max_length=255, verbose_name=_("name"))
    email = models.EmailField(verbose_name=_("email"))
    role = models.CharField(
        max_length=100,
        verbose_name=_("role"),
        help_text=_("Job title, e.g. Engineer, Designer, Manager.")
    )
    department = models.CharField(max_length=100, blank=True, default='', verbose_name=_("department"))

    # Free-form list of skill names, e.g. ["Python", "SQL"]
    skills = models.JSONField(default=list, blank=True, verbose_name=_("skills"))

    wallet_address = models.CharField(max_length=255, null=True, blank=True, verbose_name=_("wallet address"))

    # Hashed with Django's password hashers; set via set_password()
    password = models.CharField(max_length=128, blank=True, verbose_name=_("password"))

    # Soft delete mechanism: inactive employees cannot log in
    is_active = models.BooleanField(default=True, verbose_name=_("is active"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("Employee")
        verbose_name_plural = _("Employees")
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'email'],
                name='unique_employee_email_per_organization',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.role})"

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        if not self.password:
            return False
        return check_password(raw_password, self.password)
