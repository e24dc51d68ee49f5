import uuid

from django.db import models
from django.contrib.auth.base_user import AbstractBaseUser
from django.utils.translation import gettext_lazy as _
from .managers import OrganizationManager


class Organization(AbstractBaseUser):
    """
    The tenant account. Organizations log in with email and password and own
    every employee, task and cached AI answer in the system.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(_('name'), max_length=255)

    email = models.EmailField(
        _('email address'),
        unique=True
    )

    is_active = models.BooleanField(
        _('active'),
        default=True,
        help_text=_(
            'Designates whether this organization can log in. '
            'Unselect this instead of deleting accounts.'
        ),
    )
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    # ------------------ Model Configuration ------------------
    objects = OrganizationManager()

    # The field used for authentication (login)
    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'

    # Fields required when creating an account via createsuperuser
    REQUIRED_FIELDS = ['name']

    class Meta:
        verbose_name = _('organization')
        verbose_name_plural = _('organizations')
        ordering = ['name']

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name

    def __str__(self):
        return f'{self.name} <{self.email}>'
