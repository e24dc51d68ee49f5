# employees/tasks.py

import logging
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from .models import Employee

# Configure logging for background worker monitoring
logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(OSError,),
    retry_backoff=True,
    retry_backoff_max=600,  # Max backoff of 10 minutes
    max_retries=3,
    time_limit=30,          # Hard limit for the task process
    soft_time_limit=25      # Soft limit to allow cleanup
)
def send_welcome_email(self, employee_id: str, temporary_password: str) -> bool:
    """
    Worker: email a newly created employee their login details.
    Input = (employee_id, temporary_password) only; everything else is
    fetched from the DB so a retried task sees current data.
    """
    employee = (
        Employee.objects
        .select_related('organization')
        .filter(id=employee_id)
        .first()
    )
    if not employee:
        logger.warning(f"Employee {employee_id} not found. Skipping welcome email.")
        return False

    organization_name = employee.organization.name or "Your Organization"
    body = (
        f"Hi {employee.name},\n\n"
        f"{organization_name} has added you to its workspace.\n\n"
        f"Email: {employee.email}\n"
        f"Temporary password: {temporary_password}\n\n"
        f"Sign in at {settings.FRONTEND_URL} and change your password.\n"
    )

    send_mail(
        subject=f"Welcome to {organization_name}",
        message=body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[employee.email],
    )
    logger.info(f"Welcome email sent to employee {employee_id}")
    return True
