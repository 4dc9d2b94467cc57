from __future__ import annotations

from django.core.management.base import BaseCommand
from django.core.management.base import CommandParser
from django.db import transaction
from django.utils import timezone

from cxo_survey.employees.models import Employee
from cxo_survey.org.models import Department
from cxo_survey.org.models import Organization

SAMPLE_ORG_NAME = "Sample Organization"
SAMPLE_DEPARTMENT_NAME = "Engineering"


class Command(BaseCommand):
    help = "Create or update an admin, a CEO and a user with a sample organization"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--admin-email", default="admin@example.com")
        parser.add_argument("--admin-password", default="Admin@123456")
        parser.add_argument("--ceo-email", default="ceo@example.com")
        parser.add_argument("--ceo-password", default="Ceo@123456")
        parser.add_argument("--user-email", default="user@example.com")
        parser.add_argument("--user-password", default="User@123456")

    @transaction.atomic
    def handle(self, *args, **options) -> None:
        self._upsert(
            options["admin_email"],
            options["admin_password"],
            name="Platform Admin",
            role=Employee.Role.ADMIN,
            is_staff=True,
            is_superuser=True,
        )

        org, created = Organization.objects.get_or_create(
            name=SAMPLE_ORG_NAME,
            defaults={
                "ceo_email": options["ceo_email"].lower(),
                "status": Organization.Status.ACTIVE,
            },
        )
        if created:
            self.stdout.write(f"Created organization {org.name}")
        department, _ = Department.objects.get_or_create(
            name=SAMPLE_DEPARTMENT_NAME, organization=org
        )

        ceo = self._upsert(
            options["ceo_email"],
            options["ceo_password"],
            name="Sample CEO",
            role=Employee.Role.CEO,
            organization=org,
        )
        org.ceo = ceo
        org.ceo_email = ceo.email
        org.status = Organization.Status.ACTIVE
        org.save(update_fields=["ceo", "ceo_email", "status"])

        self._upsert(
            options["user_email"],
            options["user_password"],
            name="Sample User",
            role=Employee.Role.USER,
            organization=org,
            department=department,
        )
        self.stdout.write(self.style.SUCCESS("Seed accounts ready"))

    def _upsert(self, email: str, password: str, **fields) -> Employee:
        email = email.strip().lower()
        employee = Employee.objects.filter(email__iexact=email).first()
        created = employee is None
        if created:
            employee = Employee(email=email)
        for name, value in fields.items():
            setattr(employee, name, value)
        employee.invite_status = Employee.InviteStatus.ACCEPTED
        employee.accepted_at = employee.accepted_at or timezone.now()
        employee.invite_token = ""
        employee.is_active = True
        employee.set_password(password)
        employee.save()
        verb = "Created" if created else "Updated"
        self.stdout.write(f"{verb} {employee.role} {employee.email}")
        return employee
