# care/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand

from care.models import User

TEST_SET = [
    ("admin@clinic.test", "Test Admin", User.ROLE_ADMIN, {}),
    ("triage@clinic.test", "Test Triage", User.ROLE_TRIAGE, {"department": "general"}),
    ("doctor@clinic.test", "Test Doctor", User.ROLE_DOCTOR,
     {"specialization": "cardiologist", "department": "cardiology"}),
    ("patient@clinic.test", "Test Patient", User.ROLE_PATIENT, {}),
]


class Command(BaseCommand):
    help = "Ensure one test user per role exists with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="Clinic-Test-2025")

    def handle(self, *args, **opts):
        password = opts["password"]
        for email, name, role, profile in TEST_SET:
            u, created = User.objects.get_or_create(
                email=email,
                defaults={"username": email, "name": name, "role": role, "is_active": True, **profile},
            )
            # reset password, role and active flag on every run
            u.set_password(password)
            u.role = role
            u.is_active = True
            u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
