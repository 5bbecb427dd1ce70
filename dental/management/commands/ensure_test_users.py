# dental/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand

from dental.models import Role, User

TEST_SET = [
    ("admin@clinic.test", "Clinic Admin", Role.ADMIN),
    ("dentist@clinic.test", "Dr. Ana Souza", Role.DENTIST),
    ("secretary@clinic.test", "Carla Lima", Role.SECRETARY),
]


class Command(BaseCommand):
    help = "Ensure one account per role exists with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="clinic-dev-123")

    def handle(self, *args, **opts):
        password = opts["password"]
        for email, name, role in TEST_SET:
            u = User.objects.filter(email=email).first()
            if u is None:
                u = User(email=email)
            # reset name, role, password and active flag on every run
            u.name = name
            u.role = role
            u.is_active = True
            u.set_password(password)
            u.save()
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
