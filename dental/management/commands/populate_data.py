"""
Management command to populate the database with demo data: the
procedure price list, a handful of patients and a week of appointments.
"""
import random
from datetime import date, timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from dental.models import Appointment, Patient, Procedure, Role, User

PROCEDURES = [
    ("Prevention", "Cleaning (prophylaxis)", Decimal("150.00")),
    ("Prevention", "Fluoride application", Decimal("80.00")),
    ("Restorative", "Composite restoration", Decimal("250.00")),
    ("Restorative", "Amalgam restoration", Decimal("180.00")),
    ("Endodontics", "Root canal - single root", Decimal("700.00")),
    ("Endodontics", "Root canal - multiple roots", Decimal("1100.00")),
    ("Surgery", "Simple extraction", Decimal("200.00")),
    ("Surgery", "Wisdom tooth extraction", Decimal("450.00")),
    ("Prosthetics", "Porcelain crown", Decimal("1500.00")),
    ("Orthodontics", "Brace maintenance", Decimal("180.00")),
]

PATIENT_NAMES = [
    "Maria Oliveira", "João Pereira", "Ana Costa", "Pedro Santos",
    "Juliana Alves", "Lucas Rocha", "Fernanda Dias", "Rafael Gomes",
]


class Command(BaseCommand):
    help = 'Populate database with demo data'

    def add_arguments(self, parser):
        parser.add_argument('--seed', type=int, default=None)

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        dentists = list(User.objects.filter(role=Role.DENTIST, is_active=True))
        if not dentists:
            raise CommandError('No dentist accounts found; run ensure_test_users first')

        created = 0
        for category, name, price in PROCEDURES:
            _, was_created = Procedure.objects.get_or_create(name=name, defaults={'category': category, 'price': price})
            created += was_created
        self.stdout.write(f'procedures: {created} created')

        patients = []
        for i, name in enumerate(PATIENT_NAMES):
            national_id = f'{90000000000 + i:011d}'
            patient, _ = Patient.objects.get_or_create(
                national_id=national_id,
                defaults={
                    'name': name,
                    'phone': f'(11) 9{rng.randint(1000, 9999)}-{rng.randint(1000, 9999)}',
                    'birth_date': date(1960, 1, 1) + timedelta(days=rng.randint(0, 365 * 45)),
                },
            )
            patients.append(patient)
        self.stdout.write(f'patients: {len(patients)} ensured')

        # one week of half-hour slots between 09:00 and 17:00, skipping taken ones
        start = timezone.localtime().replace(hour=9, minute=0, second=0, microsecond=0) + timedelta(days=1)
        booked = 0
        for patient in patients:
            dentist = rng.choice(dentists)
            slot = start + timedelta(days=rng.randint(0, 6), minutes=30 * rng.randint(0, 15))
            clash = Appointment.objects.filter(dentist=dentist, date=slot).exclude(
                status=Appointment.Status.CANCELED
            ).exists()
            if clash:
                continue
            Appointment.objects.create(patient=patient, dentist=dentist, date=slot, notes='Routine check-up')
            booked += 1
        self.stdout.write(self.style.SUCCESS(f'appointments: {booked} booked'))
