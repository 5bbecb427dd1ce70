from dental.exceptions import NotFoundError
from dental.models import MedicalRecord, Patient
from dental.policies import AccessContext


def format_record(r: MedicalRecord) -> dict:
    return {
        'id': r.id,
        'patientId': r.patient_id,
        'dentistId': r.dentist_id,
        'description': r.description,
        'date': r.date.isoformat(),
        'patient': {'id': r.patient.id, 'name': r.patient.name},
        'dentist': {'id': r.dentist.id, 'name': r.dentist.name},
    }


def create_record(ctx: AccessContext, *, patient_id: int, description: str) -> MedicalRecord:
    """Append a clinical note written by the acting dentist."""
    patient = Patient.objects.filter(id=patient_id).first()
    if not patient:
        raise NotFoundError('Patient not found')
    record = MedicalRecord.objects.create(patient=patient, dentist_id=ctx.user_id, description=description)
    return MedicalRecord.objects.select_related('patient', 'dentist').get(id=record.id)


def list_records():
    return MedicalRecord.objects.select_related('patient', 'dentist').order_by('-date', '-id')


def list_records_for_patient(patient_id: int):
    if not Patient.objects.filter(id=patient_id).exists():
        raise NotFoundError('Patient not found')
    return list_records().filter(patient_id=patient_id)
