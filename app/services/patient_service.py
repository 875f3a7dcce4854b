from sqlalchemy.orm import Session
from app.models.patient import Patient
from app.utils.errors import NotFoundError


class PatientService:
    @staticmethod
    def ensure_patient(db: Session, user_id: int) -> Patient:
        patient = db.query(Patient).filter(Patient.user_id == int(user_id)).first()
        if not patient:
            raise NotFoundError("Patient profile not found")
        return patient
