"""
Patient Registry and Recording Log - In-memory clinical records
===============================================================

This module provides the patient and consultation-recording records
behind the web API. Both live in a MemoryStore owned by the caller,
so their lifetime is the lifetime of the process.

Every create and delete is written to the audit log.
"""

from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field, asdict

from core.clock import iso_timestamp, days_ago
from core.exceptions import ValidationError
from core.logging import get_logger, audit
from core.store import MemoryStore

logger = get_logger("services.records")


@dataclass
class Patient:
    """
    A patient record.

    Field names follow the JSON the web client sends and expects,
    hence the camelCase.
    """
    id: str
    name: str
    age: int
    email: str = ""
    phone: str = ""
    conditions: List[str] = field(default_factory=list)
    medications: List[str] = field(default_factory=list)
    allergies: List[str] = field(default_factory=list)
    bloodType: str = "Unknown"
    emergencyContact: str = ""
    insurance: str = ""
    lastVisit: str = ""
    createdAt: str = ""

    @property
    def has_medical_data(self) -> bool:
        return bool(self.conditions or self.medications)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Recording:
    """A recorded consultation."""
    id: str
    patientName: str = ""
    date: str = ""
    duration: Optional[float] = None
    summary: str = ""
    status: str = "completed"
    createdAt: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


SAMPLE_PATIENTS = [
    {
        "id": "patient_1",
        "name": "John Smith",
        "age": 45,
        "email": "john.smith@example.com",
        "phone": "+1-555-0123",
        "conditions": ["Hypertension", "Type 2 Diabetes"],
        "medications": ["Lisinopril 10mg", "Metformin 500mg"],
        "allergies": ["Penicillin"],
        "bloodType": "A+",
        "emergencyContact": "Jane Smith (555-0124)",
        "insurance": "Medicare Part B",
        "last_visit_days_ago": 0,
    },
    {
        "id": "patient_2",
        "name": "Maria Garcia",
        "age": 32,
        "email": "maria.garcia@example.com",
        "phone": "+1-555-0125",
        "conditions": ["Asthma", "Seasonal Allergies"],
        "medications": ["Albuterol Inhaler", "Loratadine 10mg"],
        "allergies": ["Shellfish"],
        "bloodType": "O+",
        "emergencyContact": "Carlos Garcia (555-0126)",
        "insurance": "Blue Cross Blue Shield",
        "last_visit_days_ago": 7,
    },
    {
        "id": "patient_3",
        "name": "Robert Johnson",
        "age": 68,
        "email": "robert.johnson@example.com",
        "phone": "+1-555-0127",
        "conditions": ["COPD", "Heart Failure"],
        "medications": ["Spiriva", "Lasix 40mg", "Carvedilol"],
        "allergies": ["Sulfa", "Iodine"],
        "bloodType": "B-",
        "emergencyContact": "Sarah Johnson (555-0128)",
        "insurance": "Medicare Advantage",
        "last_visit_days_ago": 2,
    },
]


class PatientRegistry:
    """
    Create, look up, list and delete patients.

    Example:
        registry = PatientRegistry(MemoryStore("patients", label="Patient"))
        patient = registry.create({"name": "Jane Doe", "age": 40})
        registry.get(patient.id)
    """

    ID_PREFIX = "patient"

    def __init__(self, store: Optional[MemoryStore] = None):
        self.store = store or MemoryStore("patients", label="Patient")

    def seed_samples(self) -> None:
        """Load the three demo patients."""
        for sample in SAMPLE_PATIENTS:
            data = dict(sample)
            offset = data.pop("last_visit_days_ago")
            patient = Patient(lastVisit=days_ago(offset), **data)
            self.store.put(patient.id, patient)

        logger.info(f"Seeded {len(SAMPLE_PATIENTS)} sample patients")

    def create(self, data: Dict[str, Any]) -> Patient:
        """
        Create a patient.

        Args:
            data: Patient fields; ``name`` and ``age`` are required

        Returns:
            The stored Patient

        Raises:
            ValidationError: If name or age is missing
        """
        if not data.get("name") or not data.get("age"):
            raise ValidationError("Name and age are required")

        now = iso_timestamp()
        patient = Patient(
            id=self.store.generate_id(self.ID_PREFIX),
            name=data["name"],
            age=data["age"],
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            conditions=list(data.get("conditions") or []),
            medications=list(data.get("medications") or []),
            allergies=list(data.get("allergies") or []),
            bloodType=data.get("bloodType") or "Unknown",
            emergencyContact=data.get("emergencyContact") or "",
            insurance=data.get("insurance") or "",
            lastVisit=now,
            createdAt=now,
        )
        self.store.put(patient.id, patient)

        audit("patient.created", id=patient.id, has_medical_data=patient.has_medical_data)
        return patient

    def get(self, patient_id: str) -> Patient:
        """
        Raises:
            NotFoundError: If the patient is unknown
        """
        return self.store.get(patient_id)

    def list(self) -> List[Patient]:
        return self.store.values()

    def delete(self, patient_id: str) -> None:
        """
        Raises:
            NotFoundError: If the patient is unknown
        """
        self.store.delete(patient_id)
        audit("patient.deleted", id=patient_id)

    def __len__(self) -> int:
        return len(self.store)


class RecordingLog:
    """
    Consultation recordings, listed newest first.
    """

    ID_PREFIX = "rec"

    def __init__(self, store: Optional[MemoryStore] = None):
        self.store = store or MemoryStore("recordings", label="Recording")

    def create(self, data: Dict[str, Any]) -> Recording:
        """Create a recording from ``patientName``, ``duration`` and ``summary``."""
        now = iso_timestamp()
        recording = Recording(
            id=self.store.generate_id(self.ID_PREFIX),
            patientName=data.get("patientName") or "",
            date=now,
            duration=data.get("duration"),
            summary=data.get("summary") or "",
            createdAt=now,
        )
        self.store.put(recording.id, recording)

        audit("recording.created", id=recording.id)
        return recording

    def get(self, recording_id: str) -> Recording:
        """
        Raises:
            NotFoundError: If the recording is unknown
        """
        return self.store.get(recording_id)

    def list(self) -> List[Recording]:
        # ISO-8601 UTC strings sort chronologically; ids break same-ms ties
        return sorted(self.store.values(), key=lambda r: (r.date, r.id), reverse=True)

    def delete(self, recording_id: str) -> None:
        """
        Raises:
            NotFoundError: If the recording is unknown
        """
        self.store.delete(recording_id)
        audit("recording.deleted", id=recording_id)

    def __len__(self) -> int:
        return len(self.store)
