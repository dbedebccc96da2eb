# clinic_core/patients/domain.py
"""
In-memory patient aggregate, independent of storage and wire format.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


class Gender(enum.Enum):
    UNSPECIFIED = 0
    MALE = 1
    FEMALE = 2


@dataclass
class PersonalId:
    id: str = ""
    type: str = ""


@dataclass
class EmergencyContact:
    name: str = ""
    closeness: str = ""
    phone: str = ""
    # assigned by storage; patient_id is only ever set by the repository
    id: Optional[int] = None
    patient_id: Optional[int] = None


@dataclass
class PatientRecord:
    name: str = ""
    personal_id: PersonalId = field(default_factory=PersonalId)
    gender: Gender = Gender.UNSPECIFIED
    birth_date: Optional[date] = None
    phone_number: str = ""
    languages: List[str] = field(default_factory=list)
    referred_by: str = ""
    special_note: str = ""
    emergency_contacts: List[EmergencyContact] = field(default_factory=list)
    active: bool = True
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    def age_in(self, year: int) -> int:
        """
        Coarse age: year difference only, birthdays are not taken into account.
        """
        return year - self.birth_date.year
