from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple
import re


UNKNOWN_CATEGORY = "unknown_category"
INVALID_TOTAL_MARKS = "invalid_total_marks"


def _read_only(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class AssessmentCategory:
    name: str
    weight: float


@dataclass(frozen=True)
class Subject:
    subject_id: str
    name: str


@dataclass(frozen=True)
class Assessment:
    assessment_id: str
    subject_id: str
    category: str
    total_marks: float
    scores: Mapping[str, Optional[float]] = field(default_factory=dict, hash=False)
    topic: str = ""
    teacher_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "scores", _read_only(self.scores))

    def score_for(self, student_id: str) -> Optional[float]:
        return self.scores.get(student_id)


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    assessment_id: str
    detail: str


@dataclass(frozen=True)
class SubjectScore:
    subject_id: str
    subject_name: str
    score: int


@dataclass(frozen=True)
class StudentPerformanceSummary:
    student_id: str
    subjects: Tuple[SubjectScore, ...]
    overall: int
    letter: str
    diagnostics: Tuple[Diagnostic, ...] = ()


@dataclass(frozen=True)
class AssessmentAverage:
    assessment_id: str
    subject_id: str
    average: Optional[int]
    scored_count: int


@dataclass(frozen=True)
class ClassAggregate:
    assessments: Tuple[AssessmentAverage, ...]
    student_overalls: Mapping[str, int] = field(hash=False)
    overall: int
    letter: str
    diagnostics: Tuple[Diagnostic, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "student_overalls", _read_only(self.student_overalls))


@dataclass(frozen=True)
class WeightValidation:
    total: float
    errors: Tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class Enrollment:
    program_id: str
    level: str


@dataclass(frozen=True)
class StudentAdmission:
    student_id: str
    enrollments: Tuple[Enrollment, ...] = ()


@dataclass(frozen=True)
class Admission:
    school_year: str
    students: Tuple[StudentAdmission, ...] = ()
    classes: Tuple[Enrollment, ...] = ()


@dataclass(frozen=True)
class ClassRoster:
    school_year: str
    program_id: str
    level: str
    student_ids: FrozenSet[str] = frozenset()

    @property
    def class_id(self) -> str:
        return re.sub(r"\s+", "-", f"{self.school_year}_{self.program_id}_{self.level}")


@dataclass(frozen=True)
class AttendanceRecord:
    student_id: str
    class_id: str
    date: date
    status: str
    minutes_late: int = 0


@dataclass(frozen=True)
class AttendanceSummary:
    rate: int
    absences: int
    total_days: int
