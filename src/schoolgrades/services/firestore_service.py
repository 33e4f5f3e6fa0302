from datetime import date, datetime
import logging
from typing import Any, Dict, List, Optional, Tuple

try:
    from google.cloud import firestore
    from google.cloud.firestore_v1.base_query import FieldFilter
except ModuleNotFoundError as exc:
    raise ModuleNotFoundError(
        "Missing dependency 'google-cloud-firestore'. Install the project with pip install -e ."
    ) from exc

from schoolgrades.config.settings import Settings, settings as default_settings
from schoolgrades.core.categories import DEFAULT_CATEGORIES
from schoolgrades.core.models import (
    Admission,
    Assessment,
    AssessmentCategory,
    AttendanceRecord,
    Enrollment,
    StudentAdmission,
    Subject,
)


logger = logging.getLogger(__name__)

CATEGORIES_DOCUMENT = "assessmentCategories"


class FirestoreServiceError(Exception):
    pass


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def _enrollments(rows: Optional[List[Dict]]) -> Tuple[Enrollment, ...]:
    return tuple(Enrollment(str(row["programId"]), str(row["level"])) for row in rows or [])


class FirestoreService:
    """Read-only access to the school's records, mapped into core records."""

    def __init__(self, project_id: str, *, client: Any = None, config: Settings = default_settings) -> None:
        if client is None:
            if not project_id:
                raise FirestoreServiceError("Missing FIREBASE_PROJECT_ID in environment")
            client = firestore.Client(project=project_id)
        self.db = client
        self.config = config

    @classmethod
    def from_settings(cls) -> "FirestoreService":
        return cls(default_settings.firebase_project_id)

    def _stream(self, collection: str):
        logger.debug("Loading collection %s", collection)
        return self.db.collection(collection).stream()

    def list_subjects(self) -> List[Subject]:
        results: List[Subject] = []
        for doc in self._stream(self.config.subjects_collection):
            data = doc.to_dict() or {}
            name = data.get("subjectName") or data.get("englishTitle") or doc.id
            results.append(Subject(str(data.get("subjectId") or doc.id), str(name)))
        return results

    def list_assessments(self) -> List[Assessment]:
        results: List[Assessment] = []
        for doc in self._stream(self.config.assessments_collection):
            data = doc.to_dict() or {}
            try:
                scores = {
                    str(student_id): (None if raw is None else float(raw))
                    for student_id, raw in (data.get("scores") or {}).items()
                }
                results.append(
                    Assessment(
                        assessment_id=doc.id,
                        subject_id=str(data["subjectId"]),
                        category=str(data.get("category", "")),
                        total_marks=float(data["totalMarks"]),
                        scores=scores,
                        topic=str(data.get("topic", "")),
                        teacher_id=data.get("teacherId"),
                    )
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise FirestoreServiceError(f"Malformed assessment document {doc.id}: {exc}") from exc
        return results

    def get_assessment_categories(self) -> List[AssessmentCategory]:
        snap = self.db.collection(self.config.settings_collection).document(CATEGORIES_DOCUMENT).get()
        if not snap.exists:
            logger.info("No assessment categories configured, using defaults")
            return list(DEFAULT_CATEGORIES)

        rows = (snap.to_dict() or {}).get("categories") or []
        try:
            return [AssessmentCategory(str(row["name"]), float(row["weight"])) for row in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise FirestoreServiceError(f"Malformed assessment categories: {exc}") from exc

    def list_admissions(self) -> List[Admission]:
        results: List[Admission] = []
        for doc in self._stream(self.config.admissions_collection):
            data = doc.to_dict() or {}
            try:
                students = tuple(
                    StudentAdmission(str(row["studentId"]), _enrollments(row.get("enrollments")))
                    for row in data.get("students") or []
                )
                results.append(
                    Admission(
                        school_year=str(data.get("schoolYear") or doc.id),
                        students=students,
                        classes=_enrollments(data.get("classes")),
                    )
                )
            except (KeyError, TypeError) as exc:
                raise FirestoreServiceError(f"Malformed admission document {doc.id}: {exc}") from exc
        return results

    def list_attendance(self, class_id: str) -> List[AttendanceRecord]:
        logger.debug("Loading attendance for class %s", class_id)
        docs = (
            self.db.collection(self.config.attendance_collection)
            .where(filter=FieldFilter("classId", "==", class_id))
            .stream()
        )
        results: List[AttendanceRecord] = []
        for doc in docs:
            data = doc.to_dict() or {}
            try:
                results.append(
                    AttendanceRecord(
                        student_id=str(data["studentId"]),
                        class_id=str(data.get("classId", class_id)),
                        date=_to_date(data["date"]),
                        status=str(data["status"]),
                        minutes_late=int(data.get("minutesLate") or 0),
                    )
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise FirestoreServiceError(f"Malformed attendance document {doc.id}: {exc}") from exc
        return results
