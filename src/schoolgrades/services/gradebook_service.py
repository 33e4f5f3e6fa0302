from datetime import date
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from schoolgrades.config.settings import Settings, settings as default_settings
from schoolgrades.core.attendance import month_bounds, summarize_attendance
from schoolgrades.core.categories import validate_category_weights
from schoolgrades.core.grades import (
    compute_class_aggregate,
    compute_student_overall,
    weights_from_categories,
)
from schoolgrades.core.models import (
    Admission,
    Assessment,
    AssessmentCategory,
    AttendanceRecord,
    AttendanceSummary,
    ClassAggregate,
    ClassRoster,
    Diagnostic,
    StudentPerformanceSummary,
    Subject,
    WeightValidation,
)
from schoolgrades.core.rosters import build_class_rosters, roster_for_class


logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    def list_subjects(self) -> List[Subject]: ...

    def list_assessments(self) -> List[Assessment]: ...

    def get_assessment_categories(self) -> List[AssessmentCategory]: ...

    def list_admissions(self) -> List[Admission]: ...

    def list_attendance(self, class_id: str) -> List[AttendanceRecord]: ...


class GradebookService:
    """
    Single entry point for every dashboard that shows grades.

    Student, guardian and teacher views all go through here so the weighting
    rules live in one place (schoolgrades.core.grades).
    """

    def __init__(self, source: RecordSource, config: Settings = default_settings) -> None:
        self.source = source
        self.config = config

    def check_categories(self, categories: Iterable[AssessmentCategory]) -> WeightValidation:
        return validate_category_weights(categories, tolerance=self.config.category_weight_tolerance)

    def category_weights(self) -> Dict[str, float]:
        categories = self.source.get_assessment_categories()
        validation = self.check_categories(categories)
        if not validation.is_valid:
            logger.warning("Assessment categories are misconfigured: %s", "; ".join(validation.errors))
        return weights_from_categories(categories)

    def _log_diagnostics(self, diagnostics: Sequence[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            logger.warning("Assessment %s skipped or unweighted (%s): %s",
                           diagnostic.assessment_id, diagnostic.kind, diagnostic.detail)

    def student_summary(self, student_id: str) -> StudentPerformanceSummary:
        summary = compute_student_overall(
            student_id,
            self.source.list_assessments(),
            self.source.list_subjects(),
            self.category_weights(),
        )
        self._log_diagnostics(summary.diagnostics)
        return summary

    def class_aggregate(self, school_year: str, program_id: str, level: str) -> ClassAggregate:
        roster = roster_for_class(self.source.list_admissions(), school_year, program_id, level)
        if not roster:
            logger.info("Class %s/%s/%s has no enrolled students", school_year, program_id, level)

        aggregate = compute_class_aggregate(
            roster,
            self.source.list_assessments(),
            self.source.list_subjects(),
            self.category_weights(),
        )
        self._log_diagnostics(aggregate.diagnostics)
        return aggregate

    def class_summaries(self) -> List[Tuple[ClassRoster, ClassAggregate]]:
        rosters = build_class_rosters(self.source.list_admissions())
        assessments = self.source.list_assessments()
        subjects = self.source.list_subjects()
        weights = self.category_weights()

        results: List[Tuple[ClassRoster, ClassAggregate]] = []
        seen: List[Diagnostic] = []
        for roster in rosters:
            aggregate = compute_class_aggregate(roster.student_ids, assessments, subjects, weights)
            seen.extend(d for d in aggregate.diagnostics if d not in seen)
            results.append((roster, aggregate))

        self._log_diagnostics(seen)
        return results

    def attendance_summary(
        self,
        student_id: str,
        class_ids: Iterable[str],
        today: Optional[date] = None,
    ) -> AttendanceSummary:
        start, end = month_bounds(today or date.today())
        records: List[AttendanceRecord] = []
        for class_id in dict.fromkeys(class_ids):
            records.extend(r for r in self.source.list_attendance(class_id) if r.student_id == student_id)
        return summarize_attendance(records, start=start, end=end)
