from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from schoolgrades.core.models import (
    INVALID_TOTAL_MARKS,
    UNKNOWN_CATEGORY,
    Assessment,
    AssessmentAverage,
    AssessmentCategory,
    ClassAggregate,
    Diagnostic,
    StudentPerformanceSummary,
    Subject,
    SubjectScore,
)


GRADE_BANDS: List[Tuple[int, str]] = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
    (0, "F"),
]


def round_half_up(value: float) -> int:
    # str() gives the shortest repr, so 87.5 stays 87.5 and rounds to 88
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _record(diagnostics: Optional[List[Diagnostic]], diagnostic: Diagnostic) -> None:
    if diagnostics is not None and diagnostic not in diagnostics:
        diagnostics.append(diagnostic)


def _invalid_marks(assessment: Assessment) -> Diagnostic:
    return Diagnostic(
        INVALID_TOTAL_MARKS,
        assessment.assessment_id,
        f"totalMarks must be greater than 0, got {assessment.total_marks}",
    )


def _percentage(score: float, total_marks: float) -> float:
    return (score / total_marks) * 100


def weights_from_categories(categories: Iterable[AssessmentCategory]) -> Dict[str, float]:
    """Configured percentages (0-100) to the weight fractions the engine expects."""
    return {category.name: category.weight / 100 for category in categories}


def compute_subject_score(
    student_id: str,
    subject_id: str,
    assessments: Iterable[Assessment],
    category_weights: Mapping[str, float],
    *,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> Optional[int]:
    """
    Category-weighted mean of the student's assessment percentages in one subject.

    Returns None when the student has no gradable assessment in the subject,
    including when every matching assessment sits in a category with no weight.
    """
    weighted_sum = 0.0
    weight_total = 0.0

    for assessment in assessments:
        if assessment.subject_id != subject_id:
            continue
        score = assessment.score_for(student_id)
        if score is None:
            continue
        if assessment.total_marks <= 0:
            _record(diagnostics, _invalid_marks(assessment))
            continue

        weight = category_weights.get(assessment.category)
        if weight is None:
            _record(
                diagnostics,
                Diagnostic(
                    UNKNOWN_CATEGORY,
                    assessment.assessment_id,
                    f"Category '{assessment.category}' is not configured",
                ),
            )
            weight = 0.0

        weighted_sum += _percentage(score, assessment.total_marks) * weight
        weight_total += weight

    if weight_total == 0:
        return None

    return round_half_up(weighted_sum / weight_total)


def compute_student_overall(
    student_id: str,
    assessments: Sequence[Assessment],
    subjects: Iterable[Subject],
    category_weights: Mapping[str, float],
) -> StudentPerformanceSummary:
    diagnostics: List[Diagnostic] = []
    scored: List[SubjectScore] = []

    for subject in subjects:
        score = compute_subject_score(
            student_id,
            subject.subject_id,
            assessments,
            category_weights,
            diagnostics=diagnostics,
        )
        if score is not None:
            scored.append(SubjectScore(subject.subject_id, subject.name, score))

    if scored:
        overall = round_half_up(sum(item.score for item in scored) / len(scored))
    else:
        overall = 0

    return StudentPerformanceSummary(
        student_id=student_id,
        subjects=tuple(scored),
        overall=overall,
        letter=letter_grade(overall),
        diagnostics=tuple(diagnostics),
    )


def letter_grade(score: float) -> str:
    # out of range input is clamped rather than rejected
    clamped = max(0.0, min(score, 100.0))
    for low, letter in GRADE_BANDS:
        if clamped >= low:
            return letter
    return "F"


def _assessment_average(
    assessment: Assessment,
    roster: Iterable[str],
    diagnostics: List[Diagnostic],
) -> AssessmentAverage:
    scores = [assessment.score_for(student_id) for student_id in roster]
    scores = [score for score in scores if score is not None]

    if scores and assessment.total_marks <= 0:
        _record(diagnostics, _invalid_marks(assessment))
        return AssessmentAverage(assessment.assessment_id, assessment.subject_id, None, len(scores))
    if not scores:
        return AssessmentAverage(assessment.assessment_id, assessment.subject_id, None, 0)

    percentages = [_percentage(score, assessment.total_marks) for score in scores]
    average = round_half_up(sum(percentages) / len(percentages))
    return AssessmentAverage(assessment.assessment_id, assessment.subject_id, average, len(scores))


def compute_class_aggregate(
    roster_student_ids: Iterable[str],
    assessments: Sequence[Assessment],
    subjects: Sequence[Subject],
    category_weights: Mapping[str, float],
) -> ClassAggregate:
    """
    Roster-wide rollup.

    Per assessment: simple mean of the roster's percentages (not category weighted).
    Overall: mean of each roster student's overall average.
    """
    roster = sorted(set(roster_student_ids))
    diagnostics: List[Diagnostic] = []

    averages = tuple(_assessment_average(a, roster, diagnostics) for a in assessments)

    student_overalls: Dict[str, int] = {}
    for student_id in roster:
        summary = compute_student_overall(student_id, assessments, subjects, category_weights)
        student_overalls[student_id] = summary.overall
        for diagnostic in summary.diagnostics:
            _record(diagnostics, diagnostic)

    if student_overalls:
        overall = round_half_up(sum(student_overalls.values()) / len(student_overalls))
    else:
        overall = 0

    return ClassAggregate(
        assessments=averages,
        student_overalls=student_overalls,
        overall=overall,
        letter=letter_grade(overall),
        diagnostics=tuple(diagnostics),
    )
