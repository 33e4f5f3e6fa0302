from typing import Iterable, List, Tuple

from schoolgrades.core.models import AssessmentCategory, WeightValidation


DEFAULT_CATEGORIES: Tuple[AssessmentCategory, ...] = (
    AssessmentCategory("Classwork", 25),
    AssessmentCategory("Homework", 5),
    AssessmentCategory("Unit Assessment", 30),
    AssessmentCategory("End-Semester", 40),
)

REQUIRED_TOTAL = 100


def _format_total(total: float) -> str:
    return f"{total:g}"


def validate_category_weights(
    categories: Iterable[AssessmentCategory],
    *,
    tolerance: float = 1e-6,
) -> WeightValidation:
    """
    Checks a category configuration before it is saved.

    The weights must add up to 100 (within `tolerance`), every category needs a
    name and weights must lie in [0, 100].
    """
    errors: List[str] = []
    total = 0.0

    for index, category in enumerate(categories):
        name = (category.name or "").strip()
        if not name:
            errors.append(f"categories[{index}]: category name is required.")

        if category.weight < 0:
            errors.append(f"categories[{index}]: weight must be positive.")
        elif category.weight > 100:
            errors.append(f"categories[{index}]: weight cannot exceed 100.")

        total += category.weight

    if abs(total - REQUIRED_TOTAL) > tolerance:
        errors.append(
            f"Total weight of all categories must be exactly 100% (got {_format_total(total)})."
        )

    return WeightValidation(total=total, errors=tuple(errors))
