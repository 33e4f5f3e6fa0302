from typing import Dict, FrozenSet, Iterable, List, Set, Tuple

from schoolgrades.core.models import Admission, ClassRoster


def build_class_rosters(admissions: Iterable[Admission]) -> List[ClassRoster]:
    """
    Every class of every school year, with the students enrolled in it.

    Classes come from both the admission's class definitions (which may be
    empty) and the students' enrollments.
    """
    members: Dict[Tuple[str, str, str], Set[str]] = {}

    for admission in admissions:
        for definition in admission.classes:
            members.setdefault((admission.school_year, definition.program_id, definition.level), set())

        for student in admission.students:
            for enrollment in student.enrollments:
                key = (admission.school_year, enrollment.program_id, enrollment.level)
                members.setdefault(key, set()).add(student.student_id)

    # newest school year first
    ordered = sorted(members, key=lambda key: (key[1], key[2]))
    ordered.sort(key=lambda key: key[0], reverse=True)

    return [
        ClassRoster(year, program_id, level, frozenset(members[(year, program_id, level)]))
        for year, program_id, level in ordered
    ]


def roster_for_class(
    admissions: Iterable[Admission],
    school_year: str,
    program_id: str,
    level: str,
) -> FrozenSet[str]:
    for roster in build_class_rosters(admissions):
        if (roster.school_year, roster.program_id, roster.level) == (school_year, program_id, level):
            return roster.student_ids
    return frozenset()
