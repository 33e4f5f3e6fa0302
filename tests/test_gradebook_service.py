from datetime import date
import unittest

from schoolgrades.config.settings import Settings
from schoolgrades.core.models import (
    Admission,
    Assessment,
    AssessmentCategory,
    AttendanceRecord,
    Enrollment,
    StudentAdmission,
    Subject,
)
from schoolgrades.services.gradebook_service import GradebookService


LOGGER = "schoolgrades.services.gradebook_service"
GRADE_1 = Enrollment("general", "Grade 1")


class FakeSource:
    def __init__(self, categories=None):
        self.categories = categories or [
            AssessmentCategory("Classwork", 25),
            AssessmentCategory("Homework", 5),
            AssessmentCategory("Unit Assessment", 30),
            AssessmentCategory("End-Semester", 40),
        ]
        self.assessments = [
            Assessment("cw", "MATH", "Classwork", 25, {"S1": 20, "S2": 15}),
            Assessment("es", "MATH", "End-Semester", 100, {"S1": 90, "S2": 70, "S3": 80}),
        ]
        self.attendance = {
            "c1": [
                AttendanceRecord("S1", "c1", date(2025, 3, 3), "Present"),
                AttendanceRecord("S1", "c1", date(2025, 3, 4), "Absent"),
                AttendanceRecord("S2", "c1", date(2025, 3, 4), "Absent"),
                AttendanceRecord("S1", "c1", date(2025, 2, 27), "Absent"),
            ],
            "c2": [AttendanceRecord("S1", "c2", date(2025, 3, 5), "Late")],
        }
        self.attendance_calls = []

    def list_subjects(self):
        return [Subject("MATH", "Mathematics")]

    def list_assessments(self):
        return self.assessments

    def get_assessment_categories(self):
        return self.categories

    def list_admissions(self):
        return [
            Admission(
                "2025-2026",
                students=tuple(StudentAdmission(s, (GRADE_1,)) for s in ("S1", "S2", "S3")),
                classes=(Enrollment("esl", "Level A"),),
            )
        ]

    def list_attendance(self, class_id):
        self.attendance_calls.append(class_id)
        return self.attendance.get(class_id, [])


class GradebookServiceTests(unittest.TestCase):
    def setUp(self):
        self.source = FakeSource()
        self.service = GradebookService(self.source, Settings())

    def test_category_weights_are_fractions(self):
        weights = self.service.category_weights()
        self.assertEqual(weights["Classwork"], 0.25)
        self.assertEqual(weights["End-Semester"], 0.4)

    def test_misconfigured_categories_are_logged_but_used(self):
        service = GradebookService(FakeSource([AssessmentCategory("Classwork", 50)]), Settings())
        with self.assertLogs(LOGGER, level="WARNING") as logs:
            weights = service.category_weights()
        self.assertEqual(weights, {"Classwork": 0.5})
        self.assertIn("got 50", logs.output[0])

    def test_student_summary(self):
        summary = self.service.student_summary("S1")
        # (80 * 0.25 + 90 * 0.40) / 0.65 = 86.15
        self.assertEqual(summary.overall, 86)
        self.assertEqual(summary.letter, "B")
        self.assertEqual(summary.subjects[0].subject_name, "Mathematics")

    def test_diagnostics_are_logged(self):
        self.source.assessments.append(Assessment("old", "MATH", "Quiz", 10, {"S1": 10}))
        with self.assertLogs(LOGGER, level="WARNING") as logs:
            summary = self.service.student_summary("S1")
        self.assertEqual(summary.overall, 86)
        self.assertEqual(len(logs.output), 1)
        self.assertIn("unknown_category", logs.output[0])

    def test_class_aggregate(self):
        aggregate = self.service.class_aggregate("2025-2026", "general", "Grade 1")
        self.assertEqual(set(aggregate.student_overalls), {"S1", "S2", "S3"})
        self.assertEqual(aggregate.student_overalls["S3"], 80)

    def test_class_summaries_include_empty_classes(self):
        summaries = self.service.class_summaries()
        by_level = {roster.level: aggregate for roster, aggregate in summaries}
        self.assertEqual(by_level["Level A"].overall, 0)
        self.assertEqual(by_level["Level A"].student_overalls, {})
        self.assertEqual(len(by_level["Grade 1"].student_overalls), 3)

    def test_attendance_summary_for_current_month(self):
        summary = self.service.attendance_summary("S1", ["c1", "c2", "c1"], today=date(2025, 3, 20))
        self.assertEqual(self.source.attendance_calls, ["c1", "c2"])
        self.assertEqual(summary.total_days, 3)
        self.assertEqual(summary.absences, 1)
        self.assertEqual(summary.rate, 67)

    def test_check_categories_uses_configured_tolerance(self):
        categories = [AssessmentCategory("A", 99.99)]
        self.assertFalse(self.service.check_categories(categories).is_valid)
        lenient = GradebookService(self.source, Settings(category_weight_tolerance=0.1))
        self.assertTrue(lenient.check_categories(categories).is_valid)


if __name__ == "__main__":
    unittest.main()
