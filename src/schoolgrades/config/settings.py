from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    return float(value)


@dataclass(frozen=True)
class Settings:
    firebase_project_id: str = os.getenv("FIREBASE_PROJECT_ID", "")

    subjects_collection: str = os.getenv("FIRESTORE_SUBJECTS_COLLECTION", "subjects")
    assessments_collection: str = os.getenv("FIRESTORE_ASSESSMENTS_COLLECTION", "assessments")
    admissions_collection: str = os.getenv("FIRESTORE_ADMISSIONS_COLLECTION", "admissions")
    attendance_collection: str = os.getenv("FIRESTORE_ATTENDANCE_COLLECTION", "attendance")
    settings_collection: str = os.getenv("FIRESTORE_SETTINGS_COLLECTION", "settings")

    category_weight_tolerance: float = _float_env("CATEGORY_WEIGHT_TOLERANCE", 1e-6)

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
