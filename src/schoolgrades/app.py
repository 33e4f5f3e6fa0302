from typing import Optional

from schoolgrades.config.logging_config import setup_logging
from schoolgrades.services.firestore_service import FirestoreService
from schoolgrades.services.gradebook_service import GradebookService


def create_gradebook(log_level: Optional[str] = None) -> GradebookService:
    """Wire logging and the Firestore record source into the gradebook used by the dashboards."""
    setup_logging(log_level)
    return GradebookService(FirestoreService.from_settings())
