import logging
import unittest
from unittest import mock

from schoolgrades.app import create_gradebook
from schoolgrades.config.logging_config import LOG_FORMAT, ConsoleHandler, setup_logging
from schoolgrades.services.gradebook_service import GradebookService


class LoggingConfigTests(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self._level = root.level
        self._handlers = list(root.handlers)

    def tearDown(self):
        root = logging.getLogger()
        root.handlers = self._handlers
        root.setLevel(self._level)

    def test_configures_root_logger_once(self):
        logger = setup_logging("DEBUG")
        setup_logging("DEBUG")
        ours = [h for h in logger.handlers if isinstance(h, ConsoleHandler)]
        self.assertEqual(len(ours), 1)
        self.assertEqual(ours[0].formatter._fmt, LOG_FORMAT)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_quiets_google_clients(self):
        setup_logging("DEBUG")
        self.assertEqual(logging.getLogger("google").level, logging.WARNING)

    def test_create_gradebook_configures_logging(self):
        source = object()
        with mock.patch("schoolgrades.app.FirestoreService.from_settings", return_value=source):
            gradebook = create_gradebook("WARNING")
        self.assertIsInstance(gradebook, GradebookService)
        self.assertIs(gradebook.source, source)
        root = logging.getLogger()
        self.assertEqual(root.level, logging.WARNING)
        self.assertTrue(any(isinstance(h, ConsoleHandler) for h in root.handlers))


if __name__ == "__main__":
    unittest.main()
