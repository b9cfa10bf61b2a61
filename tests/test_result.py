"""Unit tests for app.services.result: the per-handler catch-all."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.orm import Session

from app.services.result import INTERNAL_ERROR_MESSAGE, Err, Ok, contained


@contained
def _succeeds(db: Session, value: int) -> Ok:
    return Ok(value * 2)


@contained
def _fails(db: Session) -> Ok:
    raise RuntimeError("connection reset: password=hunter2")


class TestContained(unittest.TestCase):
    def test_passes_results_through(self) -> None:
        db = MagicMock(spec=Session)
        self.assertEqual(_succeeds(db, 21), Ok(42))
        db.rollback.assert_not_called()

    def test_converts_exception_to_internal_error(self) -> None:
        db = MagicMock(spec=Session)
        with self.assertLogs("app.services.result", level="ERROR") as logs:
            result = _fails(db)
        self.assertEqual(result, Err(500, INTERNAL_ERROR_MESSAGE))
        self.assertNotIn("hunter2", result.message)
        self.assertTrue(any("_fails" in line for line in logs.output))
        db.rollback.assert_called_once()

    def test_db_as_keyword_argument_is_rolled_back(self) -> None:
        db = MagicMock(spec=Session)
        with self.assertLogs("app.services.result", level="ERROR"):
            result = _fails(db=db)
        self.assertIsInstance(result, Err)
        db.rollback.assert_called_once()

    def test_failed_rollback_still_returns_internal_error(self) -> None:
        db = MagicMock(spec=Session)
        db.rollback.side_effect = RuntimeError("rollback failed")
        with self.assertLogs("app.services.result", level="ERROR"):
            result = _fails(db)
        self.assertEqual(result.code, 500)


if __name__ == "__main__":
    unittest.main()
