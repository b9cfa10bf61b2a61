"""Tests for app.services.sessions and the signed session cookie in app.core.security."""

import unittest
from datetime import datetime, timedelta, timezone

import jwt

from app.core.config import settings
from app.core.security import create_session_token, decode_session_token
from app.models import UserSession
from app.services.sessions import (
    SessionState,
    destroy_session,
    load_session,
    purge_expired_sessions,
    start_session,
)
from tests.db_helpers import make_engine, make_session_factory, make_user


class TestSessionToken(unittest.TestCase):
    def test_roundtrip(self) -> None:
        self.assertEqual(decode_session_token(create_session_token("abc")), "abc")

    def test_tampered_token_is_rejected(self) -> None:
        token = jwt.encode({"sid": "abc"}, "some-other-secret", algorithm="HS256")
        self.assertIsNone(decode_session_token(token))

    def test_garbage_is_rejected(self) -> None:
        self.assertIsNone(decode_session_token("not-a-token"))

    def test_expired_token_is_rejected(self) -> None:
        past = datetime.now(timezone.utc) - timedelta(days=1)
        token = jwt.encode(
            {"sid": "abc", "exp": past},
            settings.SESSION_SECRET.get_secret_value(),
            algorithm=settings.SESSION_ALGORITHM,
        )
        self.assertIsNone(decode_session_token(token))

    def test_token_without_session_id_is_rejected(self) -> None:
        token = jwt.encode(
            {"user": "abc"},
            settings.SESSION_SECRET.get_secret_value(),
            algorithm=settings.SESSION_ALGORITHM,
        )
        self.assertIsNone(decode_session_token(token))


class TestSessionStore(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.db = make_session_factory(self.engine)()
        self.alice = make_user(self.db, "alice")

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def test_start_then_load(self) -> None:
        state = start_session(self.db, SessionState(), self.alice.id)
        loaded = load_session(self.db, state.session_id)
        self.assertEqual(loaded, SessionState(session_id=state.session_id, user_id=self.alice.id))

    def test_unknown_id_is_anonymous(self) -> None:
        self.assertFalse(load_session(self.db, "unknown").is_authenticated)
        self.assertFalse(load_session(self.db, None).is_authenticated)

    def test_expired_session_is_anonymous(self) -> None:
        self.db.add(
            UserSession(
                id="old",
                user_id=self.alice.id,
                expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
            )
        )
        self.db.commit()
        self.assertFalse(load_session(self.db, "old").is_authenticated)

    def test_destroy_clears_state_and_row(self) -> None:
        state = start_session(self.db, SessionState(), self.alice.id)
        destroy_session(self.db, state)
        self.assertEqual(state, SessionState())
        self.assertEqual(self.db.query(UserSession).count(), 0)

    def test_destroy_anonymous_is_noop(self) -> None:
        state = SessionState()
        destroy_session(self.db, state)
        self.assertEqual(state, SessionState())

    def test_purge_expired_only(self) -> None:
        start_session(self.db, SessionState(), self.alice.id)
        self.db.add(
            UserSession(
                id="old",
                user_id=self.alice.id,
                expires_at=datetime.now(timezone.utc) - timedelta(days=1),
            )
        )
        self.db.commit()
        self.assertEqual(purge_expired_sessions(self.db), 1)
        self.assertEqual(self.db.query(UserSession).count(), 1)


if __name__ == "__main__":
    unittest.main()
