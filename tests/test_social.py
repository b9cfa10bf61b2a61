"""Tests for app.services.social: blocks, follows and friend listings."""

import unittest

from app.models import UserBlock, UserFollow
from app.services import social
from app.services.result import Err, Ok
from app.services.sessions import SessionState
from tests.db_helpers import make_engine, make_session_factory, make_user


class SocialTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.db = make_session_factory(self.engine)()
        self.alice = make_user(self.db, "alice")
        self.bob = make_user(self.db, "bob")
        self.carol = make_user(self.db, "carol")

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def as_(self, user) -> SessionState:
        return SessionState(session_id="s", user_id=user.id)


class TestFollow(SocialTestCase):
    def test_follow_and_list(self) -> None:
        self.assertIsInstance(social.follow_user(self.db, self.as_(self.alice), self.bob.id), Ok)
        followers = social.list_followers(self.db, self.bob.id).value
        following = social.list_following(self.db, self.alice.id).value
        self.assertEqual([u.username for u in followers], ["alice"])
        self.assertEqual([u.username for u in following], ["bob"])

    def test_cannot_follow_self(self) -> None:
        self.assertEqual(social.follow_user(self.db, self.as_(self.alice), self.alice.id).code, 400)

    def test_duplicate_follow_conflicts(self) -> None:
        social.follow_user(self.db, self.as_(self.alice), self.bob.id)
        self.assertEqual(social.follow_user(self.db, self.as_(self.alice), self.bob.id).code, 409)
        self.assertEqual(self.db.query(UserFollow).count(), 1)

    def test_follow_missing_user(self) -> None:
        result = social.follow_user(self.db, self.as_(self.alice), "missing")
        self.assertEqual(result, Err(400, "user doesn't exist"))

    def test_unfollow(self) -> None:
        social.follow_user(self.db, self.as_(self.alice), self.bob.id)
        self.assertIsInstance(social.unfollow_user(self.db, self.as_(self.alice), self.bob.id), Ok)
        self.assertEqual(self.db.query(UserFollow).count(), 0)

    def test_unfollow_when_not_following(self) -> None:
        self.assertEqual(social.unfollow_user(self.db, self.as_(self.alice), self.bob.id).code, 400)

    def test_anonymous_is_unauthorized(self) -> None:
        self.assertEqual(social.follow_user(self.db, SessionState(), self.bob.id).code, 401)

    def test_listing_unknown_user(self) -> None:
        self.assertEqual(social.list_followers(self.db, "missing").code, 400)


class TestFriends(SocialTestCase):
    def test_only_mutual_follows_are_friends(self) -> None:
        social.follow_user(self.db, self.as_(self.alice), self.bob.id)
        social.follow_user(self.db, self.as_(self.bob), self.alice.id)
        social.follow_user(self.db, self.as_(self.alice), self.carol.id)
        friends = social.list_friends(self.db, self.as_(self.alice)).value
        self.assertEqual([u.username for u in friends], ["bob"])

    def test_no_friends(self) -> None:
        self.assertEqual(social.list_friends(self.db, self.as_(self.carol)), Ok([]))


class TestBlock(SocialTestCase):
    def test_block_removes_follows_both_ways(self) -> None:
        social.follow_user(self.db, self.as_(self.alice), self.bob.id)
        social.follow_user(self.db, self.as_(self.bob), self.alice.id)
        social.follow_user(self.db, self.as_(self.alice), self.carol.id)
        self.assertIsInstance(social.block_user(self.db, self.as_(self.alice), self.bob.id), Ok)
        remaining = self.db.query(UserFollow).all()
        self.assertEqual(len(remaining), 1)
        self.assertEqual(remaining[0].followed_id, self.carol.id)

    def test_cannot_block_self(self) -> None:
        self.assertEqual(social.block_user(self.db, self.as_(self.alice), self.alice.id).code, 400)

    def test_duplicate_block_conflicts(self) -> None:
        social.block_user(self.db, self.as_(self.alice), self.bob.id)
        self.assertEqual(social.block_user(self.db, self.as_(self.alice), self.bob.id).code, 409)

    def test_both_sides_may_block_each_other(self) -> None:
        social.block_user(self.db, self.as_(self.alice), self.bob.id)
        self.assertIsInstance(social.block_user(self.db, self.as_(self.bob), self.alice.id), Ok)
        self.assertEqual(self.db.query(UserBlock).count(), 2)

    def test_unblock(self) -> None:
        social.block_user(self.db, self.as_(self.alice), self.bob.id)
        self.assertIsInstance(social.unblock_user(self.db, self.as_(self.alice), self.bob.id), Ok)
        self.assertEqual(self.db.query(UserBlock).count(), 0)

    def test_unblock_only_lifts_own_block(self) -> None:
        social.block_user(self.db, self.as_(self.alice), self.bob.id)
        result = social.unblock_user(self.db, self.as_(self.bob), self.alice.id)
        self.assertEqual(result, Err(400, "user is not blocked"))
        self.assertEqual(self.db.query(UserBlock).count(), 1)


if __name__ == "__main__":
    unittest.main()
