"""Unit tests for app.services.roles: rank ordering and moderation rules."""

import itertools
import unittest

from app.models import UserRole
from app.services.roles import (
    ROLE_RANKS,
    can_moderate,
    is_higher_than,
    outranks,
    rank_of,
)

ORDERED_ROLES = [
    UserRole.SYSADMIN,
    UserRole.ADMIN,
    UserRole.MODERATOR,
    UserRole.VETERAN,
    UserRole.USER,
]


class TestRankTable(unittest.TestCase):
    """Every role has a rank and ranks follow declaration order."""

    def test_every_role_is_ranked(self) -> None:
        self.assertEqual(set(ROLE_RANKS), set(UserRole))

    def test_ranks_follow_declaration_order(self) -> None:
        self.assertEqual([rank_of(r) for r in ORDERED_ROLES], [0, 1, 2, 3, 4])

    def test_accepts_string_values(self) -> None:
        self.assertEqual(rank_of("administrator"), 1)

    def test_unknown_role_raises(self) -> None:
        with self.assertRaises(ValueError):
            rank_of("overlord")


class TestIsHigherThan(unittest.TestCase):
    """is_higher_than(a, b) iff a's index is strictly smaller than b's."""

    def test_all_pairs(self) -> None:
        for a, b in itertools.product(ORDERED_ROLES, repeat=2):
            with self.subTest(actor=a, target=b):
                expected = ORDERED_ROLES.index(a) < ORDERED_ROLES.index(b)
                self.assertEqual(is_higher_than(a, b), expected)

    def test_equal_roles_are_not_higher(self) -> None:
        for role in ORDERED_ROLES:
            with self.subTest(role=role):
                self.assertFalse(is_higher_than(role, role))

    def test_sysadmin_over_user(self) -> None:
        self.assertTrue(is_higher_than("sysadmin", "user"))
        self.assertFalse(is_higher_than("user", "sysadmin"))


class TestModerationRules(unittest.TestCase):
    def test_can_moderate(self) -> None:
        self.assertTrue(can_moderate(UserRole.SYSADMIN))
        self.assertTrue(can_moderate(UserRole.ADMIN))
        self.assertTrue(can_moderate(UserRole.MODERATOR))
        self.assertFalse(can_moderate(UserRole.VETERAN))
        self.assertFalse(can_moderate(UserRole.USER))

    def test_veteran_outranks_user_but_cannot_moderate(self) -> None:
        self.assertTrue(is_higher_than(UserRole.VETERAN, UserRole.USER))
        self.assertFalse(outranks(UserRole.VETERAN, UserRole.USER))

    def test_moderator_outranks_user_not_admin(self) -> None:
        self.assertTrue(outranks(UserRole.MODERATOR, UserRole.USER))
        self.assertFalse(outranks(UserRole.MODERATOR, UserRole.ADMIN))
        self.assertFalse(outranks(UserRole.MODERATOR, UserRole.MODERATOR))


if __name__ == "__main__":
    unittest.main()
