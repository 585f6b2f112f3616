"""Tests for donation flags, derived status and transition authorization."""

import sys
import unittest
from dataclasses import dataclass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from relief_hub.domain.donation_lifecycle import (
    Transition,
    TransitionNotAllowed,
    authorize_transition,
    effective_status,
    flag_for,
)
from relief_hub.models.enums import DonationStatus


@dataclass
class Flags:
    donator_marked_scheduled: bool = False
    donator_marked_completed: bool = False
    owner_marked_completed: bool = False


class TestEffectiveStatus(unittest.TestCase):
    def test_pending_by_default(self):
        self.assertEqual(effective_status(Flags()), DonationStatus.PENDING)

    def test_scheduled(self):
        self.assertEqual(effective_status(Flags(donator_marked_scheduled=True)), DonationStatus.SCHEDULED)

    def test_either_completion_flag_completes(self):
        self.assertEqual(effective_status(Flags(donator_marked_completed=True)), DonationStatus.COMPLETED)
        self.assertEqual(effective_status(Flags(owner_marked_completed=True)), DonationStatus.COMPLETED)
        self.assertEqual(
            effective_status(Flags(donator_marked_scheduled=True, owner_marked_completed=True)),
            DonationStatus.COMPLETED,
        )


class TestTransitions(unittest.TestCase):
    def test_each_step_owns_one_flag(self):
        self.assertEqual(flag_for(Transition.SCHEDULE), "donator_marked_scheduled")
        self.assertEqual(flag_for(Transition.COMPLETE_DONATOR), "donator_marked_completed")
        self.assertEqual(flag_for(Transition.COMPLETE_OWNER), "owner_marked_completed")

    def test_donator_only_steps(self):
        authorize_transition(Transition.SCHEDULE, actor_id=1, donator_id=1, owner_ids=[2])
        authorize_transition(Transition.COMPLETE_DONATOR, actor_id=1, donator_id=1, owner_ids=[2])
        with self.assertRaises(TransitionNotAllowed):
            authorize_transition(Transition.SCHEDULE, actor_id=2, donator_id=1, owner_ids=[2])
        with self.assertRaises(TransitionNotAllowed):
            authorize_transition(
                Transition.COMPLETE_DONATOR, actor_id=3, donator_id=1, owner_ids=[2], actor_is_admin=True
            )

    def test_owner_step(self):
        authorize_transition(Transition.COMPLETE_OWNER, actor_id=2, donator_id=1, owner_ids=[2])
        with self.assertRaises(TransitionNotAllowed):
            authorize_transition(Transition.COMPLETE_OWNER, actor_id=1, donator_id=1, owner_ids=[2])
        with self.assertRaises(TransitionNotAllowed):
            authorize_transition(Transition.COMPLETE_OWNER, actor_id=3, donator_id=1, owner_ids=[2], actor_is_admin=True)
        authorize_transition(
            Transition.COMPLETE_OWNER,
            actor_id=3,
            donator_id=1,
            owner_ids=[2],
            actor_is_admin=True,
            admin_may_act_as_owner=True,
        )

    def test_denied_message_names_the_rule(self):
        with self.assertRaises(TransitionNotAllowed) as ctx:
            authorize_transition(Transition.SCHEDULE, actor_id=2, donator_id=1, owner_ids=[])
        self.assertEqual(ctx.exception.transition, Transition.SCHEDULE)
        self.assertIn("your own donations", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
