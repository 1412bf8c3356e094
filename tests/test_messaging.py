"""Tests for relationship-gated messaging and chat-partner enumeration."""

import unittest

from app.core.errors import ForbiddenError, NotFoundError
from app.models import Role, User
from app.services import messages, projects
from app.services.authorization import Actor, can_message, chat_partners
from sqlite_support import AcmeScenario, add_user, close_session, new_session


class MessagingTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = new_session()
        self.s = AcmeScenario(self.db)

    def tearDown(self) -> None:
        close_session(self.db)

    def actor(self, user: User) -> Actor:
        return Actor.from_user(user)

    def send(self, sender: User, receiver: User, content: str = "hello"):
        return messages.send_message(self.db, self.actor(sender), receiver.id, content)


class TestCanMessage(MessagingTestCase):
    def test_pairs(self) -> None:
        s = self.s
        allowed = [
            (s.employee, s.client),
            (s.client, s.employee),
            (s.admin, s.loose_client),
            (s.loose_client, s.admin),
            (s.bench, s.admin),
        ]
        denied = [
            (s.bench, s.client),
            (s.client, s.bench),
            (s.employee, s.other_client),
            (s.client, s.other_client),
            (s.employee, s.bench),
            (s.admin, s.admin),
            (s.employee, s.loose_client),
        ]
        for sender, receiver in allowed:
            with self.subTest(sender=sender.name, receiver=receiver.name):
                self.assertTrue(can_message(self.db, sender.id, receiver.id))
        for sender, receiver in denied:
            with self.subTest(sender=sender.name, receiver=receiver.name):
                self.assertFalse(can_message(self.db, sender.id, receiver.id))

    def test_inactive_or_missing_users_denied(self) -> None:
        gone = add_user(self.db, "Gone", Role.ADMIN, is_active=False)
        self.assertFalse(can_message(self.db, gone.id, self.s.client.id))
        self.assertFalse(can_message(self.db, self.s.client.id, gone.id))
        self.assertFalse(can_message(self.db, self.s.client.id, 9999))

    def test_unassignment_revokes_permission(self) -> None:
        self.assertTrue(can_message(self.db, self.s.employee.id, self.s.client.id))
        projects.unassign_employee(
            self.db, self.actor(self.s.admin), self.s.project.id, self.s.employee.id
        )
        self.assertFalse(can_message(self.db, self.s.employee.id, self.s.client.id))


class TestSendAndRead(MessagingTestCase):
    def test_send_allowed_pair(self) -> None:
        message = self.send(self.s.employee, self.s.client, "Kickoff on Monday")
        self.assertEqual(message.sender_id, self.s.employee.id)
        self.assertEqual(message.receiver.name, "Carla")
        self.assertEqual(message.content, "Kickoff on Monday")

    def test_send_denied_pair(self) -> None:
        with self.assertRaises(ForbiddenError):
            self.send(self.s.bench, self.s.client)
        with self.assertRaises(ForbiddenError) as ctx:
            self.send(self.s.client, self.s.client)
        self.assertEqual(ctx.exception.message, "You cannot message yourself")

    def test_send_to_missing_or_inactive_receiver(self) -> None:
        gone = add_user(self.db, "Gone", Role.EMPLOYEE, is_active=False)
        with self.assertRaises(NotFoundError):
            self.send(self.s.admin, gone)
        with self.assertRaises(NotFoundError):
            messages.send_message(self.db, self.actor(self.s.admin), 9999, "hi")

    def test_conversation_newest_first_both_directions(self) -> None:
        first = self.send(self.s.employee, self.s.client, "one")
        second = self.send(self.s.client, self.s.employee, "two")
        third = self.send(self.s.employee, self.s.client, "three")
        self.send(self.s.admin, self.s.client, "unrelated")

        items, total = messages.get_conversation(
            self.db, self.actor(self.s.client), self.s.employee.id
        )
        self.assertEqual(total, 3)
        self.assertEqual([m.id for m in items], [third.id, second.id, first.id])

        page, total = messages.get_conversation(
            self.db, self.actor(self.s.client), self.s.employee.id, page=2, limit=2
        )
        self.assertEqual(total, 3)
        self.assertEqual([m.id for m in page], [first.id])

    def test_conversation_requires_permission(self) -> None:
        with self.assertRaises(ForbiddenError):
            messages.get_conversation(self.db, self.actor(self.s.bench), self.s.client.id)


class TestChatPartners(MessagingTestCase):
    def _partners(self, user: User) -> dict[str, str]:
        return {p.name: p.category for p in chat_partners(self.db, self.actor(user))}

    def test_client_sees_support_and_project_team(self) -> None:
        self.assertEqual(self._partners(self.s.client), {"Admin": "Support", "Erin": "Project Team"})

    def test_employee_sees_management_and_company_clients(self) -> None:
        self.assertEqual(self._partners(self.s.employee), {"Admin": "Management", "Carla": "Acme"})
        self.assertEqual(self._partners(self.s.bench), {"Admin": "Management"})

    def test_admin_sees_everyone_active(self) -> None:
        add_user(self.db, "Retired", Role.EMPLOYEE, is_active=False)
        partners = self._partners(self.s.admin)
        self.assertNotIn("Admin", partners)
        self.assertNotIn("Retired", partners)
        self.assertEqual(partners["Carla"], "Acme")
        self.assertEqual(partners["Gus"], "Globex")
        self.assertEqual(partners["Erin"], "EMPLOYEE")
        self.assertEqual(partners["Lou"], "CLIENT")

    def test_unlinked_client_sees_only_admins(self) -> None:
        self.assertEqual(self._partners(self.s.loose_client), {"Admin": "Support"})

    def test_partners_match_can_message(self) -> None:
        add_user(self.db, "Retired", Role.CLIENT, company=self.s.acme, is_active=False)
        everyone = self.db.query(User).all()
        for user in everyone:
            if not user.is_active:
                continue
            listed = {p.id for p in chat_partners(self.db, self.actor(user))}
            for peer in everyone:
                with self.subTest(user=user.name, peer=peer.name):
                    self.assertEqual(
                        peer.id in listed,
                        can_message(self.db, user.id, peer.id),
                    )


if __name__ == "__main__":
    unittest.main()
