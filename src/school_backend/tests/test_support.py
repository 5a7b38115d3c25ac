"""
Support tickets: ownership, administrator handling and responses.
"""

import pytest

from school_backend.model.support import SupportTicket
from school_backend.tests.fixtures import make_principal


def ticket_payload(**kwargs) -> dict:
    payload = {
        "title": "Cannot open workbook",
        "description": "The page stays blank",
        "category": "technical",
    }
    payload.update(kwargs)
    return payload


@pytest.fixture
def student(create_user, as_principal):
    user = create_user(role="student")
    return as_principal(make_principal(role="student", user_id=user.id))


@pytest.fixture
def foreign_ticket(session, create_user):
    owner = create_user(role="teacher")
    ticket = SupportTicket(user_id=owner.id, **ticket_payload(title="Projector broken"))
    session.add(ticket)
    session.commit()
    return ticket


@pytest.mark.integration
class TestSupportTickets:

    def test_open_ticket_as_caller(self, client, student):
        response = client.post("/api/support/tickets", json=ticket_payload(priority="high"))

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == student.user_id
        assert body["status"] == "open"
        assert body["priority"] == "high"
        assert body["responses"] == []

    def test_owner_cannot_be_chosen(self, client, student):
        response = client.post("/api/support/tickets", json=ticket_payload(user_id="someone-else"))

        assert response.status_code == 422

    def test_non_admin_sees_own_tickets_only(self, client, student, foreign_ticket):
        own = client.post("/api/support/tickets", json=ticket_payload()).json()

        listed = client.get("/api/support/tickets")

        assert [t["id"] for t in listed.json()] == [own["id"]]
        assert listed.headers["X-Total-Count"] == "1"
        assert client.get(f"/api/support/tickets/{foreign_ticket.id}").status_code == 404

    def test_admin_sees_every_ticket(self, client, create_user, as_principal, foreign_ticket):
        as_principal(make_principal(role="admin", user_id=create_user(role="admin").id))

        assert [t["id"] for t in client.get("/api/support/tickets").json()] == [foreign_ticket.id]

    def test_only_admin_updates_tickets(self, client, create_user, as_principal, student):
        ticket_id = client.post("/api/support/tickets", json=ticket_payload()).json()["id"]

        assert client.patch(f"/api/support/tickets/{ticket_id}", json={"status": "closed"}).status_code == 403

        admin = create_user(role="admin")
        as_principal(make_principal(role="admin", user_id=admin.id))
        updated = client.patch(f"/api/support/tickets/{ticket_id}", json={"status": "in_progress", "assigned_to": admin.id})

        assert updated.status_code == 200
        assert updated.json()["status"] == "in_progress"
        assert updated.json()["assigned_to"] == admin.id

    def test_assignee_must_exist(self, client, create_user, as_principal, foreign_ticket):
        as_principal(make_principal(role="admin", user_id=create_user(role="admin").id))

        assert client.patch(f"/api/support/tickets/{foreign_ticket.id}", json={"assigned_to": "missing"}).status_code == 404

    def test_responses(self, client, create_user, as_principal, student):
        ticket_id = client.post("/api/support/tickets", json=ticket_payload()).json()["id"]

        own = client.post(f"/api/support/tickets/{ticket_id}/responses", json={"message": "Still blank"})
        assert own.status_code == 201
        assert own.json()["is_from_support"] is False

        as_principal(make_principal(role="admin", user_id=create_user(role="admin").id))
        reply = client.post(f"/api/support/tickets/{ticket_id}/responses", json={"message": "Fixed"})
        assert reply.json()["is_from_support"] is True

        detail = client.get(f"/api/support/tickets/{ticket_id}").json()
        assert [r["message"] for r in detail["responses"]] == ["Still blank", "Fixed"]

    def test_cannot_respond_to_foreign_ticket(self, client, student, foreign_ticket):
        response = client.post(f"/api/support/tickets/{foreign_ticket.id}/responses", json={"message": "Hi"})

        assert response.status_code == 404

    def test_without_support_permission(self, client, as_principal):
        as_principal(make_principal(permissions=set()))

        assert client.post("/api/support/tickets", json=ticket_payload()).status_code == 403
        assert client.get("/api/support/tickets").status_code == 403
