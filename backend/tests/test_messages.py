"""Tests for organizer/guest messaging and event announcements."""
from eventflow.models.notification import Notification, NotificationType
from tests.conftest import add_guest, auth_headers, create_test_event, register_user


def _setup(client):
    """Owner, two registered guests and a private event inviting both."""
    owner = register_user(client, name="Owner", email="owner@example.com")
    ana = register_user(client, name="Ana", email="ana@example.com")
    bia = register_user(client, name="Bia", email="bia@example.com")
    event = create_test_event(client, owner)
    add_guest(client, owner, event["id"], "ana@example.com")
    add_guest(client, owner, event["id"], "bia@example.com")
    return owner, ana, bia, event


def _send(client, user, event_id, content, receiver_id=None):
    body = {"content": content}
    if receiver_id:
        body["receiver_id"] = receiver_id
    return client.post(f"/events/{event_id}/messages", json=body, headers=auth_headers(user))


class TestSendMessage:

    def test_guest_writes_to_owner(self, client, db):
        owner, ana, _, event = _setup(client)
        resp = _send(client, ana, event["id"], "  Posso levar alguém?  ")
        assert resp.status_code == 201
        data = resp.json()
        assert data["content"] == "Posso levar alguém?"
        assert data["receiver_id"] == owner["id"]
        assert data["sender"]["name"] == "Ana"

        notes = db.query(Notification).filter(Notification.type == NotificationType.new_message).all()
        assert [n.user_id for n in notes] == [owner["id"]]

    def test_owner_needs_receiver(self, client):
        owner, ana, _, event = _setup(client)
        assert _send(client, owner, event["id"], "Oi").status_code == 400
        resp = _send(client, owner, event["id"], "Oi", receiver_id=ana["id"])
        assert resp.status_code == 201
        assert resp.json()["receiver_id"] == ana["id"]

    def test_outsider_refused(self, client):
        _, _, _, event = _setup(client)
        outsider = register_user(client, name="Out", email="out@example.com")
        assert _send(client, outsider, event["id"], "Oi").status_code == 403

    def test_blank_content_refused(self, client):
        _, ana, _, event = _setup(client)
        resp = _send(client, ana, event["id"], "   ")
        assert resp.status_code == 400
        assert "content" in resp.json()["detail"]["fieldErrors"]


class TestConversations:

    def test_grouped_by_participant(self, client):
        owner, ana, bia, event = _setup(client)
        _send(client, ana, event["id"], "primeira da Ana")
        _send(client, ana, event["id"], "segunda da Ana")
        _send(client, bia, event["id"], "oi da Bia")
        _send(client, owner, event["id"], "resposta para Ana", receiver_id=ana["id"])

        resp = client.get(f"/events/{event['id']}/messages/conversations", headers=auth_headers(owner))
        assert resp.status_code == 200
        conversations = resp.json()
        assert [c["user_id"] for c in conversations] == [ana["id"], bia["id"]]
        assert conversations[0]["last_message"] == "resposta para Ana"
        assert conversations[0]["unread_count"] == 2
        assert conversations[1]["unread_count"] == 1

    def test_owner_only(self, client):
        _, ana, _, event = _setup(client)
        resp = client.get(f"/events/{event['id']}/messages/conversations", headers=auth_headers(ana))
        assert resp.status_code == 403


class TestThread:

    def test_thread_marks_received_as_read(self, client):
        owner, ana, _, event = _setup(client)
        _send(client, ana, event["id"], "um")
        _send(client, owner, event["id"], "dois", receiver_id=ana["id"])
        _send(client, ana, event["id"], "três")

        resp = client.get(f"/events/{event['id']}/messages/{ana['id']}", headers=auth_headers(owner))
        assert resp.status_code == 200
        assert [m["content"] for m in resp.json()] == ["um", "dois", "três"]

        conversations = client.get(
            f"/events/{event['id']}/messages/conversations", headers=auth_headers(owner)
        ).json()
        assert conversations[0]["unread_count"] == 0

    def test_guest_reads_thread_with_owner(self, client):
        owner, ana, _, event = _setup(client)
        _send(client, owner, event["id"], "olá", receiver_id=ana["id"])
        resp = client.get(f"/events/{event['id']}/messages/{owner['id']}", headers=auth_headers(ana))
        assert resp.status_code == 200
        assert [m["content"] for m in resp.json()] == ["olá"]

    def test_guest_cannot_read_other_guests_thread(self, client):
        _, ana, bia, event = _setup(client)
        resp = client.get(f"/events/{event['id']}/messages/{bia['id']}", headers=auth_headers(ana))
        assert resp.status_code == 403

    def test_mark_read_receiver_only(self, client):
        owner, ana, _, event = _setup(client)
        message = _send(client, ana, event["id"], "lê aí").json()

        assert client.patch(
            f"/events/{event['id']}/messages/{message['id']}/read", headers=auth_headers(ana)
        ).status_code == 403
        resp = client.patch(f"/events/{event['id']}/messages/{message['id']}/read", headers=auth_headers(owner))
        assert resp.status_code == 200
        assert resp.json()["read"] is True


class TestAnnouncements:

    def test_owner_posts_and_guests_notified(self, client, db):
        owner, ana, bia, event = _setup(client)
        resp = client.post(
            f"/events/{event['id']}/announcements", json={"message": "  Mudamos para as 20h  "},
            headers=auth_headers(owner),
        )
        assert resp.status_code == 201
        assert resp.json()["message"] == "Mudamos para as 20h"

        notes = db.query(Notification).filter(Notification.type == NotificationType.announcement).all()
        assert sorted(n.user_id for n in notes) == sorted([ana["id"], bia["id"]])

    def test_guest_cannot_post(self, client):
        _, ana, _, event = _setup(client)
        resp = client.post(f"/events/{event['id']}/announcements", json={"message": "Oi"}, headers=auth_headers(ana))
        assert resp.status_code == 403

    def test_blank_message(self, client):
        owner, _, _, event = _setup(client)
        resp = client.post(f"/events/{event['id']}/announcements", json={"message": " "}, headers=auth_headers(owner))
        assert resp.status_code == 400

    def test_listing_private_event(self, client):
        owner, ana, _, event = _setup(client)
        outsider = register_user(client, name="Out", email="out@example.com")
        client.post(f"/events/{event['id']}/announcements", json={"message": "Um"}, headers=auth_headers(owner))
        client.post(f"/events/{event['id']}/announcements", json={"message": "Dois"}, headers=auth_headers(owner))

        resp = client.get(f"/events/{event['id']}/announcements", headers=auth_headers(ana))
        assert [a["message"] for a in resp.json()] == ["Dois", "Um"]
        assert client.get(f"/events/{event['id']}/announcements", headers=auth_headers(outsider)).status_code == 403

    def test_edit_and_delete(self, client):
        owner, ana, _, event = _setup(client)
        created = client.post(
            f"/events/{event['id']}/announcements", json={"message": "Rascunho"}, headers=auth_headers(owner)
        ).json()
        url = f"/events/{event['id']}/announcements/{created['id']}"

        assert client.patch(url, json={"message": "x"}, headers=auth_headers(ana)).status_code == 403
        resp = client.patch(url, json={"message": "Final"}, headers=auth_headers(owner))
        assert resp.json()["message"] == "Final"

        assert client.delete(url, headers=auth_headers(owner)).status_code == 200
        assert client.get(f"/events/{event['id']}/announcements", headers=auth_headers(owner)).json() == []
