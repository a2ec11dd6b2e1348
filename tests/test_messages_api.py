"""Tests for the /messages endpoints."""

import uuid

from conftest import auth_headers, make_user


class TestListContacts:
    """GET /api/messages/users"""

    def test_lists_everyone_but_the_caller(self, client, alice, bob, carol):
        response = client.get("/api/messages/users", headers=auth_headers(alice))

        assert response.status_code == 200
        body = response.json()
        assert [peer["displayName"] for peer in body] == ["Bob Roe", "Carol Poe"]
        assert str(alice.id) not in {peer["id"] for peer in body}

    def test_peer_shape_is_camel_case(self, client, alice, bob):
        response = client.get("/api/messages/users", headers=auth_headers(alice))

        peer = response.json()[0]
        assert set(peer) == {"id", "displayName", "profilePicture"}
        assert peer["id"] == str(bob.id)
        assert peer["profilePicture"] is None

    def test_inactive_users_are_hidden(self, client, db, alice, bob):
        make_user(db, "Dormant Dan", "dan@example.com", is_active=False)

        response = client.get("/api/messages/users", headers=auth_headers(alice))

        assert [peer["displayName"] for peer in response.json()] == ["Bob Roe"]

    def test_requires_authentication(self, client, alice):
        response = client.get("/api/messages/users")

        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized - No token provided"

    def test_rejects_invalid_token(self, client, alice):
        response = client.get(
            "/api/messages/users",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized - Invalid token"


class TestSendMessage:
    """POST /api/messages/send/{peer_id}"""

    def test_returns_canonical_message(self, client, alice, bob):
        response = client.post(
            f"/api/messages/send/{bob.id}",
            json={"text": "hi bob"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["senderId"] == str(alice.id)
        assert body["receiverId"] == str(bob.id)
        assert body["text"] == "hi bob"
        assert body["image"] is None
        assert uuid.UUID(body["id"])
        assert body["createdAt"]

    def test_image_only_message_is_accepted(self, client, alice, bob):
        response = client.post(
            f"/api/messages/send/{bob.id}",
            json={"image": "data:image/png;base64,AAAA"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 201
        assert response.json()["text"] is None
        assert response.json()["image"] == "data:image/png;base64,AAAA"

    def test_empty_message_is_rejected(self, client, alice, bob):
        response = client.post(
            f"/api/messages/send/{bob.id}",
            json={"text": "   "},
            headers=auth_headers(alice),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Message text or image is required"

    def test_cannot_message_yourself(self, client, alice):
        response = client.post(
            f"/api/messages/send/{alice.id}",
            json={"text": "note to self"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 400

    def test_unknown_receiver(self, client, alice):
        response = client.post(
            f"/api/messages/send/{uuid.uuid4()}",
            json={"text": "anyone there?"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Receiver not found"

    def test_malformed_peer_id(self, client, alice):
        response = client.post(
            "/api/messages/send/not-a-uuid",
            json={"text": "hello"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid user id"


class TestHistory:
    """GET /api/messages/{peer_id}"""

    def _send(self, client, sender, receiver, text):
        response = client.post(
            f"/api/messages/send/{receiver.id}",
            json={"text": text},
            headers=auth_headers(sender),
        )
        assert response.status_code == 201
        return response.json()

    def test_history_is_ordered_and_covers_both_directions(self, client, alice, bob):
        first = self._send(client, alice, bob, "one")
        second = self._send(client, bob, alice, "two")
        third = self._send(client, alice, bob, "three")

        response = client.get(f"/api/messages/{bob.id}", headers=auth_headers(alice))

        assert response.status_code == 200
        assert [m["id"] for m in response.json()] == [first["id"], second["id"], third["id"]]
        assert [m["text"] for m in response.json()] == ["one", "two", "three"]

    def test_history_is_symmetric(self, client, alice, bob):
        self._send(client, alice, bob, "one")
        self._send(client, bob, alice, "two")

        from_alice = client.get(f"/api/messages/{bob.id}", headers=auth_headers(alice)).json()
        from_bob = client.get(f"/api/messages/{alice.id}", headers=auth_headers(bob)).json()

        assert from_alice == from_bob

    def test_other_conversations_are_excluded(self, client, alice, bob, carol):
        self._send(client, alice, bob, "for bob")
        self._send(client, alice, carol, "for carol")
        self._send(client, carol, bob, "carol to bob")

        response = client.get(f"/api/messages/{bob.id}", headers=auth_headers(alice))

        assert [m["text"] for m in response.json()] == ["for bob"]

    def test_empty_conversation(self, client, alice, bob):
        response = client.get(f"/api/messages/{bob.id}", headers=auth_headers(alice))

        assert response.status_code == 200
        assert response.json() == []

    def test_requires_authentication(self, client, bob):
        response = client.get(f"/api/messages/{bob.id}")

        assert response.status_code == 401


class TestMessageHandler:
    """Sequence numbering in MessageHandler."""

    def test_sequence_numbers_are_per_conversation(self, db, alice, bob, carol):
        from chatapp.chat import MessageHandler

        m1 = MessageHandler.create_message(db, alice.id, bob.id, text="a")
        m2 = MessageHandler.create_message(db, bob.id, alice.id, text="b")
        m3 = MessageHandler.create_message(db, alice.id, carol.id, text="c")

        assert (m1.sequence_number, m2.sequence_number) == (1, 2)
        assert m3.sequence_number == 1
