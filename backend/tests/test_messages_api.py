"""End-to-end tests for the /message HTTP endpoints."""

from switchboard.core.config import settings
from tests.helpers import cookie_header, make_token


class TestSendMessage:
    def test_send_first_message(self, client, alice, bob):
        response = client.put(
            f"/message/send/{bob.id}", json={"message": "hello"}, headers=cookie_header(alice.id)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Message successfuly sent"
        assert data["newMessage"]["message"] == "hello"
        assert data["newMessage"]["senderId"] == alice.id
        assert data["newMessage"]["receiverId"] == bob.id

        inbox = client.get("/message/", headers=cookie_header(alice.id)).json()
        assert len(inbox) == 1
        assert {p["id"] for p in inbox[0]["participants"]} == {alice.id, bob.id}
        assert len(inbox[0]["messages"]) == 1

    def test_second_message_reuses_conversation(self, client, alice, bob):
        first = client.put(
            f"/message/send/{bob.id}", json={"message": "hello"}, headers=cookie_header(alice.id)
        ).json()
        second = client.put(
            f"/message/send/{bob.id}", json={"message": "world"}, headers=cookie_header(alice.id)
        ).json()

        conversation_id = first["newMessage"]["conversationId"]
        assert second["newMessage"]["conversationId"] == conversation_id

        conversation = client.get(f"/message/{conversation_id}", headers=cookie_header(bob.id)).json()
        assert [m["message"] for m in conversation["messages"]] == ["hello", "world"]

    def test_post_is_accepted_too(self, client, alice, bob):
        response = client.post(
            f"/message/send/{bob.id}", json={"message": "hello"}, headers=cookie_header(alice.id)
        )

        assert response.status_code == 201

    def test_missing_body_is_400(self, client, alice, bob):
        response = client.put(f"/message/send/{bob.id}", json={}, headers=cookie_header(alice.id))

        assert response.status_code == 400
        assert response.json()["message"] == "Incomplete input, message is required"

    def test_no_body_at_all_is_400(self, client, alice, bob):
        response = client.put(f"/message/send/{bob.id}", headers=cookie_header(alice.id))

        assert response.status_code == 400
        assert response.json() == {
            "message": "Incomplete input, message is required",
            "code": "ValidationError",
        }

    def test_non_string_message_is_400(self, client, alice, bob):
        response = client.put(
            f"/message/send/{bob.id}", json={"message": 123}, headers=cookie_header(alice.id)
        )

        assert response.status_code == 400
        assert response.json()["code"] == "ValidationError"
        assert client.get("/message/", headers=cookie_header(alice.id)).json() == []

    def test_non_object_body_is_400(self, client, alice, bob):
        response = client.put(
            f"/message/send/{bob.id}", json=["hello"], headers=cookie_header(alice.id)
        )

        assert response.status_code == 400

    def test_unknown_receiver_is_404(self, client, alice):
        response = client.put(
            "/message/send/nobody", json={"message": "hello"}, headers=cookie_header(alice.id)
        )

        assert response.status_code == 404

    def test_requires_authentication(self, client, bob):
        response = client.put(f"/message/send/{bob.id}", json={"message": "hello"})

        assert response.status_code == 401
        assert response.json()["code"] == "AuthenticationError"

    def test_token_signed_with_another_secret_is_rejected(self, client, alice, bob):
        forged = make_token(alice.id, secret="not-the-secret")

        response = client.put(
            f"/message/send/{bob.id}",
            json={"message": "hello"},
            headers={"cookie": f"{settings.auth_cookie_name}={forged}"},
        )

        assert response.status_code == 401

    def test_bearer_header_is_accepted(self, client, alice, bob):
        response = client.put(
            f"/message/send/{bob.id}",
            json={"message": "hello"},
            headers={"Authorization": f"Bearer {make_token(alice.id)}"},
        )

        assert response.status_code == 201

    def test_database_failure_is_500_without_raw_error(self, client, alice, bob, monkeypatch):
        from sqlalchemy.exc import OperationalError

        from switchboard.core import conversation as store

        def fail_update(session, conversation):
            raise OperationalError("UPDATE conversations", {}, Exception("secret internals"))

        monkeypatch.setattr(store, "save_conversation", fail_update)

        response = client.put(
            f"/message/send/{bob.id}", json={"message": "hello"}, headers=cookie_header(alice.id)
        )

        assert response.status_code == 500
        assert response.json() == {"message": "Database Error", "code": "DatabaseError"}
        assert client.get("/message/", headers=cookie_header(alice.id)).json() == []


class TestReadConversations:
    def _send(self, client, sender, receiver, body):
        return client.put(
            f"/message/send/{receiver.id}", json={"message": body}, headers=cookie_header(sender.id)
        ).json()

    def test_outsider_cannot_read_conversation(self, client, alice, bob, carol):
        sent = self._send(client, alice, bob, "hello")
        conversation_id = sent["newMessage"]["conversationId"]

        response = client.get(f"/message/{conversation_id}", headers=cookie_header(carol.id))

        assert response.status_code == 401
        assert "hello" not in response.text
        assert "messages" not in response.json()

    def test_participants_are_stripped_of_credentials(self, client, alice, bob):
        sent = self._send(client, alice, bob, "hello")

        conversation = client.get(
            f"/message/{sent['newMessage']['conversationId']}", headers=cookie_header(alice.id)
        ).json()

        for participant in conversation["participants"]:
            assert set(participant) == {"id", "username", "iconUrl"}
        assert "notarealhash" not in str(conversation)

    def test_inbox_shows_latest_message_per_conversation(self, client, alice, bob, carol):
        self._send(client, alice, bob, "one")
        self._send(client, bob, alice, "two")
        self._send(client, carol, alice, "three")

        inbox = client.get("/message/", headers=cookie_header(alice.id)).json()

        assert sorted(c["messages"][0]["message"] for c in inbox) == ["three", "two"]
        assert all(len(c["messages"]) == 1 for c in inbox)

    def test_messages_with_user(self, client, alice, bob, carol):
        self._send(client, alice, bob, "hello")

        with_bob = client.get(f"/message/with/{bob.id}", headers=cookie_header(alice.id)).json()
        with_carol = client.get(f"/message/with/{carol.id}", headers=cookie_header(alice.id)).json()

        assert [m["message"] for m in with_bob["messages"]] == ["hello"]
        assert with_carol["messages"] == []

    def test_inbox_requires_authentication(self, client):
        assert client.get("/message/").status_code == 401


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
