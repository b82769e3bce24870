"""End-to-end tests for the forum HTTP API."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from forumcore.config import AuthSettings
from forumcore.domain.service import JWTService
from forumcore.domain.value import Role
from forumcore.interface.api.app import create_app
from tests.di import build_test_container

JWT = JWTService(auth_settings=AuthSettings())


def _token(role: Role = Role.MEMBER) -> str:
    return JWT.create_token(str(uuid4()), f"user-{role.value}", role)


@pytest.fixture
def client():
    """Test client over in-memory persistence."""
    app_instance = create_app(build_test_container(with_fastapi=True))
    with TestClient(app_instance) as test_client:
        yield test_client


class Session:
    """Calls the API as one user."""

    def __init__(self, client: TestClient, role: Role = Role.MEMBER) -> None:
        self.client = client
        self.token = _token(role)

    def request(self, method: str, url: str, **kwargs):
        self.client.cookies.set("auth_token", self.token)
        try:
            return self.client.request(method, url, **kwargs)
        finally:
            self.client.cookies.clear()


def _create_question(session: Session) -> dict:
    response = session.request(
        "POST", "/topics", json={"type": "question", "title": "How do votes work?"}
    )
    assert response.status_code == 201
    return response.json()


def _reply(session: Session, topic_id: str, content: str, parent: str | None = None):
    response = session.request(
        "POST",
        f"/topics/{topic_id}/replies",
        json={"content": content, "parent_reply_id": parent},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthentication:
    def test_mutations_require_token(self, client):
        response = client.post("/topics", json={"title": "Anonymous topic"})

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "not_authenticated"

    def test_invalid_token(self, client):
        client.cookies.set("auth_token", "garbage")
        response = client.post("/topics", json={"title": "Forged topic"})

        assert response.status_code == 401


class TestVotingFlow:
    """Toggle semantics over HTTP."""

    def test_up_up_down(self, client):
        author = Session(client)
        moderator = Session(client, Role.MODERATOR)
        topic = _create_question(author)
        reply = _reply(author, topic["topic_id"], "First reply")
        url = f"/votes/reply/{reply['reply_id']}"

        first = moderator.request("POST", url, json={"value": 1})
        second = moderator.request("POST", url, json={"value": 1})
        third = moderator.request("POST", url, json={"value": -1})

        assert (first.json()["score"], first.json()["user_vote"]) == (1, 1)
        assert (second.json()["score"], second.json()["user_vote"]) == (0, 0)
        assert (third.json()["score"], third.json()["user_vote"]) == (-1, -1)

        state = moderator.request("GET", url).json()
        assert state == {"score": -1, "user_vote": -1}
        assert client.get(url).json() == {"score": -1, "user_vote": 0}

    def test_member_downvote_is_forbidden(self, client):
        member = Session(client)
        topic = _create_question(Session(client))

        response = member.request(
            "POST", f"/votes/topic/{topic['topic_id']}", json={"value": -1}
        )

        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "insufficient_standing"

    def test_invalid_value(self, client):
        member = Session(client)
        topic = _create_question(Session(client))

        response = member.request(
            "POST", f"/votes/topic/{topic['topic_id']}", json={"value": 5}
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "invalid_value"

    def test_unknown_subject(self, client):
        response = Session(client).request(
            "POST", f"/votes/reply/{uuid4()}", json={"value": 1}
        )

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "not_found"

    def test_self_vote_is_forbidden(self, client):
        author = Session(client)
        topic = _create_question(author)
        reply = _reply(author, topic["topic_id"], "My own answer")

        on_topic = author.request(
            "POST", f"/votes/topic/{topic['topic_id']}", json={"value": 1}
        )
        on_reply = author.request(
            "POST", f"/votes/reply/{reply['reply_id']}", json={"value": 1}
        )

        assert on_topic.status_code == on_reply.status_code == 403
        assert on_topic.json()["detail"]["code"] == "self_vote"
        assert on_reply.json()["detail"]["code"] == "self_vote"
        assert client.get(f"/votes/topic/{topic['topic_id']}").json()["score"] == 0

    def test_locked_topic_rejects_votes(self, client):
        author = Session(client)
        voter = Session(client)
        moderator = Session(client, Role.MODERATOR)
        topic = _create_question(author)
        tid = topic["topic_id"]
        reply = _reply(author, tid, "Answer before the lock")
        moderator.request("POST", f"/topics/{tid}/lock")

        on_topic = voter.request("POST", f"/votes/topic/{tid}", json={"value": 1})
        on_reply = voter.request(
            "POST", f"/votes/reply/{reply['reply_id']}", json={"value": 1}
        )

        assert on_topic.status_code == on_reply.status_code == 409
        assert on_topic.json()["detail"]["code"] == "topic_locked"
        assert on_reply.json()["detail"]["code"] == "topic_locked"


class TestThreadFlow:
    """Listing, editing, deleting and accepting."""

    def test_nested_and_flat_listing(self, client):
        author = Session(client)
        topic = _create_question(author)
        tid = topic["topic_id"]
        root = _reply(author, tid, "Root reply")
        child = _reply(author, tid, "Child reply", parent=root["reply_id"])
        grandchild = _reply(author, tid, "Grandchild", parent=child["reply_id"])

        nested = client.get(f"/topics/{tid}/replies?sort=oldest").json()
        flat = client.get(f"/topics/{tid}/replies/flat?max_depth=1").json()

        assert nested["total"] == 3
        assert nested["replies"][0]["children"][0]["reply_id"] == child["reply_id"]
        assert [e["reply"]["reply_id"] for e in flat["replies"]] == [
            root["reply_id"],
            child["reply_id"],
            grandchild["reply_id"],
        ]
        assert [e["level"] for e in flat["replies"]] == [0, 1, 1]

    def test_deep_chain_tree_listing(self, client):
        """A 400-reply chain lists as a tree capped at max_depth levels."""
        author = Session(client)
        topic = _create_question(author)
        tid = topic["topic_id"]
        parent = None
        for n in range(400):
            parent = _reply(author, tid, f"Reply number {n}", parent=parent)["reply_id"]

        response = client.get(f"/topics/{tid}/replies")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 400
        node = body["replies"][0]
        for _ in range(body["max_depth"] - 1):
            node = node["children"][0]
        assert len(node["children"]) == 400 - body["max_depth"]
        assert node["children"][-1]["reply_id"] == parent

    def test_negative_depth(self, client):
        author = Session(client)
        topic = _create_question(author)

        response = client.get(f"/topics/{topic['topic_id']}/replies/flat?max_depth=-1")

        assert response.status_code == 422

    def test_edit_and_delete(self, client):
        author = Session(client)
        stranger = Session(client)
        topic = _create_question(author)
        reply = _reply(author, topic["topic_id"], "Original words")
        url = f"/replies/{reply['reply_id']}"

        forbidden = stranger.request("PATCH", url, json={"content": "Hijacked"})
        edited = author.request("PATCH", url, json={"content": "Edited words"})
        deleted = author.request("DELETE", url)
        after_delete = author.request("PATCH", url, json={"content": "Back again"})

        assert forbidden.status_code == 403
        assert forbidden.json()["detail"]["code"] == "not_author"
        assert edited.status_code == 200
        assert edited.json()["content"] == "Edited words"
        assert deleted.status_code == 204
        assert after_delete.status_code == 409
        assert after_delete.json()["detail"]["code"] == "already_deleted"

    def test_tombstone_keeps_children(self, client):
        author = Session(client)
        topic = _create_question(author)
        tid = topic["topic_id"]
        r3 = _reply(author, tid, "Parent reply")
        _reply(author, tid, "Child one", parent=r3["reply_id"])
        _reply(author, tid, "Child two", parent=r3["reply_id"])

        author.request("DELETE", f"/replies/{r3['reply_id']}")
        nested = client.get(f"/topics/{tid}/replies").json()

        assert nested["replies"][0]["is_deleted"] is True
        assert nested["replies"][0]["content"] == "[Deleted]"
        assert len(nested["replies"][0]["children"]) == 2

    def test_accept_answer(self, client):
        author = Session(client)
        other = Session(client)
        topic = _create_question(author)
        tid = topic["topic_id"]
        a = _reply(other, tid, "Answer A")
        b = _reply(other, tid, "Answer B")

        denied = other.request("POST", f"/topics/{tid}/accept", json={"reply_id": a["reply_id"]})
        author.request("POST", f"/topics/{tid}/accept", json={"reply_id": a["reply_id"]})
        final = author.request("POST", f"/topics/{tid}/accept", json={"reply_id": b["reply_id"]})

        assert denied.status_code == 403
        assert final.json()["accepted_answer_id"] == b["reply_id"]
        listing = client.get(f"/topics/{tid}/replies").json()["replies"]
        accepted = [r["reply_id"] for r in listing if r["is_accepted"]]
        assert accepted == [b["reply_id"]]

    def test_accept_on_discussion(self, client):
        author = Session(client)
        topic = author.request(
            "POST", "/topics", json={"type": "discussion", "title": "Chit chat"}
        ).json()
        reply = _reply(author, topic["topic_id"], "Hello there")

        response = author.request(
            "POST",
            f"/topics/{topic['topic_id']}/accept",
            json={"reply_id": reply["reply_id"]},
        )

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "not_question_type"

    def test_lock_blocks_replies(self, client):
        author = Session(client)
        moderator = Session(client, Role.MODERATOR)
        topic = _create_question(author)
        tid = topic["topic_id"]

        member_lock = author.request("POST", f"/topics/{tid}/lock")
        locked = moderator.request("POST", f"/topics/{tid}/lock")
        response = author.request(
            "POST", f"/topics/{tid}/replies", json={"content": "Anyone?"}
        )

        assert member_lock.status_code == 403
        assert locked.json()["is_locked"] is True
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "topic_locked"

    def test_move_cycle_is_server_error(self, client):
        author = Session(client)
        moderator = Session(client, Role.MODERATOR)
        topic = _create_question(author)
        tid = topic["topic_id"]
        root = _reply(author, tid, "Root reply")
        child = _reply(author, tid, "Child reply", parent=root["reply_id"])

        response = moderator.request(
            "POST",
            f"/replies/{root['reply_id']}/move",
            json={"parent_reply_id": child["reply_id"]},
        )

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "invariant_violation"

    def test_hidden_reply_masked(self, client):
        author = Session(client)
        moderator = Session(client, Role.MODERATOR)
        topic = _create_question(author)
        reply = _reply(author, topic["topic_id"], "Borderline remark")

        moderator.request("POST", f"/replies/{reply['reply_id']}/hide")
        public = client.get(f"/topics/{topic['topic_id']}/replies").json()
        as_mod = moderator.request("GET", f"/topics/{topic['topic_id']}/replies").json()

        assert public["replies"][0]["content"] == "[Hidden]"
        assert as_mod["replies"][0]["content"] == "Borderline remark"

    def test_edit_history_for_moderators(self, client):
        author = Session(client)
        moderator = Session(client, Role.MODERATOR)
        topic = _create_question(author)
        reply = _reply(author, topic["topic_id"], "First draft")
        moderator.request(
            "PATCH",
            f"/replies/{reply['reply_id']}",
            json={"content": "Cleaned up", "reason": "Tone"},
        )

        denied = author.request("GET", f"/replies/{reply['reply_id']}/edits")
        history = moderator.request("GET", f"/replies/{reply['reply_id']}/edits").json()

        assert denied.status_code == 403
        assert history["edits"][0]["previous_content"] == "First draft"
        assert history["edits"][0]["is_moderation"] is True
