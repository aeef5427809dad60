from fastapi.testclient import TestClient

from winnow.api.app import create_app
from winnow.api.deps import get_llm_router
from winnow.db.repositories import Repository
from winnow.db.session import SessionLocal
from winnow.types import ChecklistDraft, ChecklistItem

COMPANY = {"X-User-Id": "acme", "X-User-Email": "hr@acme.test", "X-User-Name": "Acme", "X-User-Role": "company"}
SEEKER = {"X-User-Id": "seeker-1", "X-User-Email": "kim@example.test", "X-User-Name": "Kim", "X-User-Role": "seeker"}


class FakeRouter:
    def __init__(self) -> None:
        self.prompts: list[str] = []

    def summarize(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return "Overall score: 4\nRecommendation: recommend"

    def draft_checklist(self, *, messages, user_message: str) -> ChecklistDraft:
        history = list(messages)
        return ChecklistDraft(
            title="Backend Engineer",
            progress="stage 1",
            checklist=[ChecklistItem(id="item-1", title="Required skill", description=user_message)],
            ai_response=f"Noted ({len(history)} earlier messages). Anything else?",
        )


def _client() -> tuple[TestClient, FakeRouter]:
    app = create_app()
    fake = FakeRouter()
    app.dependency_overrides[get_llm_router] = lambda: fake
    return TestClient(app), fake


def _create_posting(client: TestClient) -> dict:
    resp = client.post(
        "/api/postings",
        headers=COMPANY,
        json={
            "summary": "Backend Engineer",
            "team": "Platform",
            "checklist": [
                {"id": "a", "title": "X", "description": "Ships X"},
                {"id": "b", "category": "Y", "content": "Knows Y"},
            ],
        },
    )
    assert resp.status_code == 200
    return resp.json()


def test_posting_to_summary_flow() -> None:
    client, fake = _client()

    posting = _create_posting(client)
    assert posting["creatorId"] == "acme"
    assert [item["title"] for item in posting["checklist"]] == ["X", "Y"]
    assert posting["displayTitle"] == "Backend Engineer"

    rejected = client.post(
        "/api/apply-job",
        headers=SEEKER,
        json={
            "jobId": posting["id"],
            "checklistDetails": {
                "a": {"checked": True, "comment": "did X"},
                "b": {"checked": False, "comment": "did Y"},
            },
        },
    )
    assert rejected.status_code == 422
    assert rejected.json()["success"] is False
    assert rejected.json()["missingItems"] == ["b"]

    submitted = client.post(
        "/api/apply-job",
        headers=SEEKER,
        json={
            "seekerId": "seeker-1",
            "jobId": posting["id"],
            "jobTitle": "ignored",
            "checklistDetails": {
                "a": {"checked": True, "comment": "did X"},
                "b": {"checked": True, "comment": "did Y"},
            },
        },
    )
    assert submitted.status_code == 200
    application_id = submitted.json()["id"]

    listed = client.get("/api/applications", headers=COMPANY).json()
    assert [app["id"] for app in listed] == [application_id]
    assert listed[0]["jobTitle"] == "Backend Engineer"
    assert listed[0]["checkedItems"] == ["a", "b"]
    assert listed[0]["status"] == "received"

    counts = client.get("/api/applications/counts", headers=COMPANY).json()
    assert counts["all"] == 1
    assert counts["pending"] == 1

    summary = client.post(f"/api/applications/{application_id}/summary", headers=COMPANY)
    assert summary.status_code == 200
    assert summary.json()["aiSummary"].startswith("Overall score: 4")
    assert "Item: X" in fake.prompts[0]

    status = client.patch(
        f"/api/applications/{application_id}/status",
        headers=COMPANY,
        json={"status": "accepted"},
    )
    assert status.status_code == 200
    assert status.json()["status"] == "accepted"

    mine = client.get("/api/applications", headers=SEEKER).json()
    assert mine[0]["status"] == "accepted"
    assert mine[0]["aiSummary"].startswith("Overall score")


def test_legacy_submission_shape_is_accepted() -> None:
    client, _ = _client()
    posting = _create_posting(client)

    resp = client.post(
        "/api/apply-job",
        headers=SEEKER,
        json={
            "jobId": posting["id"],
            "checkedItems": ["a", "b"],
            "comments": '{"a": "did X", "b": "did Y"}',
        },
    )
    assert resp.status_code == 200

    with SessionLocal() as db:
        application = Repository(db).get_application(resp.json()["id"])
    assert application.checklist_details["b"].title == "Y"
    assert application.comments == {"a": "did X", "b": "did Y"}


def test_persist_summarize_and_reset_envelope() -> None:
    client, _ = _client()
    posting = _create_posting(client)
    application_id = client.post(
        "/api/apply-job",
        headers=SEEKER,
        json={"jobId": posting["id"], "checkedItems": {"a": True, "b": True}, "comments": {"a": "x", "b": "y"}},
    ).json()["id"]

    persisted = client.put(
        f"/api/applications/{application_id}/summary",
        headers=COMPANY,
        json={"summary": "Hand-written note"},
    )
    assert persisted.json()["aiSummary"] == "Hand-written note"

    summarized = client.post(
        "/api/summarize-application",
        headers=COMPANY,
        json={"checklistDetails": {"a": {"title": "X", "checked": True, "comment": "x"}}, "seekerName": "Kim"},
    )
    assert summarized.status_code == 200
    assert summarized.json() == {"success": True, "summary": "Overall score: 4\nRecommendation: recommend"}

    reset = client.post("/api/reset-summaries", headers=COMPANY)
    assert reset.status_code == 200
    body = reset.json()
    assert body["success"] is True
    assert body["count"] == 1
    assert body["failed"] == []
    assert "1" in body["message"]

    after = client.get(f"/api/applications/{application_id}", headers=COMPANY).json()
    assert after["aiSummary"] == ""


def test_draft_and_owner_posting_views() -> None:
    client, _ = _client()
    posting = _create_posting(client)

    draft = client.post(
        "/api/postings/draft",
        headers=COMPANY,
        json={"messages": [{"sender": "user", "text": "hiring"}], "userMsg": "Python"},
    )
    assert draft.status_code == 200
    assert draft.json()["checklist"] == [{"id": "item-1", "title": "Required skill", "description": "Python"}]
    assert draft.json()["aiResponse"].startswith("Noted (1 earlier")

    mine = client.get("/api/postings/mine", headers=COMPANY).json()
    assert [item["id"] for item in mine] == [posting["id"]]
    assert client.get("/api/postings").json()[0]["id"] == posting["id"]

    deleted = client.delete(f"/api/postings/{posting['id']}", headers=COMPANY)
    assert deleted.json() == {"success": True, "id": posting["id"]}
    assert client.get(f"/api/postings/{posting['id']}").status_code == 404
