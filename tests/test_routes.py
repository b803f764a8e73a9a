import asyncio

import pytest
from fastapi.testclient import TestClient

from medscribe.config import settings
from medscribe.core.models import TranscriptionResult
from medscribe.main import app
from medscribe.models import get_llm
from medscribe.services.session_store import get_store

from .samples import MINIMAL_COMPLETION

DOC = {"X-User-Id": "doc-1"}
OTHER_DOC = {"X-User-Id": "doc-2"}


@pytest.fixture
def llm(make_llm):
    return make_llm(content=MINIMAL_COMPLETION)


@pytest.fixture
def client(llm, store):
    app.dependency_overrides[get_llm] = lambda: llm
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_patient(client, name="Jane Roe", headers=DOC):
    r = client.post("/patients", json={"name": name}, headers=headers)
    assert r.status_code == 201
    return r.json()["id"]


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["service"] == "medscribe"
    assert body["llm_model"] == settings.LLM_MODEL
    assert isinstance(body["llm_configured"], bool)


class TestAnalyze:
    def test_requires_identity(self, client, llm):
        r = client.post("/nlp/analyze", json={"prompt": "patient has cough"})
        assert r.status_code == 401
        assert llm.calls == []

    def test_success(self, client):
        r = client.post("/nlp/analyze", json={"prompt": "Ptint has couh"}, headers=DOC)
        assert r.status_code == 200
        body = r.json()
        assert body["data"]["chiefComplaint"]["complaint"] == "fever and cough"
        assert "error" not in body

    def test_missing_prompt(self, client):
        r = client.post("/nlp/analyze", json={}, headers=DOC)
        assert r.status_code == 400
        assert r.json() == {"error": "Missing prompt"}

    def test_malformed_output(self, make_llm, client):
        app.dependency_overrides[get_llm] = lambda: make_llm(content="not json at all")
        r = client.post("/nlp/analyze", json={"prompt": "cough"}, headers=DOC)
        assert r.status_code == 422
        assert r.json() == {"error": "Model output not valid JSON", "details": "not json at all"}

    def test_invalid_shape(self, make_llm, client):
        app.dependency_overrides[get_llm] = lambda: make_llm(content='{"patient": {}}')
        r = client.post("/nlp/analyze", json={"prompt": "cough"}, headers=DOC)
        assert r.status_code == 422
        body = r.json()
        assert body["error"] == "Invalid data shape returned by AI"
        assert body["issues"] == [{"path": "chiefComplaint", "expected": "required field", "received": "missing"}]

    def test_upstream_failure(self, make_llm, client):
        app.dependency_overrides[get_llm] = lambda: make_llm(status_code=429, body="rate limited")
        r = client.post("/nlp/analyze", json={"prompt": "cough"}, headers=DOC)
        assert r.status_code == 502
        assert r.json()["error"] == "API request failed"

    def test_saves_session_for_patient(self, client, store):
        pid = create_patient(client)
        r = client.post("/nlp/analyze", json={"prompt": "cough", "patient_id": pid}, headers=DOC)
        assert r.status_code == 200
        sid = r.json()["session_id"]
        assert store.get_session("doc-1", pid, sid).structured_data == r.json()["data"]

    def test_foreign_patient(self, client, llm):
        pid = create_patient(client, headers=OTHER_DOC)
        r = client.post("/nlp/analyze", json={"prompt": "cough", "patient_id": pid}, headers=DOC)
        assert r.status_code == 403
        assert r.json()["error"] == "Unauthorized"
        assert llm.calls == []


class TestPatientsAndSessions:
    def test_create_validates_name(self, client):
        r = client.post("/patients", json={"name": " J "}, headers=DOC)
        assert r.status_code == 422

    def test_list_patients(self, client):
        create_patient(client, "Zed")
        create_patient(client, "Amy")
        create_patient(client, "Hidden", headers=OTHER_DOC)
        r = client.get("/patients", headers=DOC)
        assert r.json()["count"] == 2
        assert [p["name"] for p in r.json()["patients"]] == ["Amy", "Zed"]

    def test_session_crud(self, client):
        pid = create_patient(client)
        sid = client.post("/nlp/analyze", json={"prompt": "cough", "patient_id": pid}, headers=DOC).json()["session_id"]

        listed = client.get(f"/patients/{pid}/sessions", headers=DOC).json()
        assert listed["count"] == 1
        assert listed["sessions"][0]["id"] == sid

        r = client.get(f"/patients/{pid}/sessions/{sid}", headers=DOC)
        assert r.status_code == 200
        assert r.json()["transcript"] == "cough"

        assert client.get(f"/patients/{pid}/sessions/{sid}", headers=OTHER_DOC).status_code == 403

        r = client.delete(f"/patients/{pid}/sessions/{sid}", headers=DOC)
        assert r.json() == {"success": True}
        assert client.get(f"/patients/{pid}/sessions/{sid}", headers=DOC).status_code == 404

    def test_unknown_patient(self, client):
        r = client.get("/patients/nope/sessions", headers=DOC)
        assert r.status_code == 404
        assert r.json() == {"detail": "Not found"}

    def test_update_patient(self, client):
        pid = create_patient(client, "Jane Roe")
        r = client.put(f"/patients/{pid}", json={"name": "Jane Smith", "gender": "female"}, headers=DOC)
        assert r.status_code == 200
        assert r.json()["name"] == "Jane Smith"
        assert r.json()["id"] == pid

        assert client.put(f"/patients/{pid}", json={"name": "Mallory"}, headers=OTHER_DOC).status_code == 403
        assert client.put("/patients/nope", json={"name": "Nobody"}, headers=DOC).status_code == 404
        assert client.put(f"/patients/{pid}", json={"name": "J"}, headers=DOC).status_code == 422

    def test_delete_patient_removes_sessions(self, client):
        pid = create_patient(client)
        sid = client.post("/nlp/analyze", json={"prompt": "cough", "patient_id": pid}, headers=DOC).json()["session_id"]

        assert client.delete(f"/patients/{pid}", headers=OTHER_DOC).status_code == 403
        assert client.get(f"/patients/{pid}/sessions/{sid}", headers=DOC).status_code == 200

        r = client.delete(f"/patients/{pid}", headers=DOC)
        assert r.json() == {"success": True}
        assert client.get(f"/patients/{pid}/sessions", headers=DOC).status_code == 404
        assert client.get("/patients", headers=DOC).json()["count"] == 0

    def test_store_calls_leave_the_event_loop(self, client, store, monkeypatch):
        threads = []
        original = store.list_patients

        def recording_list_patients(owner_id):
            try:
                asyncio.get_running_loop()
                threads.append("event loop")
            except RuntimeError:
                threads.append("worker thread")
            return original(owner_id)

        monkeypatch.setattr(store, "list_patients", recording_list_patients)
        assert client.get("/patients", headers=DOC).status_code == 200
        assert threads == ["worker thread"]


def test_print_report(client):
    pid = create_patient(client, "Jane Roe")
    sid = client.post("/nlp/analyze", json={"prompt": "cough", "patient_id": pid}, headers=DOC).json()["session_id"]

    r = client.get(f"/print/patients/{pid}/sessions/{sid}", headers=DOC)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "Jane Roe" in r.text
    assert "fever and cough" in r.text

    assert client.get(f"/print/patients/{pid}/sessions/{sid}", headers=OTHER_DOC).status_code == 403


class TestTranscribe:
    def test_returns_text(self, client, monkeypatch, tmp_path):
        seen = []

        def fake_transcribe(path):
            seen.append(path)
            return TranscriptionResult(text="patient has a cough")

        monkeypatch.setattr(settings, "TMP_DIR", str(tmp_path))
        monkeypatch.setattr("medscribe.routes.ingest.transcribe_audio", fake_transcribe)

        r = client.post("/transcribe", files={"audio": ("visit.webm", b"RIFF....", "audio/webm")}, headers=DOC)
        assert r.status_code == 200
        assert r.json() == {"text": "patient has a cough"}
        assert seen[0].endswith(".webm")
        assert list(tmp_path.iterdir()) == []

    def test_empty_upload(self, client, monkeypatch, tmp_path):
        monkeypatch.setattr(settings, "TMP_DIR", str(tmp_path))
        r = client.post("/transcribe", files={"audio": ("visit.webm", b"", "audio/webm")}, headers=DOC)
        assert r.status_code == 400
        assert r.json() == {"error": "Missing audio file for transcription."}

    def test_failure(self, client, monkeypatch, tmp_path):
        monkeypatch.setattr(settings, "TMP_DIR", str(tmp_path))
        monkeypatch.setattr(
            "medscribe.routes.ingest.transcribe_audio",
            lambda path: TranscriptionResult(error="Whisper returned empty transcription."),
        )
        r = client.post("/transcribe", files={"audio": ("visit.wav", b"data", "audio/wav")}, headers=DOC)
        assert r.status_code == 502
        assert r.json() == {"error": "Whisper returned empty transcription."}
