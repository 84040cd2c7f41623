import requests

from generator import build_prompt


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def test_build_prompt():
    assert build_prompt("Data Engineer", ["Spark", "SQL"]) == \
        "Create a job description for a Data Engineer with skills: Spark, SQL"
    assert build_prompt("Tester", "pytest") == "Create a job description for a Tester with skills: pytest"


def test_generate_description(client, app, monkeypatch):
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append((url, json, headers, timeout))
        return FakeResponse([{"generated_text": "  A great role.  "}])

    monkeypatch.setattr(requests, "post", fake_post)
    resp = client.post("/api/generate-description", json={"jobTitle": "Go Developer", "skills": ["Go"]})

    assert resp.status_code == 200
    assert resp.get_json() == {"description": "A great role."}
    url, body, headers, timeout = calls[0]
    assert url == app.config["INFERENCE_API_URL"]
    assert body == {
        "inputs": "Create a job description for a Go Developer with skills: Go",
        "options": {"wait_for_model": True},
    }
    assert headers["Authorization"] == "Bearer test-key"
    assert timeout == app.config["INFERENCE_TIMEOUT"]


def test_generate_description_accepts_single_object(client, monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse({"generated_text": "Text"}))
    resp = client.post("/api/generate-description", json={"jobTitle": "QA"})
    assert resp.get_json() == {"description": "Text"}


def test_generate_description_upstream_error(client, monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse({"error": "loading"}, 503))
    resp = client.post("/api/generate-description", json={"jobTitle": "QA", "skills": "x"})
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Error generating job description"}


def test_generate_description_bad_payload(client, monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse([]))
    resp = client.post("/api/generate-description", json={"jobTitle": "QA"})
    assert resp.status_code == 500


def test_generate_description_requires_title(client):
    assert client.post("/api/generate-description", json={"skills": "Go"}).status_code == 400
