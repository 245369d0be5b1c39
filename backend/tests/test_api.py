from __future__ import annotations


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "env": "test"}


def test_intake_round_trip_through_json(client):
    started = client.post("/intake/start", json={"message": "I have a headache"})
    assert started.status_code == 200
    turn = started.json()
    assert turn["kind"] == "question"
    assert turn["question"]["question_id"] == "headache_worst"
    assert turn["assessment"]["urgency"] == "self_care"
    assert turn["flow_state"]["symptom_category"] == "headache"

    for answer in ("no", "no", "neither"):
        response = client.post(
            "/intake/answer",
            json={
                "message": answer,
                "question_id": turn["question"]["question_id"],
                "health_context": turn["health_context"],
                "flow_state": turn["flow_state"],
            },
        )
        assert response.status_code == 200
        turn = response.json()

    assert turn["kind"] == "guidance"
    assert turn["guidance"]["differentials"][0]["name"] == "Migraine"
    assert turn["differentials"][0]["likelihood"] == "high"
    assert turn["flow_state"]["symptom_questions_asked"] == ["headache_worst", "headache_neuro", "headache_neck"]


def test_start_uses_request_context(client):
    response = client.post(
        "/intake/start",
        json={"message": "chest pain", "context": {"for_whom": "family", "age_group": "senior"}},
    )
    body = response.json()
    assert body["kind"] == "emergency"
    assert body["health_context"]["age_group"] == "senior"
    assert body["guidance"]["suggested_actions"][0]["type"] == "call_emergency"


def test_start_rejects_empty_message(client):
    assert client.post("/intake/start", json={"message": ""}).status_code == 422


def test_answer_with_unknown_question_is_400(client):
    turn = client.post("/intake/start", json={"message": "I have a headache"}).json()
    response = client.post(
        "/intake/answer",
        json={
            "message": "yes",
            "question_id": "made_up",
            "health_context": turn["health_context"],
            "flow_state": turn["flow_state"],
        },
    )
    assert response.status_code == 400
    assert "made_up" in response.json()["detail"]


def test_classify(client):
    response = client.post("/triage/classify", json={"text": "fever of 101", "age_group": "infant"})
    assert response.json() == {"urgency": "emergency", "red_flags_detected": ["fever"], "crisis_type": None}

    crisis = client.post("/triage/classify", json={"text": "I took too many pills"}).json()
    assert crisis["urgency"] == "emergency"
    assert crisis["crisis_type"] == "overdose"


def test_memory_candidates_respect_snapshot(client):
    response = client.post(
        "/memory/candidates",
        json={"text": "I'm allergic to latex and have asthma", "memory": {"conditions": ["Asthma"]}},
    )
    candidates = response.json()["candidates"]
    assert [(item["type"], item["value"]) for item in candidates] == [("allergy", "latex")]


def test_memory_validate(client):
    ok = client.post("/memory/validate", json={"type": "medication", "value": "Metformin"})
    assert ok.status_code == 200
    assert ok.json()["candidate"]["type"] == "medication"

    rejected = client.post("/memory/validate", json={"type": "past_episode", "value": "flu in 2019"})
    assert rejected.status_code == 422
    assert "past_episode" in rejected.json()["detail"]


def test_audit_endpoint(client):
    response = client.get("/audit/run")
    assert response.status_code == 200
    body = response.json()
    assert body["report"]["failed_count"] == 0
    assert "SAFETY AUDIT REPORT" in body["text"]


def test_audit_endpoint_is_forbidden_in_production(client, monkeypatch):
    monkeypatch.setenv("INTAKE_ENV", "production")
    assert client.get("/audit/run").status_code == 403


def test_default_member_id_fills_missing_member(backend_module, monkeypatch):
    monkeypatch.setenv("INTAKE_DEFAULT_MEMBER_ID", "member-42")
    assert backend_module.RequestContextPayload().to_core().member_id == "member-42"
    explicit = backend_module.RequestContextPayload(member_id="member-7")
    assert explicit.to_core().member_id == "member-7"
