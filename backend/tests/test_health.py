from termplan.api.routes.health import collection_counts, schema_gaps
from termplan.services.records import REQUESTS, SECTIONS


def test_health_endpoints(client):
    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code in {200, 503}
    payload = ready.json()
    assert "missing_tables" in payload["store"]
    assert "documents" in payload
    assert "departments" in payload


def test_ready_counts_documents_per_collection(engine, store, make_section):
    assert collection_counts(engine) == ({}, 0)

    store.batch_add(
        SECTIONS,
        [
            make_section(id="a1").to_document(),
            make_section(id="a2").to_document(),
            make_section(id="b1", department_id="dept-b").to_document(),
        ],
    )
    store.add(REQUESTS, {"departmentId": "dept-a", "name": "Kim", "loadDesired": 1, "preferences": []})

    assert collection_counts(engine) == ({REQUESTS: 1, SECTIONS: 3}, 2)


def test_schema_gaps_empty_after_bootstrap(engine):
    assert schema_gaps(engine) == ([], {})
