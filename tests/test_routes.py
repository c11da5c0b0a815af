from fastapi.testclient import TestClient

from src.todo_board.domain.exceptions import StoreUnavailableError

TODOS = "/api/todos"


def _create(client: TestClient, title: str, **fields) -> dict:
    response = client.post(TODOS, json={"title": title, **fields})
    assert response.status_code == 201, response.text
    return response.json()


def _delete(client: TestClient, todo_id):
    return client.request("DELETE", TODOS, json={"id": todo_id})


def test_create_defaults_to_pending(api_client: TestClient) -> None:
    body = _create(api_client, "Buy milk")

    assert body["status"] == "Pending"
    assert body["id"]
    assert body["description"] == ""
    assert {"createdAt", "updatedAt"} <= set(body)


def test_create_with_blank_title_is_client_fault(api_client: TestClient, repository) -> None:
    response = api_client.post(TODOS, json={"title": "   "})

    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}
    assert repository.todos == {}


def test_malformed_json_is_client_fault_not_422(api_client: TestClient) -> None:
    response = api_client.post(
        TODOS, content=b"{not json", headers={"content-type": "application/json"}
    )

    assert response.status_code == 400
    assert "error" in response.json()


def test_search_returns_filtered_total(api_client: TestClient) -> None:
    _create(api_client, "Buy milk")
    _create(api_client, "Call mum")

    response = api_client.get(TODOS, params={"search": "MILK"})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert [task["title"] for task in body["tasks"]] == ["Buy milk"]


def test_round_trip_create_then_search(api_client: TestClient) -> None:
    created = _create(api_client, "Plan trip", description="Book hotel", status="In-Progress")

    body = api_client.get(TODOS, params={"search": "Plan trip"}).json()

    assert body["tasks"] == [created]


def test_search_treats_wildcards_literally(api_client: TestClient) -> None:
    _create(api_client, "100% done")
    _create(api_client, "1000 things")

    body = api_client.get(TODOS, params={"search": "0%"}).json()

    assert [task["title"] for task in body["tasks"]] == ["100% done"]


def test_list_page_beyond_end_is_empty(api_client: TestClient) -> None:
    for n in range(6):
        _create(api_client, f"task {n}")

    body = api_client.get(TODOS, params={"page": 2, "limit": 6}).json()

    assert body["tasks"] == []
    assert body["total"] == 6


def test_list_bad_params_fall_back_to_defaults(api_client: TestClient) -> None:
    for n in range(8):
        _create(api_client, f"task {n}")

    body = api_client.get(TODOS, params={"page": "x", "limit": "y"}).json()

    assert body["page"] == 1
    assert body["limit"] == 6
    assert len(body["tasks"]) == 6
    assert body["tasks"][0]["title"] == "task 7"


def test_update_status_is_visible_in_list(api_client: TestClient) -> None:
    created = _create(api_client, "Write tests")

    response = api_client.put(TODOS, json={"id": created["id"], "status": "Completed"})

    assert response.status_code == 200
    listed = api_client.get(TODOS).json()["tasks"][0]
    assert listed["status"] == "Completed"
    assert listed["updatedAt"] > created["updatedAt"]
    assert listed["createdAt"] == created["createdAt"]


def test_update_invalid_status_is_client_fault(api_client: TestClient) -> None:
    created = _create(api_client, "Write tests")

    response = api_client.put(TODOS, json={"id": created["id"], "status": "Finished"})

    assert response.status_code == 400
    assert "not a valid status" in response.json()["error"]


def test_update_unknown_id_is_not_found(api_client: TestClient) -> None:
    response = api_client.put(TODOS, json={"id": "0" * 32, "title": "x"})

    assert response.status_code == 404
    assert response.json() == {"message": "Todo not found"}


def test_delete_then_list_excludes_record(api_client: TestClient) -> None:
    keep = _create(api_client, "keep")
    drop = _create(api_client, "drop")

    response = _delete(api_client, drop["id"])

    assert response.status_code == 200
    assert response.json() == {"message": "Todo deleted successfully"}
    body = api_client.get(TODOS).json()
    assert body["total"] == 1
    assert [task["id"] for task in body["tasks"]] == [keep["id"]]


def test_delete_absent_id_is_not_found_every_time(api_client: TestClient) -> None:
    created = _create(api_client, "once")
    assert _delete(api_client, created["id"]).status_code == 200

    for _ in range(2):
        response = _delete(api_client, created["id"])
        assert response.status_code == 404
        assert response.json() == {"message": "Todo not found"}


def test_delete_without_id_is_client_fault(api_client: TestClient) -> None:
    response = api_client.request("DELETE", TODOS, json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Todo id is required"}


def test_store_failure_on_list_is_server_fault(api_client: TestClient, repository) -> None:
    repository.fail_with = StoreUnavailableError("Todo store failed during find")

    response = api_client.get(TODOS)

    assert response.status_code == 500
    assert response.json() == {"error": "Todo store failed during find"}


def test_store_failure_on_create_is_client_fault(api_client: TestClient, repository) -> None:
    repository.fail_with = StoreUnavailableError("Todo store failed during add")

    response = api_client.post(TODOS, json={"title": "never stored"})

    assert response.status_code == 400
    assert response.json() == {"error": "Todo store failed during add"}


def test_store_failure_on_update_is_client_fault(api_client: TestClient, repository) -> None:
    todo = _create(api_client, "Stored before outage")
    repository.fail_with = StoreUnavailableError("Todo store failed during get")

    response = api_client.put(TODOS, json={"id": todo["id"], "status": "Completed"})

    assert response.status_code == 400
    assert response.json() == {"error": "Todo store failed during get"}


def test_store_failure_on_delete_is_server_fault(api_client: TestClient, repository) -> None:
    repository.fail_with = StoreUnavailableError("Todo store failed during remove")

    response = _delete(api_client, "abc")

    assert response.status_code == 500


def test_health(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
