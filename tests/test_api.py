from __future__ import annotations

import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from fake_store import FakeObjectStore, environment_payload, function_payload
from fissionctl.api import create_app
from fissionctl.clients import FissionClients
from fissionctl.config import RestConfig
from fissionctl.transport import configure_transport


@pytest.fixture
def api(clients: FissionClients) -> TestClient:
    return TestClient(create_app(clients))


def _body(name: str = "py", image: str = "fission/python-env") -> dict:
    payload = environment_payload(name, image)
    payload.pop("apiVersion")
    payload.pop("kind")
    return payload


def test_environment_lifecycle(api: TestClient, store: FakeObjectStore) -> None:
    created = api.post("/v1/environments", json=_body())

    assert created.status_code == 201
    summary = created.json()
    assert summary["name"] == "py"
    assert summary["instanceId"]

    fetched = api.get("/v1/environments/py")
    assert fetched.status_code == 200
    document = fetched.json()
    assert document["metadata"]["uid"] == summary["instanceId"]
    assert document["spec"]["runtime"]["image"] == "fission/python-env"
    assert document["kind"] == "Environment"

    deleted = api.delete("/v1/environments/py")
    assert deleted.status_code == 200
    assert deleted.content == b""

    missing = api.get("/v1/environments/py")
    assert missing.status_code == 404
    assert missing.json()["error"] == "NotFound"


def test_update_with_mismatched_name_is_rejected_without_mutation(
    api: TestClient, store: FakeObjectStore
) -> None:
    api.post("/v1/environments", json=_body())
    mutations = store.mutations
    requests = len(store.requests)

    response = api.put("/v1/environments/py", json=_body("other", "changed"))

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"
    assert store.mutations == mutations
    assert len(store.requests) == requests
    assert api.get("/v1/environments/py").json()["spec"]["runtime"]["image"] == "fission/python-env"


def test_update_returns_identity(api: TestClient) -> None:
    summary = api.post("/v1/environments", json=_body()).json()
    current = api.get("/v1/environments/py").json()
    current["spec"]["runtime"]["image"] = "fission/python3-env"

    response = api.put("/v1/environments/py", json=current)

    assert response.status_code == 200
    assert response.json() == {"name": "py", "instanceId": summary["instanceId"]}
    assert api.get("/v1/environments/py").json()["spec"]["runtime"]["image"] == "fission/python3-env"


def test_create_conflict_maps_to_409(api: TestClient) -> None:
    api.post("/v1/environments", json=_body())

    response = api.post("/v1/environments", json=_body())

    assert response.status_code == 409
    assert response.json()["error"] == "Conflict"


def test_list_returns_full_documents(api: TestClient, store: FakeObjectStore) -> None:
    store.add_version("functions", function_payload("a"))
    store.add_version("functions", function_payload("b"))

    response = api.get("/v1/functions")

    assert response.status_code == 200
    body = response.json()
    assert body["kind"] == "FunctionList"
    assert [item["metadata"]["name"] for item in body["items"]] == ["a", "b"]


def test_list_passes_selectors_through(api: TestClient, store: FakeObjectStore) -> None:
    labelled = function_payload("a")
    labelled["metadata"]["labels"] = {"team": "x"}
    store.add_version("functions", labelled)
    store.add_version("functions", function_payload("b"))

    response = api.get("/v1/functions", params={"labelSelector": "team=x"})

    assert [item["metadata"]["name"] for item in response.json()["items"]] == ["a"]
    assert store.requests[-1].url.params["labelSelector"] == "team=x"


def test_list_forwards_paging_and_timeout(api: TestClient, store: FakeObjectStore) -> None:
    response = api.get(
        "/v1/functions",
        params={"timeoutSeconds": "30", "resourceVersion": "7", "limit": "5", "continue": "tok"},
    )

    assert response.status_code == 200
    params = store.requests[-1].url.params
    assert params["timeoutSeconds"] == "30"
    assert params["resourceVersion"] == "7"
    assert params["limit"] == "5"
    assert params["continue"] == "tok"


def test_get_and_delete_honour_instance_id(api: TestClient, store: FakeObjectStore) -> None:
    old = store.add_version("environments", environment_payload("py", "old"))
    new = store.add_version("environments", environment_payload("py", "new"))

    pinned = api.get("/v1/environments/py", params={"instanceId": old["metadata"]["uid"]})
    legacy = api.get("/v1/environments/py", params={"uid": old["metadata"]["uid"]})
    assert pinned.json()["spec"]["runtime"]["image"] == "old"
    assert legacy.json() == pinned.json()

    deleted = api.delete("/v1/environments/py", params={"instanceId": old["metadata"]["uid"]})
    assert deleted.status_code == 200

    remaining = api.get("/v1/environments/py", params={"instanceId": new["metadata"]["uid"]})
    assert remaining.status_code == 200
    gone = api.get("/v1/environments/py", params={"instanceId": old["metadata"]["uid"]})
    assert gone.status_code == 404


def test_delete_without_instance_id_logs_all_versions(
    api: TestClient, store: FakeObjectStore, caplog: pytest.LogCaptureFixture
) -> None:
    store.add_version("environments", environment_payload("py", "v1"))
    store.add_version("environments", environment_payload("py", "v2"))

    with caplog.at_level(logging.INFO, logger="fissionctl"):
        response = api.delete("/v1/environments/py")

    assert response.status_code == 200
    assert store.versions("environments", "py") == []
    assert "Deleting all versions" in caplog.text


@pytest.mark.parametrize(
    ("path", "body"),
    [
        ("/v1/triggers/http", {"metadata": {"name": "t"}, "spec": {"method": "GET"}}),
        ("/v1/watches", {"metadata": {"name": "w"}, "spec": {"namespace": "default"}}),
        ("/v1/environments", {"spec": {"runtime": {"image": "x"}}}),
        ("/v1/functions", {"kind": "Environment", "metadata": {"name": "f"}, "spec": {}}),
    ],
)
def test_malformed_bodies_are_validation_errors(api: TestClient, path: str, body: dict) -> None:
    response = api.post(path, json=body)

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


def test_non_json_body_is_validation_error(api: TestClient) -> None:
    response = api.post(
        "/v1/environments", content=b"not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400


def test_every_kind_is_routed(api: TestClient, store: FakeObjectStore) -> None:
    trigger = {
        "metadata": {"name": "hello-get"},
        "spec": {"urlpattern": "/hello", "functionref": {"name": "hello"}},
    }
    watch = {
        "metadata": {"name": "pods"},
        "spec": {"namespace": "default", "type": "pod", "functionref": {"name": "hello"}},
    }

    assert api.post("/v1/functions", json=function_payload()).status_code == 201
    assert api.post("/v1/triggers/http", json=trigger).status_code == 201
    assert api.post("/v1/watches", json=watch).status_code == 201
    assert store.versions("httptriggers", "hello-get")[0]["spec"] == trigger["spec"]
    assert store.versions("kuberneteswatchtriggers", "pods")[0]["kind"] == "KubernetesWatchTrigger"


def test_transport_failure_maps_to_502(rest_config: RestConfig, caplog: pytest.LogCaptureFixture) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    clients = FissionClients.for_namespace(
        configure_transport(rest_config, transport=httpx.MockTransport(refuse)), "default"
    )
    api = TestClient(create_app(clients))

    with caplog.at_level(logging.WARNING, logger="fissionctl"):
        response = api.get("/v1/environments/py")

    assert response.status_code == 502
    assert response.json()["error"] == "TransportError"
    assert "kind=Environment namespace=default name=py" in caplog.text


def test_healthz(api: TestClient) -> None:
    assert api.get("/healthz").json() == {"status": "ok"}
