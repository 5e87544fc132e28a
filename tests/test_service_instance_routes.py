import pytest

from broker.models.service_instances import CreateServiceInstanceResponse, DeleteServiceInstanceResponse
from broker.services.provisioner import ConflictError, NotFoundError, ValidationError
from tests.fakes import FakeProvisioner


def _echo_instance(instance_id, request):
    return {"instance_id": instance_id}


def test_create_instance_responds_created_with_provisioner_echo(make_client):
    provisioner = FakeProvisioner(create_instance=_echo_instance)
    client = make_client(provisioner)

    response = client.put("/v2/service_instances/abc", json={"service_id": "s1", "plan_id": "p1"})

    assert response.status_code == 201
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"instance_id": "abc"}


def test_create_instance_defaults_missing_parameters_to_empty_mapping(make_client):
    provisioner = FakeProvisioner(create_instance=_echo_instance)
    client = make_client(provisioner)

    client.put("/v2/service_instances/abc", json={"service_id": "s1", "plan_id": "p1"})

    [(operation, (instance_id, request))] = provisioner.calls
    assert operation == "create_instance"
    assert instance_id == "abc"
    assert request.parameters == {}
    assert (request.service_id, request.plan_id) == ("s1", "p1")


def test_create_instance_defaults_null_parameters_to_empty_mapping(make_client):
    provisioner = FakeProvisioner(create_instance=_echo_instance)
    client = make_client(provisioner)

    client.put(
        "/v2/service_instances/abc",
        json={"service_id": "s1", "plan_id": "p1", "parameters": None},
    )

    [(_, (_, request))] = provisioner.calls
    assert request.parameters == {}


def test_create_instance_forwards_caller_parameters(make_client):
    provisioner = FakeProvisioner(create_instance=lambda instance_id, request: CreateServiceInstanceResponse())
    client = make_client(provisioner)

    parameters = {"size": 3, "tier": "gold", "flags": [True, None], "nested": {"a": 1.5}}
    response = client.put(
        "/v2/service_instances/abc",
        json={"service_id": "s1", "plan_id": "p1", "parameters": parameters},
    )

    assert response.status_code == 201
    assert response.json() == {}
    [(_, (_, request))] = provisioner.calls
    assert request.parameters == parameters


@pytest.mark.parametrize(
    "kwargs",
    [
        {"content": b"{not json", "headers": {"content-type": "application/json"}},
        {"json": {"service_id": ["s1"], "plan_id": "p1"}},
        {"json": ["s1", "p1"]},
        {"json": {"service_id": "s1", "plan_id": "p1", "parameters": "nope"}},
        {},
    ],
    ids=["malformed", "service-id-not-string", "wrong-shape", "parameters-not-object", "empty-body"],
)
def test_create_instance_rejects_undecodable_body_without_calling_provisioner(make_client, kwargs):
    provisioner = FakeProvisioner(create_instance=_echo_instance)
    client = make_client(provisioner)

    response = client.put("/v2/service_instances/abc", **kwargs)

    assert response.status_code == 400
    assert response.headers["content-type"] == "application/json"
    body = response.json()
    assert body["error"] == "BodyDecodeError"
    assert body["description"]
    assert provisioner.calls == []


@pytest.mark.parametrize(
    "error, kind",
    [
        (ConflictError("Instance 'abc' already exists"), "Conflict"),
        (ValidationError("Unknown plan_id 'p1'"), "ValidationError"),
    ],
)
def test_create_instance_surfaces_provisioner_errors(make_client, error, kind):
    def _fail(instance_id, request):
        raise error

    client = make_client(FakeProvisioner(create_instance=_fail))

    response = client.put("/v2/service_instances/abc", json={"service_id": "s1", "plan_id": "p1"})

    assert response.status_code == 400
    assert response.json() == {"error": kind, "description": str(error)}


def test_fetch_instance_returns_opaque_descriptor(make_client):
    provisioner = FakeProvisioner(fetch_instance=lambda instance_id: f"instance {instance_id}")
    client = make_client(provisioner)

    response = client.get("/v2/service_instances/abc")

    assert response.status_code == 200
    assert response.json() == "instance abc"
    assert provisioner.calls == [("fetch_instance", ("abc",))]


def test_fetch_instance_not_found_is_error_response(make_client):
    def _missing(instance_id):
        raise NotFoundError(f"Instance {instance_id!r} not found")

    client = make_client(FakeProvisioner(fetch_instance=_missing))

    response = client.get("/v2/service_instances/abc")

    assert response.status_code == 400
    assert response.json() == {"error": "NotFound", "description": "Instance 'abc' not found"}


def test_remove_instance_returns_delete_response(make_client):
    provisioner = FakeProvisioner(
        remove_instance=lambda instance_id: DeleteServiceInstanceResponse(operation="deprovision-1")
    )
    client = make_client(provisioner)

    response = client.delete("/v2/service_instances/abc")

    assert response.status_code == 200
    assert response.json() == {"operation": "deprovision-1"}
    assert provisioner.calls == [("remove_instance", ("abc",))]


def test_remove_unknown_instance_is_error_response(user_provided_client):
    response = user_provided_client.delete("/v2/service_instances/missing")

    assert response.status_code == 400
    assert response.json()["error"] == "NotFound"


def test_create_instance_forwards_empty_body_to_provisioner(make_client):
    provisioner = FakeProvisioner(create_instance=_echo_instance)
    client = make_client(provisioner)

    response = client.put("/v2/service_instances/abc", json={})

    assert response.status_code == 201
    [(_, (_, request))] = provisioner.calls
    assert (request.service_id, request.plan_id) == (None, None)
    assert request.parameters == {}


def test_create_instance_without_catalog_ids_is_rejected_by_provisioner(user_provided_client):
    response = user_provided_client.put("/v2/service_instances/abc", json={})

    assert response.status_code == 400
    assert response.json() == {
        "error": "ValidationError",
        "description": "service_id and plan_id are required",
    }


@pytest.mark.parametrize(
    "descriptor",
    [{"x": float("nan")}, {"x": float("inf")}, object()],
    ids=["nan", "inf", "plain-object"],
)
def test_unencodable_result_is_error_response(make_client, descriptor):
    client = make_client(FakeProvisioner(fetch_instance=lambda instance_id: descriptor))

    response = client.get("/v2/service_instances/abc")

    assert response.status_code == 400
    assert response.headers["content-type"] == "application/json"
    body = response.json()
    assert body["error"] == "ProvisionerError"
    assert "could not be encoded" in body["description"]
