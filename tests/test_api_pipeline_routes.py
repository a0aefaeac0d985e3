import json
import os

import pytest
from fastapi.testclient import TestClient

from scriptflow.command_runner import executor
from scriptflow.command_runner.exceptions import ToolNotFoundError
from scriptflow.command_runner.executor import SubprocessOutcome
from scriptflow.main import app
from scriptflow.services import pipeline_service as pipeline_service_module
from scriptflow.services.pipeline_service import PipelineService


class FakeFlow:
    def __init__(self, exit_code=0, stdout="", stderr=""):
        self.result = SubprocessOutcome(exit_code, stdout, stderr)
        self.calls = []
        self.documents = []

    async def run(self, command, args, *, inherit_stdio=False, cwd=None, env=None):
        config_path = args[3]
        with open(config_path, "r", encoding="utf-8") as f:
            self.documents.append(f.read())
        self.calls.append({"command": command, "args": list(args), "cwd": cwd, "inherit_stdio": inherit_stdio})
        return self.result


@pytest.fixture
def service(monkeypatch, tmp_path):
    instance = PipelineService(workdir=str(tmp_path / "work"), python="python3")
    monkeypatch.setattr(pipeline_service_module, "pipeline_service", instance)
    return instance


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def test_execute_pipeline_success(monkeypatch, service, client):
    fake = FakeFlow(stdout="🚀 Running : ff_scale\n")
    monkeypatch.setattr(executor, "run", fake.run)
    document = json.dumps({"ff_scale": {"input": "intro.mov"}})

    resp = client.post("/api/execute-pipeline", json={"config": document})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["stdout"] == "🚀 Running : ff_scale\n"
    assert body["exit_code"] == 0

    (call,) = fake.calls
    assert call["command"] == "python3"
    assert call["args"][:3] == ["-m", "scriptflow.flow", "-C"]
    assert call["cwd"] == service.workdir
    assert call["inherit_stdio"] is False
    assert fake.documents == [document]
    # the temporary pipeline file is gone
    assert not os.path.exists(call["args"][3])
    assert os.listdir(service.workdir) == []


def test_execute_pipeline_failure_returns_500(monkeypatch, service, client):
    fake = FakeFlow(exit_code=1, stdout="partial", stderr="Config file not found")
    monkeypatch.setattr(executor, "run", fake.run)

    resp = client.post("/api/execute-pipeline", json={"config": "{}"})

    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["stdout"] == "partial"
    assert body["stderr"] == "Config file not found"
    assert body["exit_code"] == 1
    assert "1" in body["error"]
    assert os.listdir(service.workdir) == []


def test_execute_pipeline_runner_not_startable(monkeypatch, service, client):
    async def broken(command, args, **kwargs):
        raise ToolNotFoundError(command, "No such file or directory")

    monkeypatch.setattr(executor, "run", broken)

    resp = client.post("/api/execute-pipeline", json={"config": "{}"})

    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert os.listdir(service.workdir) == []


@pytest.mark.parametrize("payload", [{}, {"config": None}, {"config": ""}, {"config": "   "}])
def test_execute_pipeline_without_config_returns_400(monkeypatch, service, client, payload):
    fake = FakeFlow()
    monkeypatch.setattr(executor, "run", fake.run)

    resp = client.post("/api/execute-pipeline", json=payload)

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["error"] == "No config provided"
    assert fake.calls == []


def test_execute_pipeline_requires_token_when_configured(monkeypatch, service, client, isolated_config):
    fake = FakeFlow()
    monkeypatch.setattr(executor, "run", fake.run)
    monkeypatch.setattr(isolated_config, "API_TOKEN", "secret")

    assert client.post("/api/execute-pipeline", json={"config": "{}"}).status_code == 401
    resp = client.post(
        "/api/execute-pipeline", json={"config": "{}"}, headers={"X-API-Token": "wrong"}
    )
    assert resp.status_code == 401
    resp = client.post(
        "/api/execute-pipeline", json={"config": "{}"}, headers={"Authorization": "Bearer secret"}
    )
    assert resp.status_code == 200
    assert len(fake.calls) == 1


def test_list_scripts(client):
    resp = client.get("/api/scripts")
    assert resp.status_code == 200
    scripts = resp.json()["scripts"]
    assert "ff_scale" in scripts
    assert scripts["ff_concat"].startswith("Concatenate")


def test_health_and_root(client):
    health = client.get("/server/health")
    assert health.status_code == 200
    body = health.json()
    assert body["status"] == "healthy"
    assert isinstance(body["ffmpeg"], bool)

    root = client.get("/")
    assert root.status_code == 200
    assert root.json()["health_check"] == "/server/health"


def test_openapi_schema_lists_routes(client):
    schema = client.get("/openapi.json").json()
    assert "/api/execute-pipeline" in schema["paths"]
    assert "/server/health" in schema["paths"]
