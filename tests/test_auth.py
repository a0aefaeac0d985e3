import pytest
from fastapi import HTTPException

from scriptflow.core import auth


class Cred:
    def __init__(self, credentials):
        self.credentials = credentials


@pytest.mark.asyncio
async def test_verify_token_disabled_without_api_token(monkeypatch, isolated_config):
    monkeypatch.setattr(isolated_config, "API_TOKEN", "")
    assert await auth.verify_token(api_token=None, credentials=None) is None


@pytest.mark.asyncio
async def test_verify_token_with_header(monkeypatch, isolated_config):
    monkeypatch.setattr(isolated_config, "API_TOKEN", "tok")
    assert await auth.verify_token(api_token="tok", credentials=None) == "tok"


@pytest.mark.asyncio
async def test_verify_token_with_bearer(monkeypatch, isolated_config):
    monkeypatch.setattr(isolated_config, "API_TOKEN", "tok")
    assert await auth.verify_token(api_token=None, credentials=Cred("tok")) == "tok"


@pytest.mark.asyncio
async def test_verify_token_missing_raises(monkeypatch, isolated_config):
    monkeypatch.setattr(isolated_config, "API_TOKEN", "tok")
    with pytest.raises(HTTPException) as exc:
        await auth.verify_token(api_token=None, credentials=None)
    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_verify_token_invalid_raises(monkeypatch, isolated_config):
    monkeypatch.setattr(isolated_config, "API_TOKEN", "tok")
    with pytest.raises(HTTPException) as exc:
        await auth.verify_token(api_token="wrong", credentials=None)
    assert exc.value.status_code == 401
