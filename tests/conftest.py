"""Test fixtures for Baserow Todo."""

import httpx
import pytest

from baserow_todo.baserow.client import BaserowClient
from baserow_todo.config import Config
from baserow_todo.todo.controller import TodoController

from fakes import TABLE_ID, FakeBaserow


@pytest.fixture
def config() -> Config:
    """Config pointing at the fake table."""
    return Config(
        baserow_url="https://baserow.test",
        api_token="test-token",
        table_id=TABLE_ID,
    )


@pytest.fixture
def fake_baserow() -> FakeBaserow:
    return FakeBaserow()


@pytest.fixture
def baserow_client(config: Config, fake_baserow: FakeBaserow) -> BaserowClient:
    """Baserow client wired to the fake table."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_baserow.handler))
    return BaserowClient(config, http_client=http_client)


@pytest.fixture
def controller(baserow_client: BaserowClient) -> TodoController:
    return TodoController(baserow_client)
