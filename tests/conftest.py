from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path

import httpx
import pytest
import respx

# Ensure the repository-local ``src`` directory is importable when the project is
# not installed as a package.
SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from fake_store import NAMESPACE, STORE_URL, FakeObjectStore  # noqa: E402
from fissionctl.clients import FissionClients  # noqa: E402
from fissionctl.config import RestConfig  # noqa: E402
from fissionctl.transport import RESTClient, configure_transport  # noqa: E402


@pytest.fixture
def respx_mock():
    with respx.mock(assert_all_called=False) as respx_mgr:
        yield respx_mgr


@pytest.fixture
def rest_config() -> RestConfig:
    return RestConfig(host=STORE_URL, token="store-token")


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def rest(rest_config: RestConfig, store: FakeObjectStore) -> Iterable[RESTClient]:
    client = configure_transport(rest_config, transport=httpx.MockTransport(store.handle))
    yield client
    client.close()


@pytest.fixture
def clients(rest: RESTClient) -> FissionClients:
    return FissionClients.for_namespace(rest, NAMESPACE)
