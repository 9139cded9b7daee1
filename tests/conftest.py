"""
Configuração do pytest.

Cada teste recebe um banco SQLite próprio (tmp_path), então nada
vaza entre testes e nenhum serviço externo é necessário.
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

project_dir = Path(__file__).parent.parent
if str(project_dir) not in sys.path:
    sys.path.insert(0, str(project_dir))

from nurse_funnel.api.http import create_app  # noqa: E402
from nurse_funnel.config import AppConfig  # noqa: E402
from nurse_funnel.core.engine import LeadFunnelEngine  # noqa: E402
from nurse_funnel.storage.database import create_session_factory  # noqa: E402


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Evita que variáveis do ambiente local mudem o comportamento dos testes."""
    for name in ("ENV", "DATABASE_URL", "ADMIN_API_KEY", "REDIS_URL", "NOTICE_TTL_SECONDS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'leads.db'}"


@pytest.fixture
def config(database_url):
    return AppConfig(database_url=database_url, env="dev", admin_api_key="")


@pytest.fixture
def secured_config(database_url):
    return AppConfig(database_url=database_url, env="dev", admin_api_key="secret")


@pytest.fixture
def session_factory(database_url):
    return create_session_factory(database_url, create_tables=True)


@pytest.fixture
def engine(config):
    return LeadFunnelEngine(config=config)


@pytest.fixture
def client(config):
    app = create_app(config)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def secured_client(secured_config):
    app = create_app(secured_config)
    with TestClient(app) as test_client:
        yield test_client
