import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from api.main import create_app  # noqa: E402
from settings import Settings  # noqa: E402


CLIENTE_PAYLOAD = {
    "nome_completo": "Maria da Silva",
    "cpf_cnpj": "12345678901",
    "telefone": "11987654321",
    "data_nascimento": "1990-05-20",
    "email": "maria@example.com",
}

ACAO_PAYLOAD = {
    "nome_ativo": "Petrobras PN",
    "codigo_ticker": "PETR4",
    "valor_atual": "30.00",
    "tipo_ativo": "acao",
    "descricao": "Petróleo Brasileiro S.A.",
}


@pytest.fixture
def client():
    """A client for an app wired to a fresh in-memory SQLite database."""
    app_settings = Settings()
    app_settings.DATABASE_URL = "sqlite://"
    app = create_app(app_settings)
    with TestClient(app) as test_client:
        yield test_client


def create_cliente(client, **overrides):
    resp = client.post("/clientes", json={**CLIENTE_PAYLOAD, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_acao(client, **overrides):
    resp = client.post("/acoes", json={**ACAO_PAYLOAD, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_alocacao(client, cliente_id, acao_id, **overrides):
    payload = {
        "acaoId": acao_id,
        "quantidade": "100",
        "valor_medio_aquisicao": "28.00",
        "data_ultima_compra": "2024-01-10",
        **overrides,
    }
    resp = client.post(f"/clientes/{cliente_id}/alocacoes", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()
