from conftest import CLIENTE_PAYLOAD, create_acao, create_alocacao, create_cliente


def test_create_cliente_returns_record_with_id(client):
    resp = client.post("/clientes", json=CLIENTE_PAYLOAD)
    assert resp.status_code == 201
    data = resp.json()
    assert isinstance(data["id"], int)
    assert {k: v for k, v in data.items() if k != "id"} == CLIENTE_PAYLOAD


def test_create_cliente_validation_error_is_400_with_field_messages(client):
    resp = client.post("/clientes", json={**CLIENTE_PAYLOAD, "cpf_cnpj": "123", "email": "nope"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Erro de validação."
    by_field = {e["field"]: e for e in body["errors"]}
    assert by_field["cpf_cnpj"]["kind"] == "constraint"
    assert by_field["cpf_cnpj"]["message"].startswith("Formato de CPF/CNPJ inválido")
    assert by_field["email"]["message"] == "Formato de email inválido."
    assert client.get("/clientes").json() == []


def test_create_cliente_missing_and_malformed_fields(client):
    payload = {k: v for k, v in CLIENTE_PAYLOAD.items() if k != "telefone"}
    payload["data_nascimento"] = "ontem"
    resp = client.post("/clientes", json=payload)
    assert resp.status_code == 400
    by_field = {e["field"]: e for e in resp.json()["errors"]}
    assert by_field["telefone"] == {
        "field": "telefone",
        "kind": "missing",
        "message": "Telefone é obrigatório.",
    }
    assert by_field["data_nascimento"]["kind"] == "malformed"


def test_duplicate_cpf_cnpj_conflicts(client):
    create_cliente(client)
    resp = client.post("/clientes", json={**CLIENTE_PAYLOAD, "email": "outra@example.com"})
    assert resp.status_code == 409
    assert resp.json() == {
        "message": "Erro de conflito: Já existe um cliente com este cpf_cnpj.",
        "fields": "cpf_cnpj",
    }


def test_duplicate_email_conflicts(client):
    create_cliente(client)
    resp = client.post("/clientes", json={**CLIENTE_PAYLOAD, "cpf_cnpj": "98765432100"})
    assert resp.status_code == 409
    assert resp.json()["fields"] == "email"


def test_list_clientes(client):
    assert client.get("/clientes").json() == []
    first = create_cliente(client)
    second = create_cliente(client, cpf_cnpj="12345678000199", email="empresa@example.com")
    resp = client.get("/clientes")
    assert resp.status_code == 200
    assert [c["id"] for c in resp.json()] == [first["id"], second["id"]]


def test_get_cliente(client):
    cliente = create_cliente(client)
    resp = client.get(f"/clientes/{cliente['id']}")
    assert resp.status_code == 200
    assert resp.json() == cliente


def test_get_missing_cliente_is_404(client):
    resp = client.get("/clientes/999")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Cliente não encontrado."}


def test_invalid_id_is_400(client):
    for bad in ("abc", "0", "-3"):
        resp = client.get(f"/clientes/{bad}")
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["message"] == "ID do cliente deve ser um número inteiro positivo."


def test_search_by_cpf_cnpj_exact(client):
    create_cliente(client)
    other = create_cliente(client, cpf_cnpj="12345678000199", email="empresa@example.com")
    resp = client.get("/clientes/buscar", params={"cpf_cnpj": "12345678000199"})
    assert resp.status_code == 200
    assert resp.json() == other


def test_search_by_name_is_case_insensitive_partial(client):
    cliente = create_cliente(client)
    resp = client.get("/clientes/buscar", params={"nome_completo": "DA SIL"})
    assert resp.status_code == 200
    assert resp.json()["id"] == cliente["id"]


def test_search_without_match_is_404(client):
    create_cliente(client)
    resp = client.get("/clientes/buscar", params={"nome_completo": "Joaquim"})
    assert resp.status_code == 404


def test_search_needs_exactly_one_criterion(client):
    resp = client.get("/clientes/buscar")
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "query"
    assert resp.json()["errors"][0]["kind"] == "constraint"
    assert resp.json()["errors"][0]["message"] == "Forneça 'nome_completo' ou 'cpf_cnpj' para a busca."

    resp = client.get("/clientes/buscar", params={"nome_completo": "Maria", "cpf_cnpj": "12345678901"})
    assert resp.status_code == 400
    assert "não ambos" in resp.json()["errors"][0]["message"]
    assert resp.json()["errors"][0]["field"] == "query"


def test_update_changes_only_supplied_fields(client):
    cliente = create_cliente(client)
    resp = client.put(f"/clientes/{cliente['id']}", json={"telefone": "21912345678"})
    assert resp.status_code == 200
    assert resp.json()["telefone"] == "21912345678"

    refetched = client.get(f"/clientes/{cliente['id']}").json()
    assert refetched == {**cliente, "telefone": "21912345678"}


def test_update_with_empty_payload_is_400(client):
    cliente = create_cliente(client)
    resp = client.put(f"/clientes/{cliente['id']}", json={})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Nenhum dado fornecido para atualização."}


def test_update_missing_cliente_is_404(client):
    resp = client.put("/clientes/999", json={"nome_completo": "Fulano de Tal"})
    assert resp.status_code == 404
    assert resp.json()["message"] == "Cliente não encontrado para atualização."


def test_update_to_taken_email_conflicts(client):
    create_cliente(client)
    other = create_cliente(client, cpf_cnpj="12345678000199", email="empresa@example.com")
    resp = client.put(f"/clientes/{other['id']}", json={"email": CLIENTE_PAYLOAD["email"]})
    assert resp.status_code == 409
    assert resp.json()["fields"] == "email"
    assert client.get(f"/clientes/{other['id']}").json()["email"] == "empresa@example.com"


def test_update_validates_fields(client):
    cliente = create_cliente(client)
    resp = client.put(f"/clientes/{cliente['id']}", json={"telefone": "123"})
    assert resp.status_code == 400


def test_delete_cliente(client):
    cliente = create_cliente(client)
    resp = client.delete(f"/clientes/{cliente['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Cliente deletado com sucesso."}
    assert client.get(f"/clientes/{cliente['id']}").status_code == 404


def test_delete_missing_cliente_is_404(client):
    resp = client.delete("/clientes/999")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Cliente não encontrado para deleção."


def test_delete_cliente_cascades_to_allocations(client):
    cliente = create_cliente(client)
    acao = create_acao(client)
    alocacao = create_alocacao(client, cliente["id"], acao["id"])

    assert client.delete(f"/clientes/{cliente['id']}").status_code == 200

    assert client.get(f"/clientes/{cliente['id']}/alocacoes").json() == []
    assert client.delete(f"/alocacoes/{alocacao['id']}").status_code == 404
    # the asset is free again
    assert client.delete(f"/acoes/{acao['id']}").status_code == 200
