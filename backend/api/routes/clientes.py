"""
Customer API routes.
"""
import logging
from datetime import date
from typing import Annotated, List
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from api.errors import ApiError
from api.schemas import (
    BuscarClienteQuery,
    ClienteCreate,
    ClienteIdParam,
    ClienteUpdate,
    MessageResponse,
)
from db import get_session
from domain.errors import NotFoundError, UniqueConstraintError
from domain.models import Cliente
from repositories import ClientesRepository

router = APIRouter()
clientes_repo = ClientesRepository()
logger = logging.getLogger(__name__)


class ClienteResponse(BaseModel):
    id: int
    nome_completo: str
    cpf_cnpj: str
    telefone: str
    data_nascimento: date
    email: str


def cliente_to_response(cliente: Cliente) -> ClienteResponse:
    """Convert domain Cliente to API response."""
    return ClienteResponse(
        id=cliente.id,
        nome_completo=cliente.nome_completo,
        cpf_cnpj=cliente.cpf_cnpj,
        telefone=cliente.telefone,
        data_nascimento=cliente.data_nascimento,
        email=cliente.email,
    )


def _conflict(exc: UniqueConstraintError) -> ApiError:
    return ApiError(
        409,
        f"Erro de conflito: Já existe um cliente com este {exc.target}.",
        fields=exc.target,
    )


@router.post("", status_code=201, response_model=ClienteResponse)
def create_cliente(data: ClienteCreate, session: Session = Depends(get_session)):
    """Create a customer; CPF/CNPJ and email must be unique."""
    try:
        cliente = clientes_repo.create_cliente(session, data.model_dump())
    except UniqueConstraintError as exc:
        raise _conflict(exc) from exc
    logger.info("Created cliente %s", cliente.id)
    return cliente_to_response(cliente)


@router.get("", response_model=List[ClienteResponse])
def list_clientes(session: Session = Depends(get_session)):
    return [cliente_to_response(c) for c in clientes_repo.list_clientes(session)]


@router.get("/buscar", response_model=ClienteResponse)
def buscar_cliente(
    params: Annotated[BuscarClienteQuery, Query()],
    session: Session = Depends(get_session),
):
    """Find a customer by exact CPF/CNPJ or by a case-insensitive name fragment."""
    if params.cpf_cnpj:
        cliente = clientes_repo.find_by_cpf_cnpj(session, params.cpf_cnpj)
    else:
        cliente = clientes_repo.find_by_name(session, params.nome_completo)
    if not cliente:
        raise ApiError(404, "Cliente não encontrado.")
    return cliente_to_response(cliente)


@router.get("/{cliente_id}", response_model=ClienteResponse)
def get_cliente(cliente_id: ClienteIdParam, session: Session = Depends(get_session)):
    cliente = clientes_repo.get_cliente(session, cliente_id)
    if not cliente:
        raise ApiError(404, "Cliente não encontrado.")
    return cliente_to_response(cliente)


@router.put("/{cliente_id}", response_model=ClienteResponse)
def update_cliente(
    cliente_id: ClienteIdParam,
    data: ClienteUpdate,
    session: Session = Depends(get_session),
):
    changes = data.changes()
    if not changes:
        raise ApiError(400, "Nenhum dado fornecido para atualização.")

    try:
        cliente = clientes_repo.update_cliente(session, cliente_id, changes)
    except NotFoundError as exc:
        raise ApiError(404, "Cliente não encontrado para atualização.") from exc
    except UniqueConstraintError as exc:
        raise _conflict(exc) from exc
    return cliente_to_response(cliente)


@router.delete("/{cliente_id}", response_model=MessageResponse)
def delete_cliente(cliente_id: ClienteIdParam, session: Session = Depends(get_session)):
    """Delete a customer together with all of its allocations."""
    try:
        clientes_repo.delete_cliente(session, cliente_id)
    except NotFoundError as exc:
        raise ApiError(404, "Cliente não encontrado para deleção.") from exc
    logger.info("Deleted cliente %s", cliente_id)
    return MessageResponse(message="Cliente deletado com sucesso.")
