"""
Allocation API routes.

Allocations are created and listed under their customer
(``/clientes/{id}/alocacoes``) and updated or deleted by their own id
(``/alocacoes/{id}``).
"""
import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from api.errors import ApiError
from api.schemas import (
    AlocacaoCreate,
    AlocacaoIdParam,
    AlocacaoUpdate,
    ClienteIdParam,
    MessageResponse,
    Preco,
    Quantidade,
)
from db import get_session
from domain.errors import NotFoundError, UniqueConstraintError
from domain.models import AcaoResumo, Alocacao
from repositories import AcoesRepository, AlocacoesRepository, ClientesRepository

router = APIRouter()
clientes_repo = ClientesRepository()
acoes_repo = AcoesRepository()
alocacoes_repo = AlocacoesRepository()
logger = logging.getLogger(__name__)


class AcaoResumoResponse(BaseModel):
    id: int
    nome_ativo: str
    codigo_ticker: str
    valor_atual: Preco


class AlocacaoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    cliente_id: int = Field(alias="clienteId")
    acao_id: int = Field(alias="acaoId")
    quantidade: Quantidade
    valor_medio_aquisicao: Preco
    data_ultima_compra: date
    acao: Optional[AcaoResumoResponse] = None


def _resumo_to_response(resumo: AcaoResumo) -> AcaoResumoResponse:
    return AcaoResumoResponse(
        id=resumo.id,
        nome_ativo=resumo.nome_ativo,
        codigo_ticker=resumo.codigo_ticker,
        valor_atual=resumo.valor_atual,
    )


def alocacao_to_response(alocacao: Alocacao) -> AlocacaoResponse:
    """Convert domain Alocacao to API response, embedding the asset summary."""
    return AlocacaoResponse(
        id=alocacao.id,
        cliente_id=alocacao.cliente_id,
        acao_id=alocacao.acao_id,
        quantidade=alocacao.quantidade,
        valor_medio_aquisicao=alocacao.valor_medio_aquisicao,
        data_ultima_compra=alocacao.data_ultima_compra,
        acao=_resumo_to_response(alocacao.acao) if alocacao.acao else None,
    )


@router.post("/clientes/{cliente_id}/alocacoes", status_code=201, response_model=AlocacaoResponse)
def create_alocacao(
    cliente_id: ClienteIdParam,
    data: AlocacaoCreate,
    session: Session = Depends(get_session),
):
    """Add an allocation of one asset to a customer."""
    # A raw foreign-key failure cannot tell a bad customer from a bad asset,
    # so both are checked first. Not atomic with the insert below.
    if not clientes_repo.get_cliente(session, cliente_id):
        raise ApiError(404, "Cliente não encontrado.")
    if not acoes_repo.get_acao(session, data.acao_id):
        raise ApiError(404, "Ação não encontrada.")

    try:
        alocacao = alocacoes_repo.create_alocacao(
            session,
            cliente_id=cliente_id,
            acao_id=data.acao_id,
            data=data.model_dump(exclude={"acao_id"}),
        )
    except UniqueConstraintError as exc:
        raise ApiError(
            409,
            "Erro de conflito: Este cliente já possui uma alocação para esta ação.",
            fields="clienteId, acaoId",
        ) from exc
    logger.info("Created alocacao %s (cliente %s, acao %s)", alocacao.id, cliente_id, data.acao_id)
    return alocacao_to_response(alocacao)


@router.get("/clientes/{cliente_id}/alocacoes", response_model=List[AlocacaoResponse])
def list_alocacoes(cliente_id: ClienteIdParam, session: Session = Depends(get_session)):
    """List a customer's allocations; an unknown customer simply has none."""
    return [alocacao_to_response(a) for a in alocacoes_repo.list_by_cliente(session, cliente_id)]


@router.put("/alocacoes/{alocacao_id}", response_model=AlocacaoResponse)
def update_alocacao(
    alocacao_id: AlocacaoIdParam,
    data: AlocacaoUpdate,
    session: Session = Depends(get_session),
):
    changes = data.changes()
    if not changes:
        raise ApiError(400, "Nenhum dado fornecido para atualização.")

    try:
        alocacao = alocacoes_repo.update_alocacao(session, alocacao_id, changes)
    except NotFoundError as exc:
        raise ApiError(404, "Alocação não encontrada para atualização.") from exc
    return alocacao_to_response(alocacao)


@router.delete("/alocacoes/{alocacao_id}", response_model=MessageResponse)
def delete_alocacao(alocacao_id: AlocacaoIdParam, session: Session = Depends(get_session)):
    try:
        alocacoes_repo.delete_alocacao(session, alocacao_id)
    except NotFoundError as exc:
        raise ApiError(404, "Alocação não encontrada para deleção.") from exc
    logger.info("Deleted alocacao %s", alocacao_id)
    return MessageResponse(message="Alocação deletada com sucesso.")
