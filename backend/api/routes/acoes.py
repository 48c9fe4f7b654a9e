"""
Asset API routes.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from api.errors import ApiError
from api.schemas import AcaoCreate, AcaoIdParam, AcaoUpdate, MessageResponse, Preco
from db import get_session
from domain.errors import ForeignKeyViolationError, NotFoundError, UniqueConstraintError
from domain.models import Acao
from repositories import AcoesRepository

router = APIRouter()
acoes_repo = AcoesRepository()
logger = logging.getLogger(__name__)


class AcaoResponse(BaseModel):
    id: int
    nome_ativo: str
    codigo_ticker: str
    valor_atual: Preco
    tipo_ativo: Optional[str] = None
    descricao: Optional[str] = None


def acao_to_response(acao: Acao) -> AcaoResponse:
    """Convert domain Acao to API response."""
    return AcaoResponse(
        id=acao.id,
        nome_ativo=acao.nome_ativo,
        codigo_ticker=acao.codigo_ticker,
        valor_atual=acao.valor_atual,
        tipo_ativo=acao.tipo_ativo,
        descricao=acao.descricao,
    )


def _conflict(exc: UniqueConstraintError) -> ApiError:
    return ApiError(
        409,
        f"Erro de conflito: Já existe uma ação com este {exc.target}.",
        fields=exc.target,
    )


@router.post("", status_code=201, response_model=AcaoResponse)
def create_acao(data: AcaoCreate, session: Session = Depends(get_session)):
    """Create an asset; name and ticker must be unique."""
    try:
        acao = acoes_repo.create_acao(session, data.model_dump())
    except UniqueConstraintError as exc:
        raise _conflict(exc) from exc
    logger.info("Created acao %s (%s)", acao.id, acao.codigo_ticker)
    return acao_to_response(acao)


@router.get("", response_model=List[AcaoResponse])
def list_acoes(session: Session = Depends(get_session)):
    return [acao_to_response(a) for a in acoes_repo.list_acoes(session)]


@router.get("/{acao_id}", response_model=AcaoResponse)
def get_acao(acao_id: AcaoIdParam, session: Session = Depends(get_session)):
    acao = acoes_repo.get_acao(session, acao_id)
    if not acao:
        raise ApiError(404, "Ação não encontrada.")
    return acao_to_response(acao)


@router.put("/{acao_id}", response_model=AcaoResponse)
def update_acao(
    acao_id: AcaoIdParam,
    data: AcaoUpdate,
    session: Session = Depends(get_session),
):
    changes = data.changes()
    if not changes:
        raise ApiError(400, "Nenhum dado fornecido para atualização.")

    try:
        acao = acoes_repo.update_acao(session, acao_id, changes)
    except NotFoundError as exc:
        raise ApiError(404, "Ação não encontrada para atualização.") from exc
    except UniqueConstraintError as exc:
        raise _conflict(exc) from exc
    return acao_to_response(acao)


@router.delete("/{acao_id}", response_model=MessageResponse)
def delete_acao(acao_id: AcaoIdParam, session: Session = Depends(get_session)):
    """Delete an asset unless some customer still holds it."""
    try:
        acoes_repo.delete_acao(session, acao_id)
    except NotFoundError as exc:
        raise ApiError(404, "Ação não encontrada para deleção.") from exc
    except ForeignKeyViolationError as exc:
        raise ApiError(
            409,
            "Não é possível deletar a ação: existem alocações de clientes que a referenciam.",
            fields="alocacoes",
        ) from exc
    logger.info("Deleted acao %s", acao_id)
    return MessageResponse(message="Ação deletada com sucesso.")
