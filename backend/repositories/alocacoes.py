"""
Allocation repository backed by SQLAlchemy.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session, joinedload

from domain.errors import NotFoundError
from domain.models import Alocacao
from repositories.acoes import acao_resumo_from_orm
from repositories.errors import persistence_errors
from repositories.models import AlocacaoORM


def _alocacao_from_orm(orm: AlocacaoORM, with_acao: bool = True) -> Alocacao:
    return Alocacao(
        id=orm.id,
        cliente_id=orm.cliente_id,
        acao_id=orm.acao_id,
        quantidade=orm.quantidade,
        valor_medio_aquisicao=orm.valor_medio_aquisicao,
        data_ultima_compra=orm.data_ultima_compra,
        acao=acao_resumo_from_orm(orm.acao) if with_acao and orm.acao is not None else None,
    )


class AlocacoesRepository:
    """CRUD operations for customer allocations."""

    def list_by_cliente(self, session: Session, cliente_id: int) -> List[Alocacao]:
        with persistence_errors(session):
            alocacoes = (
                session.query(AlocacaoORM)
                .options(joinedload(AlocacaoORM.acao))
                .filter(AlocacaoORM.cliente_id == cliente_id)
                .order_by(AlocacaoORM.id)
                .all()
            )
        return [_alocacao_from_orm(a) for a in alocacoes]

    def get_alocacao(self, session: Session, alocacao_id: int) -> Optional[Alocacao]:
        with persistence_errors(session):
            orm = session.get(AlocacaoORM, alocacao_id, options=[joinedload(AlocacaoORM.acao)])
        return _alocacao_from_orm(orm) if orm else None

    def create_alocacao(
        self, session: Session, cliente_id: int, acao_id: int, data: Dict[str, Any]
    ) -> Alocacao:
        with persistence_errors(session):
            orm = AlocacaoORM(cliente_id=cliente_id, acao_id=acao_id, **data)
            session.add(orm)
            session.commit()
            session.refresh(orm)
            return _alocacao_from_orm(orm)

    def update_alocacao(self, session: Session, alocacao_id: int, changes: Dict[str, Any]) -> Alocacao:
        """Apply quantity/price/date changes; the customer and asset links are never touched."""
        with persistence_errors(session):
            orm = session.get(AlocacaoORM, alocacao_id)
            if not orm:
                raise NotFoundError("alocacao", alocacao_id)
            for key, value in changes.items():
                if key in ("cliente_id", "acao_id"):
                    continue
                setattr(orm, key, value)
            session.commit()
            session.refresh(orm)
            return _alocacao_from_orm(orm)

    def delete_alocacao(self, session: Session, alocacao_id: int) -> None:
        with persistence_errors(session):
            orm = session.get(AlocacaoORM, alocacao_id)
            if not orm:
                raise NotFoundError("alocacao", alocacao_id)
            session.delete(orm)
            session.commit()
