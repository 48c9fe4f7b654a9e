"""
Asset repository backed by SQLAlchemy.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from domain.errors import NotFoundError
from domain.models import Acao, AcaoResumo
from repositories.errors import persistence_errors
from repositories.models import AcaoORM


def _acao_from_orm(orm: AcaoORM) -> Acao:
    return Acao(
        id=orm.id,
        nome_ativo=orm.nome_ativo,
        codigo_ticker=orm.codigo_ticker,
        valor_atual=orm.valor_atual,
        tipo_ativo=orm.tipo_ativo,
        descricao=orm.descricao,
    )


def acao_resumo_from_orm(orm: AcaoORM) -> AcaoResumo:
    return AcaoResumo(
        id=orm.id,
        nome_ativo=orm.nome_ativo,
        codigo_ticker=orm.codigo_ticker,
        valor_atual=orm.valor_atual,
    )


class AcoesRepository:
    """CRUD operations for assets."""

    def list_acoes(self, session: Session) -> List[Acao]:
        with persistence_errors(session):
            acoes = session.query(AcaoORM).order_by(AcaoORM.id).all()
        return [_acao_from_orm(a) for a in acoes]

    def get_acao(self, session: Session, acao_id: int) -> Optional[Acao]:
        with persistence_errors(session):
            orm = session.get(AcaoORM, acao_id)
        return _acao_from_orm(orm) if orm else None

    def create_acao(self, session: Session, data: Dict[str, Any]) -> Acao:
        with persistence_errors(session):
            orm = AcaoORM(**data)
            session.add(orm)
            session.commit()
            session.refresh(orm)
        return _acao_from_orm(orm)

    def update_acao(self, session: Session, acao_id: int, changes: Dict[str, Any]) -> Acao:
        with persistence_errors(session):
            orm = session.get(AcaoORM, acao_id)
            if not orm:
                raise NotFoundError("acao", acao_id)
            for key, value in changes.items():
                setattr(orm, key, value)
            session.commit()
            session.refresh(orm)
        return _acao_from_orm(orm)

    def delete_acao(self, session: Session, acao_id: int) -> None:
        """Delete an asset. Raises ForeignKeyViolationError while allocations reference it."""
        with persistence_errors(session):
            orm = session.get(AcaoORM, acao_id)
            if not orm:
                raise NotFoundError("acao", acao_id)
            session.delete(orm)
            session.commit()
