"""
Customer repository backed by SQLAlchemy.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from domain.errors import NotFoundError
from domain.models import Cliente
from repositories.errors import persistence_errors
from repositories.models import ClienteORM


def _cliente_from_orm(orm: ClienteORM) -> Cliente:
    return Cliente(
        id=orm.id,
        nome_completo=orm.nome_completo,
        cpf_cnpj=orm.cpf_cnpj,
        telefone=orm.telefone,
        data_nascimento=orm.data_nascimento,
        email=orm.email,
    )


class ClientesRepository:
    """CRUD operations for customers."""

    def list_clientes(self, session: Session) -> List[Cliente]:
        with persistence_errors(session):
            clientes = session.query(ClienteORM).order_by(ClienteORM.id).all()
        return [_cliente_from_orm(c) for c in clientes]

    def get_cliente(self, session: Session, cliente_id: int) -> Optional[Cliente]:
        with persistence_errors(session):
            orm = session.get(ClienteORM, cliente_id)
        return _cliente_from_orm(orm) if orm else None

    def find_by_cpf_cnpj(self, session: Session, cpf_cnpj: str) -> Optional[Cliente]:
        with persistence_errors(session):
            orm = session.query(ClienteORM).filter(ClienteORM.cpf_cnpj == cpf_cnpj).first()
        return _cliente_from_orm(orm) if orm else None

    def find_by_name(self, session: Session, fragment: str) -> Optional[Cliente]:
        """First customer whose name contains ``fragment``, ignoring case."""
        with persistence_errors(session):
            orm = (
                session.query(ClienteORM)
                .filter(ClienteORM.nome_completo.icontains(fragment, autoescape=True))
                .order_by(ClienteORM.id)
                .first()
            )
        return _cliente_from_orm(orm) if orm else None

    def create_cliente(self, session: Session, data: Dict[str, Any]) -> Cliente:
        with persistence_errors(session):
            orm = ClienteORM(**data)
            session.add(orm)
            session.commit()
            session.refresh(orm)
        return _cliente_from_orm(orm)

    def update_cliente(self, session: Session, cliente_id: int, changes: Dict[str, Any]) -> Cliente:
        with persistence_errors(session):
            orm = session.get(ClienteORM, cliente_id)
            if not orm:
                raise NotFoundError("cliente", cliente_id)
            for key, value in changes.items():
                setattr(orm, key, value)
            session.commit()
            session.refresh(orm)
        return _cliente_from_orm(orm)

    def delete_cliente(self, session: Session, cliente_id: int) -> None:
        """Delete a customer; its allocations go with it (ON DELETE CASCADE)."""
        with persistence_errors(session):
            orm = session.get(ClienteORM, cliente_id)
            if not orm:
                raise NotFoundError("cliente", cliente_id)
            session.delete(orm)
            session.commit()
