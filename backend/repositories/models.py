"""
SQLAlchemy ORM models for persistence.
"""
from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from db import Base


class ClienteORM(Base):
    __tablename__ = "clientes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nome_completo = Column(String, nullable=False)
    cpf_cnpj = Column(String(14), nullable=False, unique=True)
    telefone = Column(String(15), nullable=False)
    data_nascimento = Column(Date, nullable=False)
    email = Column(String, nullable=False, unique=True)

    alocacoes = relationship(
        "AlocacaoORM",
        back_populates="cliente",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class AcaoORM(Base):
    __tablename__ = "acoes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nome_ativo = Column(String, nullable=False, unique=True)
    codigo_ticker = Column(String(10), nullable=False, unique=True)
    valor_atual = Column(Numeric(14, 2), nullable=False)
    tipo_ativo = Column(String, nullable=True)
    descricao = Column(Text, nullable=True)

    # "all" leaves dependent rows alone so the database RESTRICT rule decides
    alocacoes = relationship("AlocacaoORM", back_populates="acao", passive_deletes="all")


class AlocacaoORM(Base):
    __tablename__ = "alocacoes_cliente"
    __table_args__ = (
        UniqueConstraint("cliente_id", "acao_id", name="uq_alocacao_cliente_acao"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    cliente_id = Column(
        Integer, ForeignKey("clientes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    acao_id = Column(
        Integer, ForeignKey("acoes.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantidade = Column(Numeric(18, 4), nullable=False)
    valor_medio_aquisicao = Column(Numeric(14, 2), nullable=False)
    data_ultima_compra = Column(Date, nullable=False)

    cliente = relationship("ClienteORM", back_populates="alocacoes")
    acao = relationship("AcaoORM", back_populates="alocacoes")
