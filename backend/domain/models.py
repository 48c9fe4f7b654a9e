"""
Core domain models for the customer portfolio backend.
These are framework-agnostic and can be used across all layers.
"""
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


PRICE_PLACES = Decimal("0.01")
QUANTITY_PLACES = Decimal("0.0001")

# digits before the decimal point that the storage columns can hold
PRICE_INTEGER_DIGITS = 12
QUANTITY_INTEGER_DIGITS = 14


def quantize_price(value: Decimal) -> Decimal:
    """Round a monetary value to 2 fractional digits."""
    return Decimal(value).quantize(PRICE_PLACES, rounding=ROUND_HALF_UP)


def quantize_quantity(value: Decimal) -> Decimal:
    """Round a held quantity to 4 fractional digits."""
    return Decimal(value).quantize(QUANTITY_PLACES, rounding=ROUND_HALF_UP)


@dataclass
class Cliente:
    """A customer holding asset allocations."""
    id: int
    nome_completo: str
    cpf_cnpj: str  # 11 digits (CPF) or 14 digits (CNPJ)
    telefone: str
    data_nascimento: date
    email: str


@dataclass
class Acao:
    """A tradable asset with its current market price."""
    id: int
    nome_ativo: str
    codigo_ticker: str
    valor_atual: Decimal
    tipo_ativo: Optional[str] = None
    descricao: Optional[str] = None


@dataclass
class AcaoResumo:
    """Display fields of an asset, embedded in allocation responses."""
    id: int
    nome_ativo: str
    codigo_ticker: str
    valor_atual: Decimal


@dataclass
class Alocacao:
    """
    A customer's holding of one asset.

    Unique per (cliente_id, acao_id). The linkage never changes after
    creation; only quantity, cost basis and purchase date are updatable.
    """
    id: int
    cliente_id: int
    acao_id: int
    quantidade: Decimal
    valor_medio_aquisicao: Decimal
    data_ultima_compra: date
    acao: Optional[AcaoResumo] = None
