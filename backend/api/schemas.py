"""
Request schemas for the API.

Parsing (string to date, string to decimal) is left to the pydantic
types; range and format rules are separate constraints, so every error
can be reported as ``missing``, ``malformed`` or ``constraint``.
"""
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Callable, ClassVar, Dict, FrozenSet, Optional

from fastapi import Path
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    PlainSerializer,
    PositiveInt,
    model_validator,
)
from pydantic_core import PydanticCustomError

from domain.models import (
    PRICE_INTEGER_DIGITS,
    QUANTITY_INTEGER_DIGITS,
    quantize_price,
    quantize_quantity,
)


def _fixed_point(quantize: Callable[[Decimal], Decimal], integer_digits: int):
    """Round to the column scale, rejecting values wider than the column."""

    def validate(value: Decimal) -> Decimal:
        # checked before rounding too: quantize overflows the decimal context
        if value.is_zero() or value.adjusted() < integer_digits:
            try:
                value = quantize(value)
            except InvalidOperation as exc:
                raise PydanticCustomError("decimal_parsing", "Input should be a valid decimal") from exc
            if value.is_zero() or value.adjusted() < integer_digits:
                return value
        raise PydanticCustomError(
            "decimal_whole_digits",
            "Decimal input should have no more than {whole_digits} digits before the decimal point",
            {"whole_digits": integer_digits},
        )

    return validate


_price = _fixed_point(quantize_price, PRICE_INTEGER_DIGITS)
_quantity = _fixed_point(quantize_quantity, QUANTITY_INTEGER_DIGITS)


def _positive(value: Decimal) -> Decimal:
    if value <= 0:
        raise PydanticCustomError("greater_than", "Input should be greater than 0", {"gt": 0})
    return value


def _non_negative(value: Decimal) -> Decimal:
    if value < 0:
        raise PydanticCustomError("greater_than_equal", "Input should be greater than or equal to 0", {"ge": 0})
    return value


# --- Field types ---

NomeCompleto = Annotated[str, Field(min_length=3)]
CpfCnpj = Annotated[str, Field(pattern=r"^(\d{11}|\d{14})$")]
Telefone = Annotated[str, Field(min_length=10, max_length=15, pattern=r"^\d+$")]
NomeAtivo = Annotated[str, Field(min_length=3)]
CodigoTicker = Annotated[str, Field(min_length=3, max_length=10, pattern=r"^[A-Z0-9]+$")]
PrecoPositivo = Annotated[Decimal, AfterValidator(_price), AfterValidator(_positive)]
PrecoNaoNegativo = Annotated[Decimal, AfterValidator(_price), AfterValidator(_non_negative)]
QuantidadePositiva = Annotated[Decimal, AfterValidator(_quantity), AfterValidator(_positive)]

ClienteIdParam = Annotated[int, Path(gt=0, description="ID do cliente")]
AcaoIdParam = Annotated[int, Path(gt=0, description="ID da ação")]
AlocacaoIdParam = Annotated[int, Path(gt=0, description="ID da alocação")]

# Output types: fixed-point strings on the wire
Preco = Annotated[Decimal, PlainSerializer(lambda v: f"{Decimal(v):.2f}", return_type=str)]
Quantidade = Annotated[Decimal, PlainSerializer(lambda v: f"{Decimal(v):.4f}", return_type=str)]


class PartialUpdate(BaseModel):
    """Base for update payloads: every field optional, only supplied ones applied."""

    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    def changes(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        # explicit null on a required column means "leave as is"
        return {k: v for k, v in data.items() if v is not None or k in self.nullable_fields}


# --- Cliente ---

class ClienteCreate(BaseModel):
    nome_completo: NomeCompleto
    cpf_cnpj: CpfCnpj
    telefone: Telefone
    data_nascimento: date
    email: EmailStr


class ClienteUpdate(PartialUpdate):
    nome_completo: Optional[NomeCompleto] = None
    cpf_cnpj: Optional[CpfCnpj] = None
    telefone: Optional[Telefone] = None
    data_nascimento: Optional[date] = None
    email: Optional[EmailStr] = None


BUSCA_SEM_CRITERIO = "Forneça 'nome_completo' ou 'cpf_cnpj' para a busca."
BUSCA_DOIS_CRITERIOS = (
    "Forneça apenas 'nome_completo' OU 'cpf_cnpj' para a busca, não ambos simultaneamente."
)


class BuscarClienteQuery(BaseModel):
    """Exactly one of a name fragment or an exact CPF/CNPJ."""

    nome_completo: Optional[str] = None
    cpf_cnpj: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_criterion(self) -> "BuscarClienteQuery":
        has_nome = bool(self.nome_completo)
        has_cpf_cnpj = bool(self.cpf_cnpj)
        if not has_nome and not has_cpf_cnpj:
            raise PydanticCustomError("search_criteria", BUSCA_SEM_CRITERIO)
        if has_nome and has_cpf_cnpj:
            raise PydanticCustomError("search_criteria", BUSCA_DOIS_CRITERIOS)
        return self


# --- Acao ---

class AcaoCreate(BaseModel):
    nome_ativo: NomeAtivo
    codigo_ticker: CodigoTicker
    valor_atual: PrecoPositivo
    tipo_ativo: Optional[str] = None
    descricao: Optional[str] = None


class AcaoUpdate(PartialUpdate):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"tipo_ativo", "descricao"})

    nome_ativo: Optional[NomeAtivo] = None
    codigo_ticker: Optional[CodigoTicker] = None
    valor_atual: Optional[PrecoPositivo] = None
    # null clears these two
    tipo_ativo: Optional[str] = None
    descricao: Optional[str] = None


# --- Alocacao ---

class AlocacaoCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    acao_id: PositiveInt = Field(alias="acaoId")
    quantidade: QuantidadePositiva
    valor_medio_aquisicao: PrecoNaoNegativo
    data_ultima_compra: date


class AlocacaoUpdate(PartialUpdate):
    # no cliente/acao fields: the linkage is fixed at creation
    quantidade: Optional[QuantidadePositiva] = None
    valor_medio_aquisicao: Optional[PrecoNaoNegativo] = None
    data_ultima_compra: Optional[date] = None


class MessageResponse(BaseModel):
    message: str


# --- Error messages ---

MISSING = "missing"
MALFORMED = "malformed"
CONSTRAINT = "constraint"

CONSTRAINT_ERROR_TYPES = frozenset({
    "string_too_short",
    "string_too_long",
    "string_pattern_mismatch",
    "greater_than",
    "greater_than_equal",
    "less_than",
    "less_than_equal",
    "decimal_whole_digits",
    "search_criteria",
})

_CPF_CNPJ_FORMATO = (
    "Formato de CPF/CNPJ inválido. Forneça 11 dígitos para CPF ou 14 para CNPJ, apenas números."
)
_TELEFONE_TAMANHO = "Telefone deve ter entre 10 e 15 caracteres."
_TICKER_TAMANHO = "Ticker deve ter entre 3 e 10 caracteres."

# field -> error type (or kind, or "*") -> message
FIELD_MESSAGES: Dict[str, Dict[str, str]] = {
    "cliente_id": {"*": "ID do cliente deve ser um número inteiro positivo."},
    "acao_id": {"*": "ID da ação deve ser um número inteiro positivo."},
    "alocacao_id": {"*": "ID da alocação deve ser um número inteiro positivo."},
    "nome_completo": {
        MISSING: "Nome completo é obrigatório.",
        "string_too_short": "Nome completo deve ter pelo menos 3 caracteres.",
    },
    "cpf_cnpj": {
        MISSING: "CPF/CNPJ é obrigatório.",
        "string_pattern_mismatch": _CPF_CNPJ_FORMATO,
    },
    "telefone": {
        MISSING: "Telefone é obrigatório.",
        "string_too_short": _TELEFONE_TAMANHO,
        "string_too_long": _TELEFONE_TAMANHO,
        "string_pattern_mismatch": "Telefone deve conter apenas números.",
    },
    "data_nascimento": {
        MISSING: "Data de nascimento é obrigatória.",
        MALFORMED: "Data de nascimento inválida. Use o formato YYYY-MM-DD.",
    },
    "email": {
        MISSING: "Email é obrigatório.",
        MALFORMED: "Formato de email inválido.",
    },
    "nome_ativo": {
        MISSING: "Nome do ativo é obrigatório.",
        "string_too_short": "Nome do ativo deve ter pelo menos 3 caracteres.",
    },
    "codigo_ticker": {
        MISSING: "Código ticker é obrigatório.",
        "string_too_short": _TICKER_TAMANHO,
        "string_too_long": _TICKER_TAMANHO,
        "string_pattern_mismatch": "Ticker deve conter apenas letras maiúsculas e números.",
    },
    "valor_atual": {
        MISSING: "Valor atual é obrigatório.",
        MALFORMED: "Valor atual deve ser um número.",
        "greater_than": "Valor atual deve ser positivo.",
        "decimal_whole_digits": "Valor atual deve ter no máximo 12 dígitos antes da vírgula.",
    },
    "acaoId": {
        MISSING: "ID da ação é obrigatório.",
        "*": "ID da ação deve ser um número inteiro positivo.",
    },
    "quantidade": {
        MISSING: "Quantidade é obrigatória.",
        MALFORMED: "Quantidade deve ser um número.",
        "greater_than": "Quantidade deve ser positiva.",
        "decimal_whole_digits": "Quantidade deve ter no máximo 14 dígitos antes da vírgula.",
    },
    "valor_medio_aquisicao": {
        MISSING: "Valor médio de aquisição é obrigatório.",
        MALFORMED: "Valor médio de aquisição deve ser um número.",
        "greater_than_equal": "Valor médio de aquisição não pode ser negativo.",
        "decimal_whole_digits": "Valor médio de aquisição deve ter no máximo 12 dígitos antes da vírgula.",
    },
    "data_ultima_compra": {
        MISSING: "Data da última compra é obrigatória.",
        MALFORMED: "Data da última compra inválida.",
    },
}


def error_kind(error_type: str) -> str:
    if error_type == "missing":
        return MISSING
    if error_type in CONSTRAINT_ERROR_TYPES:
        return CONSTRAINT
    return MALFORMED


def error_message(field: Optional[str], error_type: str, default: str) -> str:
    """Human-readable message for one failed check on ``field``."""
    messages = FIELD_MESSAGES.get(field or "", {})
    return (
        messages.get(error_type)
        or messages.get(error_kind(error_type))
        or messages.get("*")
        or default
    )
