from .clientes import ClientesRepository
from .acoes import AcoesRepository
from .alocacoes import AlocacoesRepository
from . import models

__all__ = ["ClientesRepository", "AcoesRepository", "AlocacoesRepository", "models"]
