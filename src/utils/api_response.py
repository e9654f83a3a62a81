from typing import Any, Dict, Optional
from enum import Enum
from pydantic import BaseModel

from src.database.models import ApiResponse
from src.utils.exceptions_fgc import FGCException


def para_json(dados: Any) -> Any:
    """
    Converte o conteúdo da resposta em tipos JSON: modelos pydantic viram
    dicionários, enums viram o valor e listas/dicionários são percorridos.
    Linhas do ORM devem chegar aqui já convertidas em modelo pydantic.
    """
    if isinstance(dados, BaseModel):
        return dados.model_dump(mode='json')

    if isinstance(dados, (list, tuple)):
        return [para_json(item) for item in dados]

    if isinstance(dados, dict):
        return {chave: para_json(valor) for chave, valor in dados.items()}

    if isinstance(dados, Enum):
        return dados.value

    return dados


def montar_resposta(
    success: bool,
    data: Any = None,
    message: Optional[str] = None,
    meta: Optional[Dict[str, Any]] = None,
    status_code: int = 200
) -> ApiResponse:
    return ApiResponse(
        success=success,
        data=para_json(data),
        message=message,
        meta=meta,
        status_code=status_code
    )


def success_response(
    data: Any = None,
    message: str = "Operação realizada com sucesso",
    meta: Optional[Dict[str, Any]] = None,
    status_code: int = 200
) -> ApiResponse:
    """
    Resposta de sucesso no envelope padrão da API.

    Args:
        data: Conteúdo da resposta (modelo, lista ou dicionário)
        message: Mensagem exibida pelo painel
        meta: Metadados adicionais
        status_code: Código HTTP (padrão 200)
    """
    return montar_resposta(True, data, message, meta, status_code)


def error_response(
    message: str = "Ocorreu um erro ao processar a solicitação",
    data: Any = None,
    meta: Optional[Dict[str, Any]] = None,
    status_code: int = 400
) -> ApiResponse:
    """Resposta de erro no envelope padrão. `data` costuma levar o `tipo` do erro."""
    return montar_resposta(False, data, message, meta, status_code)


def excecao_response(exc: FGCException) -> ApiResponse:
    """Resposta de erro com o tipo da exceção para o cliente diferenciar a falha"""
    return error_response(message=exc.detalhe, data={'tipo': exc.tipo}, status_code=exc.status_code)
