from fastapi import Request, Response, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from typing import Callable
import logging
import traceback

from src.database.models import ApiResponse
from src.utils.api_response import error_response, excecao_response
from src.utils.exceptions_fgc import FGCException

logger = logging.getLogger(__name__)


def api_response_json(resposta: ApiResponse) -> JSONResponse:
    """Monta o JSONResponse usando o status_code do próprio ApiResponse"""
    conteudo = resposta.model_dump(mode='json')
    status_code = conteudo.pop('status_code')
    return JSONResponse(content=conteudo, status_code=status_code)


class RouteErrorHandler(APIRoute):
    """
    Rota personalizada que converte as exceções do sistema FGC no formato
    padronizado de resposta, com o código HTTP de cada tipo de erro.
    """

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def custom_route_handler(request: Request) -> Response:
            try:
                response = await original_route_handler(request)
            except FGCException as exc:
                logger.info(f"{request.method} {request.url.path} -> {exc.tipo}: {exc.detalhe}")
                return api_response_json(excecao_response(exc))
            except (HTTPException, RequestValidationError):
                raise
            except Exception as exc:
                logger.error(f"Erro inesperado em {request.method} {request.url.path}: {traceback.format_exc()}")
                return api_response_json(error_response(
                    message=f"Erro interno: {exc}",
                    data={'tipo': 'interno'},
                    status_code=500
                ))

            return response

        return custom_route_handler
