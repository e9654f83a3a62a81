from fastapi import APIRouter, status, Depends
from sqlalchemy.orm import Session

from src.database.db import get_db
from src.database import models
from src.utils.api_response import success_response
from src.utils.auth_utils import ContextoAutenticacao, verificar_admin_global
from src.repositorios.rifa import RepositorioRifa
from src.utils.route_error_handler import RouteErrorHandler

router = APIRouter(route_class=RouteErrorHandler)

@router.get("/rifa/atual", tags=['Rifa'], status_code=status.HTTP_200_OK, response_model=models.ApiResponse)
async def consultar_rifa_atual(db: Session = Depends(get_db)):
    """Retorna a rifa ativa com as cotas já distribuídas"""

    rifa = await RepositorioRifa(db).get_atual()
    return success_response(models.Rifa.model_validate(rifa))

@router.post("/rifa/adicionar-participante", tags=['Rifa'], status_code=status.HTTP_200_OK, response_model=models.ApiResponse)
async def adicionar_participante_rifa(
    dados: models.AdicionarParticipanteRifa,
    db: Session = Depends(get_db),
    usuario: ContextoAutenticacao = Depends(verificar_admin_global)
):
    """Adiciona uma cota para o jogador com o próximo número da rifa"""

    numero = await RepositorioRifa(db).adicionar_participante(dados.jogador_id)
    return success_response(
        {'numero_cota': numero},
        f'Participante adicionado ao número {numero}!'
    )

@router.delete("/rifa/resetar", tags=['Rifa'], status_code=status.HTTP_200_OK, response_model=models.ApiResponse)
async def resetar_rifa(
    db: Session = Depends(get_db),
    usuario: ContextoAutenticacao = Depends(verificar_admin_global)
):
    """Remove todas as cotas da rifa ativa"""

    removidas = await RepositorioRifa(db).resetar()
    return success_response({'cotas_removidas': removidas}, 'Rifa resetada com sucesso!')
