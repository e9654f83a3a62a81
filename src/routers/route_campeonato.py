from fastapi import APIRouter, status, Depends, Path
from sqlalchemy.orm import Session

from src.database.db import get_db
from src.database import models
from src.utils.api_response import success_response
from src.utils.exceptions_fgc import NaoEncontradoException
from src.utils.auth_utils import ContextoAutenticacao, verificar_admin
from src.repositorios.campeonato import RepositorioCampeonato
from src.utils.route_error_handler import RouteErrorHandler

router = APIRouter(route_class=RouteErrorHandler)

# -------------------------- Consulta e Criação --------------------------

@router.get("/campeonatos/consultar/{campeonato_id}", tags=['Campeonato'], status_code=status.HTTP_200_OK, response_model=models.ApiResponse)
async def consultar_campeonato(
    campeonato_id: str = Path(..., description="ID do campeonato"),
    db: Session = Depends(get_db)
):
    """Consulta um campeonato com as colocações gravadas"""

    campeonato = await RepositorioCampeonato(db).get_by_id(campeonato_id)
    if not campeonato:
        raise NaoEncontradoException('Campeonato não encontrado!')

    return success_response(models.Campeonato.model_validate(campeonato))

@router.get("/campeonatos/meus", tags=['Campeonato'], status_code=status.HTTP_200_OK, response_model=models.ApiResponse)
async def meus_campeonatos(
    db: Session = Depends(get_db),
    usuario: ContextoAutenticacao = Depends(verificar_admin)
):
    """Lista os campeonatos que o administrador pode gerenciar"""

    campeonatos = await RepositorioCampeonato(db).get_meus_campeonatos(usuario)
    return success_response(
        [models.Campeonato.model_validate(c) for c in campeonatos],
        f'{len(campeonatos)} campeonatos encontrados'
    )

@router.post("/campeonatos/criar", tags=['Campeonato'], status_code=status.HTTP_201_CREATED, response_model=models.ApiResponse)
async def criar_campeonato(
    campeonato_data: models.CampeonatoPOST,
    db: Session = Depends(get_db),
    usuario: ContextoAutenticacao = Depends(verificar_admin)
):
    """Cria um campeonato aberto"""

    campeonato = await RepositorioCampeonato(db).criar(campeonato_data, usuario)
    return success_response({'id': campeonato.id}, 'Campeonato criado', status_code=201)

# -------------------------- Finalização --------------------------

@router.post("/campeonatos/{campeonato_id}/finalizar", tags=['Campeonato Finalização'], status_code=status.HTTP_200_OK, response_model=models.ApiResponse)
async def finalizar_campeonato(
    dados: models.FinalizarPadraoRequest,
    campeonato_id: str = Path(..., description="ID do campeonato"),
    db: Session = Depends(get_db),
    usuario: ContextoAutenticacao = Depends(verificar_admin)
):
    """
    Finaliza o campeonato distribuindo XP pela tabela de colocações.

    Jogadores manuais (sem conta) entram no resultado com 0 XP.
    """

    resultado = await RepositorioCampeonato(db).finalizar_padrao(
        campeonato_id, usuario, dados.top8, dados.participation
    )
    return success_response(
        resultado,
        f"Campeonato finalizado! Total de {resultado.xp_distribuido:.2f} XP distribuído."
    )

@router.post("/campeonatos/{campeonato_id}/finalizar-customizado", tags=['Campeonato Finalização'], status_code=status.HTTP_200_OK, response_model=models.ApiResponse)
async def finalizar_campeonato_customizado(
    dados: models.FinalizarCustomizadoRequest,
    campeonato_id: str = Path(..., description="ID do campeonato"),
    db: Session = Depends(get_db),
    usuario: ContextoAutenticacao = Depends(verificar_admin)
):
    """Finaliza o campeonato com o XP de cada colocação informado pelo organizador"""

    resultado = await RepositorioCampeonato(db).finalizar_customizado(
        campeonato_id, usuario, dados.top8, dados.participation
    )
    return success_response(
        resultado,
        f"Lançamento customizado completo! Total de {resultado.xp_distribuido:.2f} XP distribuído."
    )
