from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from contextlib import asynccontextmanager
import uvicorn
import logging

from src.utils.exceptions_fgc import FGCException, DadosInvalidosException
from src.utils.api_response import error_response, excecao_response
from src.utils.route_error_handler import api_response_json
from src.utils.utils_fgc import UtilsFGC

# Imports do banco de dados
from src.database.db import SessionLocal, engine, Base
from src.database import schemas  # registra as tabelas no metadata

# Imports das rotas FGC
from src.routers import (
    route_campeonato,
    route_rifa
)

# Configuração de logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ===================================================================
# CONFIGURAÇÃO DE TAGS PARA DOCUMENTAÇÃO
# ===================================================================

tags_metadata = [
    {
        "name": "Campeonato",
        "description": "Criação e consulta de campeonatos das organizações."
    },
    {
        "name": "Campeonato Finalização",
        "description": "Finalização de campeonatos com distribuição de XP (tabela padrão ou valores customizados)."
    },
    {
        "name": "Rifa",
        "description": "Rifa ativa e distribuição sequencial de cotas."
    },
]

# ===================================================================
# CONFIGURAÇÃO DO CICLO DE VIDA DA APLICAÇÃO
# ===================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gerenciamento do ciclo de vida da aplicação"""
    logger.info("Iniciando API FGC Brasil...")

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Estrutura do banco de dados verificada/criada")
    except Exception as e:
        logger.error(f"Erro ao configurar banco de dados: {e}")
        raise

    logger.info("Documentação disponível em: /docs")

    yield

    logger.info("Encerrando API FGC Brasil...")

# ===================================================================
# CRIAÇÃO DA APLICAÇÃO FASTAPI
# ===================================================================

app = FastAPI(
    title="API FGC Brasil",
    description="""
    ## Campeonatos, XP e rifa da comunidade FGC

    - Finalização de campeonatos com distribuição de XP para os jogadores
    - Jogadores sem conta entram no resultado sem receber XP
    - Cotas da rifa numeradas em sequência
    """,
    version="1.0.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# ===================================================================
# CONFIGURAÇÃO DE MIDDLEWARE
# ===================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ===================================================================
# ROTAS PRINCIPAIS DO SISTEMA
# ===================================================================

@app.get("/api", tags=["Sistema"], summary="Teste de API")
async def root():
    return {"message": "API FGC Brasil funcionando!", "timestamp": UtilsFGC.agora().isoformat()}

@app.get("/health", tags=["Sistema"], summary="Verificação de Saúde")
async def health_check():
    """
    Endpoint para verificação de saúde do sistema
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_status = "conectado"
    except Exception as e:
        logger.error(f"Banco de dados indisponível: {e}")
        db_status = f"erro: {str(e)}"
    finally:
        db.close()

    return {
        "status": "ok" if db_status == "conectado" else "erro",
        "timestamp": UtilsFGC.agora().isoformat(),
        "banco_dados": db_status
    }

# ===================================================================
# INCLUSÃO DAS ROTAS DOS MÓDULOS FGC
# ===================================================================

app.include_router(
    route_campeonato.router,
    prefix="/api/v1",
    tags=["Campeonatos FGC"]
)

app.include_router(
    route_rifa.router,
    prefix="/api/v1",
    tags=["Rifa FGC"]
)

# ===================================================================
# CONFIGURAÇÃO DE EXCEÇÕES GLOBAIS
# ===================================================================

@app.exception_handler(FGCException)
async def fgc_exception_handler(request: Request, exc: FGCException):
    """Handler para exceções específicas do FGC"""
    return api_response_json(excecao_response(exc))

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Corpo da requisição fora do formato esperado"""
    return api_response_json(error_response(
        message="Dados inválidos na requisição",
        data={'tipo': DadosInvalidosException.tipo, 'erros': [
            {'campo': '.'.join(str(p) for p in erro.get('loc', ())), 'mensagem': erro.get('msg')}
            for erro in exc.errors()
        ]},
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
    ))

# ===================================================================
# INICIALIZAÇÃO DO SERVIDOR
# ===================================================================

if __name__ == "__main__":
    uvicorn.run(
        "server:app",
        host="0.0.0.0",
        port=3001,
        reload=True,
        log_level="info",
        access_log=True
    )
