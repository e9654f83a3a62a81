import asyncio
import logging
import random
from typing import Callable, Optional, TypeVar

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.exc import IntegrityError, OperationalError

from src.utils.config_fgc import ConfigFGC
from src.utils.exceptions_fgc import TransacaoTransitoriaException

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Erros que descartam a tentativa inteira e fazem a operação ser refeita:
# versão lida desatualizada, chave duplicada inserida por outro escritor,
# banco travado ou conexão perdida.
ERROS_CONFLITO = (StaleDataError, IntegrityError, OperationalError)


async def _aguardar(tentativa: int):
    espera = min(ConfigFGC.ESPERA_BASE_TRANSACAO * (2 ** (tentativa - 1)), ConfigFGC.ESPERA_MAXIMA_TRANSACAO)
    await asyncio.sleep(random.uniform(0, espera))


def _tentar(db: Session, operacao: Callable[[Session], T]) -> T:
    """Uma tentativa completa: leituras frescas, operação e commit, ou rollback"""
    db.expire_all()
    try:
        resultado = operacao(db)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return resultado


async def executar_transacao(
    db: Session,
    operacao: Callable[[Session], T],
    nome_operacao: Optional[str] = None,
    max_tentativas: Optional[int] = None
) -> T:
    """
    Executa `operacao(db)` e faz commit como uma única transação otimista.

    Cada tentativa começa com todos os objetos da sessão expirados, então
    toda leitura feita pela operação vem do banco. Em conflito a sessão sofre
    rollback e a operação é executada novamente desde a primeira leitura.
    Exceções de negócio (FGCException) e erros inesperados desfazem a
    tentativa e são propagados sem nova tentativa.

    O acesso ao banco (inclusive a espera por lock do SQLite) roda no
    threadpool e a espera entre tentativas é um `asyncio.sleep`, então o
    event loop continua atendendo outras requisições.

    Args:
        db: Sessão do banco de dados
        operacao: Função síncrona que lê e altera registros na sessão recebida
        nome_operacao: Nome usado nos logs e na mensagem de erro
        max_tentativas: Limite de tentativas (padrão ConfigFGC.MAX_TENTATIVAS_TRANSACAO)

    Returns:
        O valor retornado pela operação na tentativa que fez commit

    Raises:
        TransacaoTransitoriaException: quando todas as tentativas conflitaram
    """
    nome = nome_operacao or getattr(operacao, '__name__', 'transacao')
    tentativas = max_tentativas or ConfigFGC.MAX_TENTATIVAS_TRANSACAO
    ultimo_erro = None

    for tentativa in range(1, tentativas + 1):
        try:
            return await run_in_threadpool(_tentar, db, operacao)
        except ERROS_CONFLITO as error:
            ultimo_erro = error
            logger.warning(f"Conflito em '{nome}' (tentativa {tentativa}/{tentativas}): {type(error).__name__}")
            if tentativa < tentativas:
                await _aguardar(tentativa)

    logger.error(f"Transação '{nome}' abortada após {tentativas} tentativas: {ultimo_erro}")
    raise TransacaoTransitoriaException(nome, tentativas, ultimo_erro) from ultimo_erro
