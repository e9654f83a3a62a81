from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

import logging
import sys
import traceback

from src.utils.exceptions_fgc import FGCException, TransacaoTransitoriaException
from src.utils.utils_fgc import UtilsFGC

logger = logging.getLogger(__name__)

def handle_error(error, function):
    """
    Propaga exceções de negócio. Falha de conexão ou banco travado vira
    erro transitório (503); o resto vira HTTP 500 com log do traceback.
    """
    if isinstance(error, (FGCException, HTTPException)):
        raise error

    dataErro = UtilsFGC.agora()
    if isinstance(error, OperationalError):
        logger.error(f"[{dataErro}] Banco indisponível em {function.__name__}: {error}")
        raise TransacaoTransitoriaException(function.__name__, 1, error) from error

    _, _, exc_traceback = sys.exc_info()
    if exc_traceback is not None:
        filename = exc_traceback.tb_frame.f_code.co_filename
        line_no = exc_traceback.tb_lineno
    else:
        filename, line_no = '?', 0
    logger.error(f"[{dataErro}] Erro em {function.__name__}: {traceback.format_exc()}")
    raise HTTPException(status_code=500, detail=f"Error in function {function.__name__} at {filename}:{line_no}: {str(error)}") from error
