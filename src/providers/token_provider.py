from datetime import datetime, timedelta, timezone
from typing import Optional, Union, Dict, Any
from jose import jwt, JWTError
from jose.exceptions import ExpiredSignatureError
import logging

from src.utils.config_fgc import ConfigFGC

logger = logging.getLogger(__name__)

def gerar_access_token(data: dict, expira_min: Optional[int] = None) -> str:
    """Gera o token JWT. `sub` é o ID do usuário e `admin` marca o administrador global."""
    dados = data.copy()
    expira = datetime.now(timezone.utc) + timedelta(minutes=int(expira_min or ConfigFGC.EXPIRES_IN_MIN))
    dados.update({'exp': expira})
    return jwt.encode(dados, ConfigFGC.SECRET_KEY, algorithm=ConfigFGC.ALGORITHM)

def verificar_access_token(token: str) -> Union[Dict[str, Any], str, None]:
    """
    Decodifica o token.

    Returns:
        O payload, 'expirou' se o token venceu ou None se for inválido
    """
    try:
        return jwt.decode(token, ConfigFGC.SECRET_KEY, algorithms=[ConfigFGC.ALGORITHM])
    except ExpiredSignatureError:
        return 'expirou'
    except JWTError as error:
        logger.info(f"Token rejeitado: {error}")
        return None
