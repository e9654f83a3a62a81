import os
import json
from dotenv import dotenv_values

config = dotenv_values(".env")
config = json.loads((json.dumps(config)))


def _valor(chave: str, padrao):
    """Variável de ambiente tem prioridade sobre o arquivo .env"""
    valor = os.environ.get(chave) or config.get(chave)
    if valor in (None, ''):
        return padrao
    return valor


class ConfigFGC:
    """Configurações específicas do sistema FGC Brasil"""

    # Distribuição de XP por colocação (fração do XP total do campeonato)
    DISTRIBUICAO_XP = {
        1: 0.660, 2: 0.300, 3: 0.240, 4: 0.220, 5: 0.210,
        6: 0.205, 7: 0.202, 8: 0.200, 9: 0.100
    }

    # Colocação usada para todos os participantes além do top 8
    POSICAO_PARTICIPACAO = 9

    NOME_JOGADOR_DESCONHECIDO = 'Jogador Desconhecido'

    # XP usado quando nem o campeonato nem a organização definem um valor
    XP_BASE_PADRAO = 1000

    # A rifa ativa sempre usa este ID
    ID_RIFA_ATUAL = 'atual'

    # Banco de dados
    DATABASE_URL = _valor('DATABASE_URL', 'sqlite:///./fgc.db')

    # Transações otimistas
    MAX_TENTATIVAS_TRANSACAO = int(_valor('MAX_TENTATIVAS_TRANSACAO', 5))
    ESPERA_BASE_TRANSACAO = float(_valor('ESPERA_BASE_TRANSACAO', 0.01))
    ESPERA_MAXIMA_TRANSACAO = 0.5

    # Token JWT
    SECRET_KEY = _valor('SECRET_KEY', 'fgc_chave_secreta_desenvolvimento')
    ALGORITHM = _valor('ALGORITHM', 'HS256')
    EXPIRES_IN_MIN = int(_valor('EXPIRES_IN_MIN', 60))
