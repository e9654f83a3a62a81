from datetime import datetime, timezone
from typing import Optional
import pytz

from src.utils.config_fgc import ConfigFGC

AMSP = pytz.timezone('America/Sao_Paulo')

class UtilsFGC:
    """Utilitários para o sistema FGC"""

    @staticmethod
    def agora() -> datetime:
        """Data/hora atual no fuso de São Paulo"""
        return datetime.now(timezone.utc).astimezone(AMSP)

    @staticmethod
    def peso_colocacao(posicao: int) -> Optional[float]:
        """Fração do XP do campeonato para a colocação, ou None fora da tabela"""
        return ConfigFGC.DISTRIBUICAO_XP.get(posicao)

    @staticmethod
    def calcular_xp_colocacao(xp_total: float, posicao: int) -> Optional[float]:
        """
        Calcula o XP de uma colocação a partir do XP total do campeonato.

        As faixas (top 8 e participação) são multiplicadores independentes
        do mesmo total, então a soma distribuída pode passar de 100%.
        """
        peso = UtilsFGC.peso_colocacao(posicao)
        if peso is None:
            return None
        return float(xp_total) * peso

    @staticmethod
    def xp_participacao(xp_total: float) -> float:
        """XP fixo de cada participante além do top 8"""
        return UtilsFGC.calcular_xp_colocacao(xp_total, ConfigFGC.POSICAO_PARTICIPACAO)
