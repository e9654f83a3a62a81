from sqlalchemy.orm import Session
from typing import Optional
import logging

from src.database import schemas
from src.database.transacao import executar_transacao
from src.repositorios.usuario import RepositorioUsuario
from src.utils.config_fgc import ConfigFGC
from src.utils.error_handler import handle_error
from src.utils.exceptions_fgc import NaoEncontradoException

logger = logging.getLogger(__name__)

class RepositorioRifa:
    """Repositório da rifa: cotas numeradas em sequência, sem repetição e sem buracos"""

    def __init__(self, db: Session):
        self.db = db

    async def get_atual(self, rifa_id: str = ConfigFGC.ID_RIFA_ATUAL) -> schemas.Rifas:
        """Busca a rifa ativa"""
        try:
            rifa = self.db.get(schemas.Rifas, rifa_id)
        except Exception as error:
            handle_error(error, self.get_atual)

        if rifa is None:
            raise NaoEncontradoException('Nenhuma rifa ativa encontrada.')
        return rifa

    async def adicionar_participante(self, jogador_id: str, rifa_id: str = ConfigFGC.ID_RIFA_ATUAL) -> int:
        """
        Adiciona uma cota para o jogador e retorna o número dela.

        O titular e o registro da rifa são lidos na mesma transação. O próximo
        número é o maior número existente + 1, calculado e gravado nela.
        Duas alocações simultâneas conflitam na versão da rifa e a perdedora
        é refeita.
        """
        def alocar_cota(db: Session) -> int:
            usuario = db.get(schemas.Usuarios, jogador_id)
            if usuario is None:
                raise NaoEncontradoException('Usuário não encontrado.')
            nome = RepositorioUsuario.nome_exibicao(usuario)

            rifa = db.get(schemas.Rifas, rifa_id)
            if rifa is None:
                raise NaoEncontradoException(f"Documento da rifa '{rifa_id}' não existe!")

            cotas = list(rifa.participantes or [])
            proximo_numero = max((cota.get('numero', 0) for cota in cotas), default=0) + 1

            rifa.participantes = cotas + [{'numero': proximo_numero, 'nome': nome, 'id': jogador_id}]
            return proximo_numero

        numero = await executar_transacao(self.db, alocar_cota, 'adicionar_participante_rifa')
        logger.info(f"Participante {jogador_id} adicionado à rifa '{rifa_id}' com o número {numero}")
        return numero

    async def resetar(self, rifa_id: str = ConfigFGC.ID_RIFA_ATUAL) -> Optional[int]:
        """Remove todas as cotas. Retorna quantas foram removidas."""
        def limpar_cotas(db: Session) -> int:
            rifa = db.get(schemas.Rifas, rifa_id)
            if rifa is None:
                raise NaoEncontradoException('Nenhuma rifa ativa encontrada.')
            removidas = len(rifa.participantes or [])
            rifa.participantes = []
            return removidas

        removidas = await executar_transacao(self.db, limpar_cotas, 'resetar_rifa')
        logger.info(f"Rifa '{rifa_id}' resetada: {removidas} cotas removidas")
        return removidas
