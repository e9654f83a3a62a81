from sqlalchemy import select, desc
from sqlalchemy.orm import Session
from typing import Callable, Dict, List, Optional, Tuple
import logging

from src.database import models, schemas
from src.database.transacao import executar_transacao
from src.repositorios.usuario import RepositorioUsuario
from src.utils.auth_utils import ContextoAutenticacao
from src.utils.config_fgc import ConfigFGC
from src.utils.error_handler import handle_error
from src.utils.exceptions_fgc import (
    NaoEncontradoException,
    CampeonatoJaFinalizadoException,
    PermissaoNegadaException
)
from src.utils.normalizador_resultados import NormalizadorResultados
from src.utils.utils_fgc import UtilsFGC

logger = logging.getLogger(__name__)

CalculoResultados = Callable[[schemas.Campeonatos], Tuple[List[models.LancamentoXP], List[models.RegistroColocacao]]]

class RepositorioCampeonato:
    """Repositório de campeonatos: criação, consulta e finalização com distribuição de XP"""

    def __init__(self, db: Session):
        self.db = db

    # ---------------------- Consultas ----------------------

    async def get_by_id(self, campeonato_id: str) -> Optional[schemas.Campeonatos]:
        """Recupera um campeonato pelo ID"""
        try:
            return self.db.get(schemas.Campeonatos, campeonato_id)
        except Exception as error:
            handle_error(error, self.get_by_id)

    async def get_meus_campeonatos(self, contexto: ContextoAutenticacao) -> List[schemas.Campeonatos]:
        """Admin global vê todos os campeonatos; organizador vê os da sua organização"""
        stmt = select(schemas.Campeonatos)
        if contexto.is_admin_global:
            pass
        elif contexto.is_organizador and contexto.organizacao_id:
            stmt = stmt.where(schemas.Campeonatos.organizador_id == contexto.organizacao_id)
        else:
            raise PermissaoNegadaException('Usuário não tem permissão para esta ação.')

        try:
            stmt = stmt.order_by(desc(schemas.Campeonatos.data))
            return self.db.execute(stmt).scalars().all()
        except Exception as error:
            handle_error(error, self.get_meus_campeonatos)

    # ---------------------- Criação ----------------------

    async def criar(self, dados: models.CampeonatoPOST, contexto: ContextoAutenticacao) -> schemas.Campeonatos:
        """
        Cria um campeonato aberto na organização do chamador.

        O organizador sempre usa a própria organização; o admin global escolhe
        a organização em `organizador_id`. O XP total vem do pedido, senão do
        XP base da organização. O jogo é adicionado à lista da organização
        na mesma transação.
        """
        if contexto.is_organizador:
            organizacao_id = contexto.organizacao_id
        elif contexto.admin:
            organizacao_id = dados.organizador_id
        else:
            organizacao_id = None

        if not organizacao_id:
            raise PermissaoNegadaException('Você não tem um ID de organização válido.')

        def criar_campeonato(db: Session) -> str:
            organizacao = db.get(schemas.Organizacoes, organizacao_id)
            if organizacao is None:
                raise NaoEncontradoException('Organização selecionada não foi encontrada.')

            xp_total = dados.xp_total or 0
            if xp_total <= 0:
                xp_total = organizacao.xp_base or ConfigFGC.XP_BASE_PADRAO

            campeonato = schemas.Campeonatos(
                organizador_id=organizacao.id,
                organizador_nome=organizacao.nome,
                nome=dados.nome,
                descricao=dados.descricao,
                game=dados.game,
                data=dados.data,
                xp_total=float(xp_total),
                participantes=[],
                status=schemas.StatusCampeonato.ABERTO,
                criado_por=contexto.uid
            )
            db.add(campeonato)

            games = list(organizacao.games or [])
            if dados.game and dados.game not in games:
                organizacao.games = games + [dados.game]

            db.flush()
            return campeonato.id

        campeonato_id = await executar_transacao(self.db, criar_campeonato, 'criar_campeonato')
        logger.info(f"Campeonato {campeonato_id} criado por {contexto.uid} na organização {organizacao_id}")
        return self.db.get(schemas.Campeonatos, campeonato_id)

    # ---------------------- Finalização ----------------------

    async def finalizar_padrao(
        self,
        campeonato_id: str,
        contexto: ContextoAutenticacao,
        top8: List[models.ColocacaoTop8],
        participacao: List[Optional[str]]
    ) -> models.FinalizacaoResultado:
        """Finaliza o campeonato com o XP de cada colocação calculado pela tabela"""
        entradas = NormalizadorResultados.classificar_top8_padrao(top8)

        def calcular(campeonato: schemas.Campeonatos):
            return NormalizadorResultados.normalizar_padrao(campeonato.xp_total, entradas, participacao)

        xp_distribuido = await self._finalizar(campeonato_id, contexto, calcular, 'finalizar_padrao')
        logger.info(f"Campeonato {campeonato_id} finalizado (padrão): {xp_distribuido:.2f} XP distribuído")
        return models.FinalizacaoResultado(xp_distribuido=xp_distribuido)

    async def finalizar_customizado(
        self,
        campeonato_id: str,
        contexto: ContextoAutenticacao,
        top8: List[models.ColocacaoTop8Customizada],
        participacao: Optional[models.ParticipacaoCustomizada]
    ) -> models.FinalizacaoResultado:
        """Finaliza o campeonato gravando o XP informado pelo organizador"""
        entradas = NormalizadorResultados.classificar_top8_customizado(top8)
        NormalizadorResultados.validar_participacao_customizada(participacao)

        def calcular(campeonato: schemas.Campeonatos):
            return NormalizadorResultados.normalizar_customizado(entradas, participacao)

        xp_distribuido = await self._finalizar(campeonato_id, contexto, calcular, 'finalizar_customizado')
        logger.info(f"Campeonato {campeonato_id} finalizado (customizado): {xp_distribuido:.2f} XP distribuído")
        return models.FinalizacaoResultado(xp_distribuido=xp_distribuido)

    async def _finalizar(
        self,
        campeonato_id: str,
        contexto: ContextoAutenticacao,
        calcular: CalculoResultados,
        nome_operacao: str
    ) -> float:
        def finalizar(db: Session) -> float:
            campeonato = db.get(schemas.Campeonatos, campeonato_id)
            if campeonato is None:
                raise NaoEncontradoException('Campeonato não encontrado')
            if campeonato.status == schemas.StatusCampeonato.FINALIZADO:
                raise CampeonatoJaFinalizadoException(campeonato_id)
            if not contexto.pode_finalizar(campeonato):
                raise PermissaoNegadaException('Você não tem permissão para finalizar este campeonato.')

            lancamentos, registros = calcular(campeonato)

            usuarios = self._buscar_usuarios(db, [lancamento.jogador_id for lancamento in lancamentos])
            nomes = {jogador_id: usuario.nome for jogador_id, usuario in usuarios.items() if usuario.nome}

            xp_distribuido = 0.0
            for lancamento in lancamentos:
                self._aplicar_lancamento(db, campeonato_id, usuarios, lancamento)
                registros.append(models.RegistroColocacao(
                    jogador_id=lancamento.jogador_id,
                    nome=nomes.get(lancamento.jogador_id, ConfigFGC.NOME_JOGADOR_DESCONHECIDO),
                    posicao=lancamento.posicao,
                    xp_ganho=lancamento.xp
                ))
                xp_distribuido += lancamento.xp

            self._encerrar_campeonato(campeonato, registros)
            return xp_distribuido

        return await executar_transacao(self.db, finalizar, nome_operacao)

    def _buscar_usuarios(self, db: Session, jogador_ids: List[str]) -> Dict[str, schemas.Usuarios]:
        return RepositorioUsuario.buscar_varios(db, jogador_ids)

    @staticmethod
    def _aplicar_lancamento(
        db: Session,
        campeonato_id: str,
        usuarios: Dict[str, schemas.Usuarios],
        lancamento: models.LancamentoXP
    ):
        """Soma o XP e inclui o campeonato na lista do usuário (sem repetir o ID)"""
        usuario = usuarios.get(lancamento.jogador_id)
        if usuario is None:
            # ID sem perfil: o XP fica guardado em um registro mínimo
            usuario = schemas.Usuarios(
                id=lancamento.jogador_id,
                tipo=schemas.TipoUsuario.JOGADOR.value,
                xp_total=0.0,
                campeonatos_participados=[]
            )
            db.add(usuario)
            usuarios[lancamento.jogador_id] = usuario

        usuario.xp_total = (usuario.xp_total or 0) + lancamento.xp

        participados = list(usuario.campeonatos_participados or [])
        if campeonato_id not in participados:
            usuario.campeonatos_participados = participados + [campeonato_id]

    @staticmethod
    def _encerrar_campeonato(campeonato: schemas.Campeonatos, registros: List[models.RegistroColocacao]):
        participantes = list(campeonato.participantes or [])
        for registro in registros:
            linha = registro.model_dump()
            if linha not in participantes:
                participantes.append(linha)

        campeonato.participantes = participantes
        campeonato.status = schemas.StatusCampeonato.FINALIZADO
        campeonato.finalizado_em = UtilsFGC.agora()
