from typing import List, Optional, Tuple

from src.database import models
from src.utils.config_fgc import ConfigFGC
from src.utils.exceptions_fgc import DadosInvalidosException
from src.utils.utils_fgc import UtilsFGC


class NormalizadorResultados:
    """
    Separa as colocações enviadas na finalização em duas listas:

    - lançamentos de XP, um por jogador registrado que deve pontuar;
    - registros de colocação sem XP, para jogadores manuais (sem conta),
      que entram no histórico do campeonato mas nunca tocam um usuário.
    """

    # ---------------------- Classificação ----------------------

    @staticmethod
    def _validar_posicao(posicao: int) -> int:
        if isinstance(posicao, bool) or not isinstance(posicao, int) or posicao < 1:
            raise DadosInvalidosException(f"Posição inválida: {posicao!r}. Deve ser um inteiro positivo.")
        return posicao

    @staticmethod
    def classificar_top8_padrao(entradas: List[models.ColocacaoTop8]) -> List[models.EntradaColocacao]:
        """Converte as linhas do top 8 (modo padrão) em entradas registradas ou manuais"""
        classificadas = []
        for entrada in entradas:
            posicao = NormalizadorResultados._validar_posicao(entrada.posicao)
            if entrada.jogador_id:
                classificadas.append(models.EntradaRegistrada(jogador_id=entrada.jogador_id, posicao=posicao))
            elif entrada.nome_manual:
                classificadas.append(models.EntradaManual(nome=entrada.nome_manual, posicao=posicao))
            else:
                raise DadosInvalidosException(f"A colocação {posicao} precisa de jogadorId ou nomeManual.")
        return classificadas

    @staticmethod
    def classificar_top8_customizado(entradas: List[models.ColocacaoTop8Customizada]) -> List[models.EntradaColocacao]:
        """Converte as linhas do top 8 (modo customizado) em entradas com XP ou manuais"""
        classificadas = []
        for entrada in entradas:
            posicao = NormalizadorResultados._validar_posicao(entrada.posicao)
            if not entrada.jogador_id and not entrada.nome_manual:
                raise DadosInvalidosException(f"A colocação {posicao} precisa de jogadorId ou nomeManual.")
            if entrada.xp_ganho < 0:
                raise DadosInvalidosException(f"XP negativo na colocação {posicao}.")

            if entrada.jogador_id and entrada.xp_ganho > 0:
                classificadas.append(models.EntradaRegistradaComXp(
                    jogador_id=entrada.jogador_id,
                    posicao=posicao,
                    xp_ganho=float(entrada.xp_ganho)
                ))
            elif entrada.nome_manual:
                classificadas.append(models.EntradaManual(nome=entrada.nome_manual, posicao=posicao))
            # jogador registrado sem XP e sem nome: nada a gravar
        return classificadas

    @staticmethod
    def validar_participacao_customizada(participacao: Optional[models.ParticipacaoCustomizada]):
        """XP negativo na faixa de participação é rejeitado como no top 8"""
        if participacao and participacao.xp_ganho < 0:
            raise DadosInvalidosException("XP negativo na faixa de participação.")

    # ---------------------- Normalização ----------------------

    @staticmethod
    def _separar_top8(
        entradas: List[models.EntradaColocacao],
        xp_total: Optional[float]
    ) -> Tuple[List[models.LancamentoXP], List[models.RegistroColocacao]]:
        lancamentos = []
        registros = []

        for entrada in entradas:
            if isinstance(entrada, models.EntradaManual):
                registros.append(models.RegistroColocacao(
                    jogador_id=None,
                    nome=entrada.nome,
                    posicao=entrada.posicao,
                    xp_ganho=0
                ))
            elif isinstance(entrada, models.EntradaRegistradaComXp):
                if entrada.xp_ganho > 0:
                    lancamentos.append(models.LancamentoXP(
                        jogador_id=entrada.jogador_id,
                        posicao=entrada.posicao,
                        xp=entrada.xp_ganho
                    ))
            elif isinstance(entrada, models.EntradaRegistrada):
                xp = UtilsFGC.calcular_xp_colocacao(xp_total or 0, entrada.posicao)
                if xp is not None:
                    lancamentos.append(models.LancamentoXP(
                        jogador_id=entrada.jogador_id,
                        posicao=entrada.posicao,
                        xp=xp
                    ))
            else:
                raise DadosInvalidosException(f"Entrada de colocação desconhecida: {entrada!r}")

        return lancamentos, registros

    @staticmethod
    def _lancamentos_participacao(jogador_ids: List[Optional[str]], xp: float) -> List[models.LancamentoXP]:
        return [
            models.LancamentoXP(jogador_id=jogador_id, posicao=ConfigFGC.POSICAO_PARTICIPACAO, xp=xp)
            for jogador_id in jogador_ids
            if jogador_id
        ]

    @staticmethod
    def normalizar_padrao(
        xp_total: float,
        top8: List[models.EntradaColocacao],
        participacao: List[Optional[str]]
    ) -> Tuple[List[models.LancamentoXP], List[models.RegistroColocacao]]:
        """
        Modo padrão: XP de cada colocação vem da tabela de distribuição.

        Jogadores registrados fora da tabela não recebem nada e não são gravados.
        """
        lancamentos, registros = NormalizadorResultados._separar_top8(top8, xp_total)

        if participacao:
            xp = UtilsFGC.xp_participacao(xp_total or 0)
            lancamentos.extend(NormalizadorResultados._lancamentos_participacao(participacao, xp))

        return lancamentos, registros

    @staticmethod
    def normalizar_customizado(
        top8: List[models.EntradaColocacao],
        participacao: Optional[models.ParticipacaoCustomizada]
    ) -> Tuple[List[models.LancamentoXP], List[models.RegistroColocacao]]:
        """Modo customizado: o XP informado pelo organizador é gravado como veio"""
        lancamentos, registros = NormalizadorResultados._separar_top8(top8, None)
        NormalizadorResultados.validar_participacao_customizada(participacao)

        if participacao and participacao.jogador_ids and participacao.xp_ganho > 0:
            lancamentos.extend(NormalizadorResultados._lancamentos_participacao(
                participacao.jogador_ids, float(participacao.xp_ganho)
            ))

        return lancamentos, registros
