import asyncio
import time

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from conftest import CAMPEONATO_ID, ler, maior_intervalo_do_loop
from src.database import schemas
from src.database.transacao import executar_transacao
from src.repositorios.campeonato import RepositorioCampeonato
from src.utils.error_handler import handle_error
from src.utils.exceptions_fgc import TransacaoTransitoriaException, NaoEncontradoException


async def sem_espera(tentativa):
    return None


@pytest.fixture
def espera_zerada(monkeypatch):
    monkeypatch.setattr("src.database.transacao._aguardar", sem_espera)


def executar(db, operacao, *args, **kwargs):
    return asyncio.run(executar_transacao(db, operacao, *args, **kwargs))


def test_commit_na_primeira_tentativa(db, fabrica_sessao, dados_base, espera_zerada):
    def renomear(sessao):
        sessao.get(schemas.Usuarios, "j1").nome = "Daigo Umehara"
        return "ok"

    assert executar(db, renomear) == "ok"
    assert ler(fabrica_sessao, schemas.Usuarios, "j1").nome == "Daigo Umehara"


def test_escritor_concorrente_faz_a_operacao_ser_refeita(db, fabrica_sessao, dados_base, espera_zerada):
    tentativas = []

    def adicionar_cota(sessao):
        rifa = sessao.get(schemas.Rifas, "atual")
        cotas = list(rifa.participantes)
        tentativas.append(len(cotas))

        if len(tentativas) == 1:
            # outro escritor grava entre a leitura e o commit
            outra = fabrica_sessao()
            outra.get(schemas.Rifas, "atual").participantes = [{"numero": 1, "nome": "Tokido", "id": "j2"}]
            outra.commit()
            outra.close()

        rifa.participantes = cotas + [{"numero": len(cotas) + 1, "nome": "Daigo", "id": "j1"}]
        return len(cotas) + 1

    assert executar(db, adicionar_cota) == 2
    assert tentativas == [0, 1]

    rifa = ler(fabrica_sessao, schemas.Rifas, "atual")
    assert [cota["numero"] for cota in rifa.participantes] == [1, 2]
    assert rifa.versao == 3


def test_conflito_persistente_vira_erro_transitorio(db, dados_base, espera_zerada):
    chamadas = []

    def sempre_conflita(sessao):
        chamadas.append(1)
        raise StaleDataError("versão desatualizada")

    with pytest.raises(TransacaoTransitoriaException) as excinfo:
        executar(db, sempre_conflita, "sempre_conflita", max_tentativas=3)

    assert len(chamadas) == 3
    assert excinfo.value.tentativas == 3
    assert excinfo.value.status_code == 503
    assert isinstance(excinfo.value.__cause__, StaleDataError)


def test_erro_de_negocio_nao_e_refeito(db, fabrica_sessao, dados_base, espera_zerada):
    chamadas = []

    def nao_encontra(sessao):
        chamadas.append(1)
        sessao.get(schemas.Usuarios, "j1").xp_total = 999
        raise NaoEncontradoException("sumiu")

    with pytest.raises(NaoEncontradoException):
        executar(db, nao_encontra)

    assert len(chamadas) == 1
    assert ler(fabrica_sessao, schemas.Usuarios, "j1").xp_total == 0


def test_cada_tentativa_le_do_banco(db, fabrica_sessao, dados_base, espera_zerada):
    # objeto carregado antes fica em cache na sessão
    assert db.get(schemas.Usuarios, "j1").xp_total == 0

    outra = fabrica_sessao()
    outra.get(schemas.Usuarios, "j1").xp_total = 42
    outra.commit()
    outra.close()

    assert executar(db, lambda sessao: sessao.get(schemas.Usuarios, "j1").xp_total) == 42


def test_espera_entre_tentativas_nao_trava_o_loop(db, dados_base, monkeypatch):
    monkeypatch.setattr("src.database.transacao.ConfigFGC.ESPERA_BASE_TRANSACAO", 0.2)
    monkeypatch.setattr("src.database.transacao.random.uniform", lambda inicio, fim: fim)

    chamadas = []

    def conflita_duas_vezes(sessao):
        chamadas.append(1)
        if len(chamadas) <= 2:
            raise StaleDataError("versão desatualizada")
        return "ok"

    resultado, maior_intervalo = asyncio.run(maior_intervalo_do_loop(executar_transacao(db, conflita_duas_vezes)))

    assert resultado == "ok"
    assert len(chamadas) == 3
    # 0.2 s + 0.4 s de espera no total, sem segurar o loop
    assert maior_intervalo < 0.15


def test_operacao_lenta_roda_fora_do_loop(db, dados_base, espera_zerada):
    def lenta(sessao):
        time.sleep(0.3)
        return sessao.get(schemas.Usuarios, "j1").nome

    resultado, maior_intervalo = asyncio.run(maior_intervalo_do_loop(executar_transacao(db, lenta)))

    assert resultado == "Daigo"
    assert maior_intervalo < 0.15


def test_banco_indisponivel_na_leitura_vira_erro_transitorio(db, dados_base, monkeypatch):
    def get_indisponivel(self, modelo, chave, **kwargs):
        raise OperationalError("SELECT", {}, Exception("unable to open database file"))

    monkeypatch.setattr(Session, "get", get_indisponivel)

    with pytest.raises(TransacaoTransitoriaException) as excinfo:
        asyncio.run(RepositorioCampeonato(db).get_by_id(CAMPEONATO_ID))

    assert excinfo.value.tipo == "transitorio"
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_erro_inesperado_na_leitura_vira_500():
    def consultar():
        raise ValueError("coluna inesperada")

    try:
        consultar()
    except ValueError as error:
        with pytest.raises(HTTPException) as excinfo:
            handle_error(error, consultar)

    assert excinfo.value.status_code == 500
    assert "consultar" in excinfo.value.detail
    assert isinstance(excinfo.value.__cause__, ValueError)
