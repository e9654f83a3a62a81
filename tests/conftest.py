"""
tests/conftest.py - Banco SQLite em arquivo por teste.

Um arquivo (e não :memory:) permite abrir várias sessões e threads sobre
o mesmo banco nos testes de concorrência.
"""

import asyncio
import time

import pytest
from sqlalchemy.orm import sessionmaker

from src.database.db import Base, criar_engine
from src.database import schemas
from src.utils.auth_utils import ContextoAutenticacao

CAMPEONATO_ID = "camp-1"
ORG_A = "org-a"
ORG_B = "org-b"


@pytest.fixture
def engine(tmp_path):
    engine = criar_engine(f"sqlite:///{tmp_path / 'fgc_teste.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def fabrica_sessao(engine):
    return sessionmaker(autocommit=False, autoflush=True, bind=engine)


@pytest.fixture
def db(fabrica_sessao):
    sessao = fabrica_sessao()
    yield sessao
    sessao.close()


@pytest.fixture
def dados_base(fabrica_sessao):
    """Duas organizações, um admin, dois organizadores, três jogadores, um campeonato aberto e a rifa ativa."""
    sessao = fabrica_sessao()
    sessao.add_all([
        schemas.Organizacoes(id=ORG_A, nome="Arena A", xp_base=1000, games=[]),
        schemas.Organizacoes(id=ORG_B, nome="Arena B", xp_base=500, games=["sf6"]),
    ])
    sessao.flush()
    sessao.add_all([
        schemas.Usuarios(id="admin-1", nome="Admin", email="admin@fgc.com", tipo="admin"),
        schemas.Usuarios(id="org-a-user", nome="Organizador A", tipo="organizador", organizacao_id=ORG_A),
        schemas.Usuarios(id="org-b-user", nome="Organizador B", tipo="organizador", organizacao_id=ORG_B),
        schemas.Usuarios(id="j1", nome="Daigo", tipo="jogador", xp_total=0, campeonatos_participados=[]),
        schemas.Usuarios(id="j2", nome="Tokido", tipo="jogador", xp_total=50, campeonatos_participados=["antigo"]),
        schemas.Usuarios(id="j3", nome=None, email="sem-nome@fgc.com", tipo="jogador", xp_total=0),
        schemas.Campeonatos(
            id=CAMPEONATO_ID,
            organizador_id=ORG_A,
            organizador_nome="Arena A",
            nome="Copa A",
            xp_total=1000,
            participantes=[],
            status=schemas.StatusCampeonato.ABERTO,
        ),
        schemas.Rifas(id="atual", participantes=[]),
    ])
    sessao.commit()
    sessao.close()


@pytest.fixture
def admin_global():
    return ContextoAutenticacao("admin-1", True, {"tipo": "admin"})


@pytest.fixture
def organizador_a():
    return ContextoAutenticacao("org-a-user", False, {"tipo": "organizador", "organizacao_id": ORG_A})


@pytest.fixture
def organizador_b():
    return ContextoAutenticacao("org-b-user", False, {"tipo": "organizador", "organizacao_id": ORG_B})


def ler(fabrica_sessao, modelo, chave):
    """Lê um registro em uma sessão nova, fora de qualquer cache."""
    sessao = fabrica_sessao()
    try:
        registro = sessao.get(modelo, chave)
        if registro is not None:
            sessao.expunge(registro)
        return registro
    finally:
        sessao.close()


async def maior_intervalo_do_loop(tarefa, passo=0.02):
    """Roda `tarefa` ao lado de um relógio de `passo` segundos e mede o maior atraso entre batidas"""
    intervalos = []
    parar = asyncio.Event()

    async def relogio():
        anterior = time.monotonic()
        while not parar.is_set():
            await asyncio.sleep(passo)
            agora = time.monotonic()
            intervalos.append(agora - anterior)
            anterior = agora

    batidas = asyncio.create_task(relogio())
    try:
        resultado = await tarefa
    finally:
        parar.set()
        await batidas
    return resultado, max(intervalos)
