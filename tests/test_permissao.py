from src.database import schemas
from src.utils.auth_utils import ContextoAutenticacao


def campeonato_da(organizacao_id):
    return schemas.Campeonatos(id="c", organizador_id=organizacao_id, nome="Copa", xp_total=1000)


def test_admin_global_finaliza_qualquer_campeonato(admin_global):
    assert admin_global.is_admin_global
    assert admin_global.pode_finalizar(campeonato_da("org-x"))


def test_organizador_finaliza_so_da_propria_organizacao(organizador_a):
    assert organizador_a.pode_finalizar(campeonato_da("org-a"))
    assert not organizador_a.pode_finalizar(campeonato_da("org-b"))


def test_claim_admin_sem_perfil_admin_nao_e_global():
    contexto = ContextoAutenticacao("u1", True, {"tipo": "organizador", "organizacao_id": "org-a"})

    assert not contexto.is_admin_global
    assert contexto.pode_finalizar(campeonato_da("org-a"))
    assert not contexto.pode_finalizar(campeonato_da("org-b"))


def test_perfil_admin_sem_claim_nao_e_global():
    contexto = ContextoAutenticacao("u1", False, {"tipo": "admin"})

    assert not contexto.is_admin_global
    assert not contexto.pode_finalizar(campeonato_da("org-a"))


def test_sem_organizacao_nao_finaliza():
    contexto = ContextoAutenticacao("u1", False, {"tipo": "organizador"})

    assert not contexto.pode_finalizar(campeonato_da(None))


def test_contexto_do_usuario_do_banco():
    usuario = schemas.Usuarios(id="u1", nome="Ana", tipo="organizador", organizacao_id="org-a")

    contexto = ContextoAutenticacao.de_usuario("u1", False, usuario)

    assert contexto.is_organizador
    assert contexto.organizacao_id == "org-a"
    assert contexto.nome == "Ana"


def test_contexto_sem_perfil():
    contexto = ContextoAutenticacao.de_usuario("u1", True, None)

    assert contexto.tipo is None
    assert not contexto.is_admin_global
