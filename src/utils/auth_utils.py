# auth_utils.py
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional, Dict, Any

from src.database.db import get_db
from src.database import schemas
from src.providers import token_provider

# Security scheme
security = HTTPBearer(auto_error=False)

# ---------------------- Contexto do Usuário ----------------------

class ContextoAutenticacao:
    """Identidade do chamador com os dados do perfil lidos no login da requisição"""

    def __init__(self, uid: str, admin: bool = False, perfil: Optional[Dict[str, Any]] = None):
        perfil = perfil or {}
        self.uid = uid
        self.admin = admin is True
        self.tipo = perfil.get('tipo')
        self.organizacao_id = perfil.get('organizacao_id')
        self.nome = perfil.get('nome')
        self.email = perfil.get('email')

    @classmethod
    def de_usuario(cls, uid: str, admin: bool, usuario: Optional[schemas.Usuarios]) -> 'ContextoAutenticacao':
        if usuario is None:
            return cls(uid, admin)
        return cls(uid, admin, {
            'tipo': usuario.tipo,
            'organizacao_id': usuario.organizacao_id,
            'nome': usuario.nome,
            'email': usuario.email
        })

    @property
    def is_admin_global(self) -> bool:
        """Claim de admin no token e perfil do tipo admin"""
        return self.admin and self.tipo == schemas.TipoUsuario.ADMIN.value

    @property
    def is_organizador(self) -> bool:
        return self.tipo == schemas.TipoUsuario.ORGANIZADOR.value

    def pode_finalizar(self, campeonato: schemas.Campeonatos) -> bool:
        """Admin global ou dono da organização do campeonato"""
        if self.is_admin_global:
            return True
        return self.organizacao_id is not None and campeonato.organizador_id == self.organizacao_id

    def __repr__(self):
        return f"<ContextoAutenticacao(uid='{self.uid}', tipo='{self.tipo}', admin={self.admin})>"

# ---------------------- Dependências de Autenticação ----------------------

def _nao_autorizado(detalhe: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detalhe,
        headers={"WWW-Authenticate": "Bearer"},
    )

async def obter_usuario_logado(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> ContextoAutenticacao:
    """Valida o token JWT e anexa os dados do perfil (tipo, organização) ao contexto"""
    if not credentials:
        raise _nao_autorizado('Não autorizado: Token não fornecido')

    payload = token_provider.verificar_access_token(credentials.credentials)
    if payload == 'expirou':
        raise _nao_autorizado('Token expirado')
    if not payload or not payload.get('sub'):
        raise _nao_autorizado('Não autorizado: Token inválido')

    uid = payload['sub']
    usuario = db.get(schemas.Usuarios, uid)
    return ContextoAutenticacao.de_usuario(uid, payload.get('admin') is True, usuario)

async def verificar_admin(
    usuario_atual: ContextoAutenticacao = Depends(obter_usuario_logado)
) -> ContextoAutenticacao:
    """Admin global (claim) ou organizador"""
    if usuario_atual.admin or usuario_atual.is_organizador:
        return usuario_atual

    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Proibido: Acesso restrito a administradores"
    )

async def verificar_admin_global(
    usuario_atual: ContextoAutenticacao = Depends(obter_usuario_logado)
) -> ContextoAutenticacao:
    """Apenas o administrador global"""
    if usuario_atual.is_admin_global:
        return usuario_atual

    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Proibido: Acesso restrito a administradores globais"
    )
