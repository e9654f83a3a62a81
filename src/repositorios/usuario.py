# repositorio_usuario.py
from sqlalchemy import select
from sqlalchemy.orm import Session
from typing import Dict, Iterable, Optional

from src.database import schemas

class RepositorioUsuario:
    """Consultas de usuário feitas dentro das transações de finalização e da rifa"""

    @staticmethod
    def buscar_varios(db: Session, usuario_ids: Iterable[str]) -> Dict[str, schemas.Usuarios]:
        """Busca vários usuários em uma única consulta. IDs sem registro ficam de fora."""
        ids = list(dict.fromkeys(usuario_ids))
        if not ids:
            return {}

        stmt = select(schemas.Usuarios).where(schemas.Usuarios.id.in_(ids))
        return {usuario.id: usuario for usuario in db.execute(stmt).scalars().all()}

    @staticmethod
    def nome_exibicao(usuario: Optional[schemas.Usuarios]) -> Optional[str]:
        """Nome do perfil, ou o email quando o perfil não tem nome"""
        if usuario is None:
            return None
        return usuario.nome or usuario.email
