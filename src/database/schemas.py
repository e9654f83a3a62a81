from sqlalchemy import Column, ForeignKey, Integer, String, DateTime, Text, Float, Enum, JSON, Index
from sqlalchemy.sql import func
from enum import Enum as PyEnum
import uuid

from src.database.db import Base

class StatusCampeonato(PyEnum):
    ABERTO = "aberto"
    FINALIZADO = "finalizado"

class TipoUsuario(PyEnum):
    ADMIN = "admin"
    ORGANIZADOR = "organizador"
    JOGADOR = "jogador"
    FA = "fã"

def _novo_id():
    return str(uuid.uuid4())

# Todas as tabelas compartilhadas carregam a coluna `versao`: o SQLAlchemy
# inclui "WHERE versao = :lida" em cada UPDATE e levanta StaleDataError
# quando outro escritor já alterou o registro.

class Organizacoes(Base):
    __tablename__ = 'organizacoes'

    id = Column(String(128), primary_key=True, default=_novo_id)
    nome = Column(String(300), nullable=False)
    descricao = Column(Text, nullable=True)
    xp_base = Column(Float, nullable=True, default=1000)
    games = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    versao = Column(Integer, nullable=False)

    __mapper_args__ = {'version_id_col': versao}

    def __repr__(self):
        return f"<Organizacao(nome='{self.nome}')>"

class Usuarios(Base):
    __tablename__ = 'usuarios'

    id = Column(String(128), primary_key=True, default=_novo_id)
    nome = Column(String(300), nullable=True)
    email = Column(String(300), nullable=True, index=True)
    tipo = Column(String(20), nullable=False, default=TipoUsuario.JOGADOR.value)
    organizacao_id = Column(String(128), ForeignKey('organizacoes.id', ondelete='SET NULL'), nullable=True)
    xp_total = Column(Float, nullable=False, default=0)
    campeonatos_participados = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    versao = Column(Integer, nullable=False)

    __mapper_args__ = {'version_id_col': versao}

    def __repr__(self):
        return f"<Usuario(nome='{self.nome}', xp={self.xp_total})>"

class Campeonatos(Base):
    __tablename__ = 'campeonatos'

    id = Column(String(128), primary_key=True, default=_novo_id)
    organizador_id = Column(String(128), ForeignKey('organizacoes.id'), nullable=False)
    organizador_nome = Column(String(300), nullable=True)
    nome = Column(String(300), nullable=False)
    descricao = Column(Text, nullable=True)
    game = Column(String(50), nullable=True)
    data = Column(DateTime(timezone=True), nullable=True)

    # XP total do campeonato, fixado na criação
    xp_total = Column(Float, nullable=False, default=0)

    # Colocações gravadas na finalização: {jogador_id, nome, posicao, xp_ganho}
    participantes = Column(JSON, nullable=False, default=list)

    status = Column(Enum(StatusCampeonato), nullable=False, default=StatusCampeonato.ABERTO)
    criado_por = Column(String(128), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    finalizado_em = Column(DateTime(timezone=True), nullable=True)
    versao = Column(Integer, nullable=False)

    __mapper_args__ = {'version_id_col': versao}

    __table_args__ = (
        Index('idx_campeonatos_organizador_data', 'organizador_id', 'data'),
    )

    def __repr__(self):
        return f"<Campeonato(nome='{self.nome}', status='{self.status.value if self.status else None}')>"

class Rifas(Base):
    __tablename__ = 'rifas'

    id = Column(String(128), primary_key=True)

    # Cotas em ordem de alocação: {numero, nome, id}
    participantes = Column(JSON, nullable=False, default=list)
    versao = Column(Integer, nullable=False)

    __mapper_args__ = {'version_id_col': versao}

    def __repr__(self):
        return f"<Rifa(id='{self.id}', cotas={len(self.participantes or [])})>"
