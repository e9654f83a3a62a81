from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, Generic, TypeVar, List, Union, Dict, Any, Literal
from datetime import datetime
from enum import Enum

DataT = TypeVar("DataT")

class ApiResponse(BaseModel, Generic[DataT]):
    """
    Modelo de resposta padronizado para a API, utilizado tanto para sucesso quanto para erro.

    Attributes:
        success: Indica se a requisição foi bem-sucedida (True) ou falhou (False)
        data: Dados da resposta, pode ser um único objeto ou uma lista
        message: Mensagem descritiva sobre o resultado da operação
        meta: Informações adicionais
        status_code: Código de status HTTP da resposta
    """
    success: bool
    data: Optional[Union[DataT, List[DataT], Dict[str, Any]]] = None
    message: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None
    status_code: int = 200

    model_config = ConfigDict(from_attributes=True)

# ----- Enums -----

class StatusCampeonato(str, Enum):
    ABERTO = "aberto"
    FINALIZADO = "finalizado"

# ----- Requisições de finalização -----
# Os nomes em camelCase são os enviados pelo painel; snake_case também é aceito.

class ColocacaoTop8(BaseModel):
    """Uma linha do top 8 no modo padrão"""
    jogador_id: Optional[str] = Field(default=None, alias='jogadorId')
    nome_manual: Optional[str] = Field(default=None, alias='nomeManual')
    posicao: int

    model_config = ConfigDict(populate_by_name=True)

class ColocacaoTop8Customizada(ColocacaoTop8):
    """Uma linha do top 8 com XP definido pelo organizador"""
    xp_ganho: float = Field(default=0, alias='xpGanho')

class ParticipacaoCustomizada(BaseModel):
    jogador_ids: List[Optional[str]] = Field(default_factory=list, alias='jogadorIds')
    xp_ganho: float = Field(default=0, alias='xpGanho')

    model_config = ConfigDict(populate_by_name=True)

class FinalizarPadraoRequest(BaseModel):
    top8: List[ColocacaoTop8] = Field(default_factory=list)
    participation: List[Optional[str]] = Field(default_factory=list)

class FinalizarCustomizadoRequest(BaseModel):
    top8: List[ColocacaoTop8Customizada] = Field(default_factory=list)
    participation: Optional[ParticipacaoCustomizada] = None

class FinalizacaoResultado(BaseModel):
    xp_distribuido: float

# ----- Entradas classificadas pelo normalizador -----

class EntradaRegistrada(BaseModel):
    """Jogador com conta, XP calculado pela tabela"""
    tipo: Literal['registrada'] = 'registrada'
    jogador_id: str
    posicao: int

    model_config = ConfigDict(frozen=True)

class EntradaRegistradaComXp(BaseModel):
    """Jogador com conta e XP informado"""
    tipo: Literal['registrada_com_xp'] = 'registrada_com_xp'
    jogador_id: str
    posicao: int
    xp_ganho: float

    model_config = ConfigDict(frozen=True)

class EntradaManual(BaseModel):
    """Jogador sem conta: só o nome vai para o histórico"""
    tipo: Literal['manual'] = 'manual'
    nome: str
    posicao: int

    model_config = ConfigDict(frozen=True)

EntradaColocacao = Union[EntradaRegistrada, EntradaRegistradaComXp, EntradaManual]

class LancamentoXP(BaseModel):
    """Atualização pendente no XP e nos campeonatos de um usuário"""
    jogador_id: str
    posicao: int
    xp: float

class RegistroColocacao(BaseModel):
    """Linha permanente gravada no campeonato"""
    jogador_id: Optional[str] = None
    nome: str
    posicao: int
    xp_ganho: float = 0

# ----- Campeonatos -----

class CampeonatoPOST(BaseModel):
    nome: str
    descricao: Optional[str] = None
    data: Optional[datetime] = None
    xp_total: Optional[float] = Field(default=None, alias='xpTotal')
    organizador_id: Optional[str] = Field(default=None, alias='organizadorId')
    game: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

class Campeonato(BaseModel):
    id: str
    organizador_id: str
    organizador_nome: Optional[str] = None
    nome: str
    descricao: Optional[str] = None
    game: Optional[str] = None
    data: Optional[datetime] = None
    xp_total: float
    status: StatusCampeonato
    participantes: List[RegistroColocacao] = Field(default_factory=list)
    criado_por: Optional[str] = None
    finalizado_em: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator('status', mode='before')
    @classmethod
    def status_do_banco(cls, valor):
        return getattr(valor, 'value', valor)

# ----- Rifa -----

class AdicionarParticipanteRifa(BaseModel):
    jogador_id: str = Field(alias='jogadorId', min_length=1)

    model_config = ConfigDict(populate_by_name=True)

class CotaRifa(BaseModel):
    numero: int
    nome: Optional[str] = None
    id: str

class Rifa(BaseModel):
    id: str
    participantes: List[CotaRifa] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
