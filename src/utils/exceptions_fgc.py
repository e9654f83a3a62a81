class FGCException(Exception):
    """Exceção base para o sistema FGC"""
    tipo = 'erro'
    status_code = 400

    def __init__(self, detalhe: str):
        super().__init__(detalhe)
        self.detalhe = detalhe

class NaoEncontradoException(FGCException):
    """Entidade referenciada não existe"""
    tipo = 'nao_encontrado'
    status_code = 404

class CampeonatoJaFinalizadoException(FGCException):
    """Campeonato já passou para o status finalizado"""
    tipo = 'ja_finalizado'
    status_code = 409

    def __init__(self, campeonato_id: str):
        super().__init__(f"O campeonato {campeonato_id} já foi finalizado.")
        self.campeonato_id = campeonato_id

class PermissaoNegadaException(FGCException):
    """Usuário sem permissão para a operação"""
    tipo = 'proibido'
    status_code = 403

class DadosInvalidosException(FGCException):
    """Dados enviados malformados ou insuficientes"""
    tipo = 'invalido'
    status_code = 400

class TransacaoTransitoriaException(FGCException):
    """Conflito persistente ou falha de conexão com o banco"""
    tipo = 'transitorio'
    status_code = 503

    def __init__(self, operacao: str, tentativas: int, causa: Exception = None):
        super().__init__(f"Não foi possível concluir '{operacao}' após {tentativas} tentativas. Tente novamente.")
        self.tentativas = tentativas
        self.causa = causa
