# orca_buffet/quote/exceptions.py
from __future__ import annotations


class QuoteError(Exception):
    """Base para erros do domínio de orçamentos."""

class InvalidEdit(QuoteError):
    """Edição inválida (índice fora do intervalo, campo desconhecido, nome vazio)."""

class OperationInProgress(QuoteError):
    """Já existe uma chamada assíncrona em andamento para este orçamento."""

class PlanLimitReached(QuoteError):
    """O plano do usuário não permite novas consultas à IA."""

class CollaboratorError(QuoteError):
    """Falha de um colaborador externo (IA, persistência)."""

class AIGenerationError(CollaboratorError):
    """A IA não conseguiu gerar o orçamento ou a receita."""

class MissingCredential(AIGenerationError):
    """Chave da API Gemini ausente."""

class MalformedAIResponse(AIGenerationError):
    """A IA devolveu um JSON inválido ou fora do schema."""

class PersistenceError(CollaboratorError):
    """Falha ao listar, criar ou atualizar orçamentos."""
