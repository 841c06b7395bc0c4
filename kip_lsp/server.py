"""
server.py - Servidor LSP principal para Kip usando pygls

Propósito:
    Servidor Language Server Protocol que expõe o motor de análise Kip
    (lexer, morfologia, parser, analisador, tokens semânticos) a editores
    compatíveis.

Componentes principais:
    - KipLanguageServer: Servidor principal com pygls
    - analyze_document: Reanálise completa de um documento
    - Event handlers: did_open, did_change, did_close
    - Features: semantic tokens (full/range), hover, completion,
      definition, references, document/workspace symbols

Dependências críticas:
    - pygls: Framework LSP
    - kip_lsp.analyzer: Tabelas de símbolos por documento

Exemplo de uso:
    python -m kip_lsp.server

Notas de implementação:
    - Comunica via STDIO (entrada/saída padrão)
    - Análise imediata em did_change (sem debounce); o documento inteiro
      é reanalisado e as tabelas substituídas no DocumentStore
    - Tabelas são removidas em did_close
    - Tratamento robusto de exceções (nunca crasha): handler que falha
      loga o erro e devolve resultado vazio
    - Configuração via kip.analysis.* e kip.semanticTokens.enabled
"""

from __future__ import annotations

import logging
import sys
from importlib import metadata
from typing import Tuple

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    DidChangeConfigurationParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    SemanticTokens,
    SemanticTokensParams,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_RANGE,
    SemanticTokensRangeParams,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    DocumentSymbolParams,
    TEXT_DOCUMENT_HOVER,
    HoverParams,
    TEXT_DOCUMENT_DEFINITION,
    DefinitionParams,
    TEXT_DOCUMENT_COMPLETION,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    TEXT_DOCUMENT_REFERENCES,
    ReferenceParams,
    WORKSPACE_SYMBOL,
    WorkspaceSymbolParams,
)
from pygls.server import LanguageServer

from kip_lsp import __version__
from kip_lsp.analyzer import AnalysisOptions, analyze
from kip_lsp.cache import DocumentStore
from kip_lsp.completion import compute_completions
from kip_lsp.definition import compute_definition
from kip_lsp.hover import compute_hover
from kip_lsp.references import compute_references
from kip_lsp.semantic_tokens import build_legend, compute_semantic_tokens
from kip_lsp.symbols import compute_document_symbols, compute_workspace_symbols

# Configuração de logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)
_startup_logged = False


class KipLanguageServer(LanguageServer):
    """
    Servidor LSP especializado para Kip.

    Attributes:
        store: Tabelas de símbolos por URI (substituídas a cada análise)
        analysis_options: Limites de profundidade/nós do analisador
        semantic_tokens_enabled: Flag para desabilitar a colorização semântica
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.store: DocumentStore = DocumentStore()
        self.analysis_options: AnalysisOptions = AnalysisOptions()
        self.semantic_tokens_enabled: bool = True


# Instância global do servidor
server = KipLanguageServer("kip-lsp", f"v{__version__}")


def analyze_document(ls: KipLanguageServer, uri: str) -> None:
    """
    Analisa um documento e substitui suas tabelas no store.

    Em caso de erro as tabelas anteriores são mantidas; o servidor segue
    respondendo com o último resultado bom.
    """
    try:
        doc = ls.workspace.get_document(uri)
        tables = analyze(doc.source, ls.analysis_options)
        ls.store.put(uri, tables, getattr(doc, "version", None))
        if tables.truncated:
            logger.info(f"Análise parcial (limite atingido): {uri}")
    except Exception as e:
        logger.error(f"Erro ao analisar {uri}: {e}", exc_info=True)


def parse_settings(settings) -> Tuple[AnalysisOptions, bool]:
    """
    Lê a configuração do cliente.

    Aceita {"kip": {...}} ou a própria seção. Valores inválidos caem
    para o padrão.

    Returns:
        (AnalysisOptions, semantic_tokens_enabled)
    """
    defaults = AnalysisOptions()
    if not isinstance(settings, dict):
        return defaults, True

    kip_config = settings.get("kip", settings)
    if not isinstance(kip_config, dict):
        return defaults, True

    analysis = kip_config.get("analysis", {})
    if not isinstance(analysis, dict):
        analysis = {}

    options = AnalysisOptions(
        max_depth=_positive_int(analysis.get("maxDepth"), defaults.max_depth),
        max_nodes=_positive_int(analysis.get("maxNodes"), defaults.max_nodes),
    )

    semantic = kip_config.get("semanticTokens", {})
    enabled = True
    if isinstance(semantic, dict) and isinstance(semantic.get("enabled"), bool):
        enabled = semantic["enabled"]

    return options, enabled


def _positive_int(value, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


@server.command("kip/getDocumentStats")
def get_document_stats(ls: KipLanguageServer, params) -> dict:
    """
    Retorna contagens de símbolos de um documento analisado.

    params: [{"uri": "..."}] ou {"uri": "..."}
    """
    uri = None
    if isinstance(params, dict):
        uri = params.get("uri")
    elif isinstance(params, list) and params and isinstance(params[0], dict):
        uri = params[0].get("uri")
    if not uri:
        return {"success": False, "error": "URI não informada"}

    tables = ls.store.get_tables(uri)
    if tables is None:
        return {"success": False, "error": "Documento não analisado"}

    return {
        "success": True,
        "stats": {
            "function_count": len(tables.function_details),
            "type_count": len(tables.type_details),
            "constructor_count": len(tables.constructors),
            "variable_count": len(tables.variables),
            "reference_count": len(tables.variable_refs),
        },
        "truncated": tables.truncated,
    }


@server.feature(
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    build_legend(),
)
def semantic_tokens_full(
    ls: KipLanguageServer, params: SemanticTokensParams
) -> SemanticTokens:
    """Tokens semânticos do documento inteiro."""
    return _semantic_tokens(ls, params.text_document.uri)


@server.feature(
    TEXT_DOCUMENT_SEMANTIC_TOKENS_RANGE,
    build_legend(),
)
def semantic_tokens_range(
    ls: KipLanguageServer, params: SemanticTokensRangeParams
) -> SemanticTokens:
    """Tokens semânticos apenas do trecho visível."""
    return _semantic_tokens(ls, params.text_document.uri, params.range)


def _semantic_tokens(ls: KipLanguageServer, uri: str, range_=None) -> SemanticTokens:
    if not ls.semantic_tokens_enabled:
        return SemanticTokens(data=[])
    try:
        doc = ls.workspace.get_document(uri)
        return compute_semantic_tokens(doc.source, ls.store.get_tables(uri), range_)
    except Exception as e:
        logger.error(f"Erro em semanticTokens: {uri}: {e}", exc_info=True)
        return SemanticTokens(data=[])


@server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(ls: KipLanguageServer, params: DocumentSymbolParams) -> list:
    """Outline: tipos (com construtores), funções (com parâmetros) e variáveis."""
    uri = params.text_document.uri
    try:
        return compute_document_symbols(ls.store.get_tables(uri))
    except Exception as e:
        logger.error(f"Erro em documentSymbol: {uri}: {e}", exc_info=True)
        return []


@server.feature(WORKSPACE_SYMBOL)
def workspace_symbol(ls: KipLanguageServer, params: WorkspaceSymbolParams) -> list:
    """Declarações de todos os documentos abertos, filtradas pela query."""
    try:
        return compute_workspace_symbols(ls.store, params.query)
    except Exception as e:
        logger.error(f"Erro em workspace/symbol: {e}", exc_info=True)
        return []


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: KipLanguageServer, params: HoverParams):
    """
    Retorna informação contextual ao passar o mouse.

    Depende do DocumentStore; retorna None se o documento não foi analisado.
    """
    uri = params.text_document.uri
    try:
        doc = ls.workspace.get_document(uri)
        return compute_hover(doc.source, params.position, ls.store.get_tables(uri))
    except Exception as e:
        logger.error(f"Erro em hover: {uri}: {e}", exc_info=True)
        return None


@server.feature(TEXT_DOCUMENT_DEFINITION)
def definition(ls: KipLanguageServer, params: DefinitionParams):
    """Go-to-definition dentro do documento."""
    uri = params.text_document.uri
    try:
        doc = ls.workspace.get_document(uri)
        return compute_definition(
            doc.source, params.position, ls.store.get_tables(uri), uri
        )
    except Exception as e:
        logger.error(f"Erro em definition: {uri}: {e}", exc_info=True)
        return None


@server.feature(TEXT_DOCUMENT_REFERENCES)
def references(ls: KipLanguageServer, params: ReferenceParams):
    """Find All References (inclui formas flexionadas)."""
    uri = params.text_document.uri
    try:
        doc = ls.workspace.get_document(uri)
        return compute_references(
            doc.source, params.position, ls.store.get_tables(uri), uri
        )
    except Exception as e:
        logger.error(f"Erro em references: {uri}: {e}", exc_info=True)
        return []


@server.feature(
    TEXT_DOCUMENT_COMPLETION,
    CompletionOptions(trigger_characters=["-", "'"]),
)
def completion(ls: KipLanguageServer, params: CompletionParams):
    """
    Autocomplete: funções, tipos, construtores, variáveis, palavras-chave
    e sufixos de caso após apóstrofo.
    """
    uri = params.text_document.uri
    try:
        doc = ls.workspace.get_document(uri)

        trigger_char = None
        if params.context:
            trigger_char = getattr(params.context, "trigger_character", None)

        return compute_completions(
            doc.source, params.position, ls.store.get_tables(uri), trigger_char
        )
    except Exception as e:
        logger.error(f"Erro em completion: {uri}: {e}", exc_info=True)
        return CompletionList(is_incomplete=False, items=[])


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: KipLanguageServer, params: DidOpenTextDocumentParams) -> None:
    """Analisa imediatamente quando o usuário abre um arquivo Kip."""
    logger.info(f"Documento aberto: {params.text_document.uri}")
    analyze_document(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: KipLanguageServer, params: DidChangeTextDocumentParams) -> None:
    """Reanalisa o documento inteiro a cada mudança."""
    logger.debug(f"Documento modificado: {params.text_document.uri}")
    analyze_document(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: KipLanguageServer, params: DidCloseTextDocumentParams) -> None:
    """Remove as tabelas do documento fechado."""
    uri = params.text_document.uri
    logger.info(f"Documento fechado: {uri}")
    ls.store.invalidate(uri)


@server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: KipLanguageServer, params: DidChangeConfigurationParams
) -> None:
    """
    Handler para mudanças na configuração do workspace.

    Limites de análise alterados provocam a reanálise de todos os
    documentos em cache.
    """
    try:
        old_options = ls.analysis_options
        ls.analysis_options, ls.semantic_tokens_enabled = parse_settings(params.settings)

        logger.info(
            f"Configuração atualizada: maxDepth={ls.analysis_options.max_depth}, "
            f"maxNodes={ls.analysis_options.max_nodes}, "
            f"semanticTokens.enabled={ls.semantic_tokens_enabled}"
        )

        if ls.analysis_options != old_options:
            logger.info("Limites de análise alterados, reanalisando documentos abertos")
            for uri, _ in list(ls.store.items()):
                analyze_document(ls, uri)

    except Exception as e:
        logger.error(f"Erro ao processar mudança de configuração: {e}", exc_info=True)


def main() -> None:
    """
    Ponto de entrada principal do servidor.

    Inicia servidor LSP em modo STDIO.
    """
    global _startup_logged
    logger.info("Iniciando Kip Language Server...")
    if not _startup_logged:
        _startup_logged = True
        logger.info("Python executable: %s", sys.executable)
        try:
            logger.info("kip-lsp package: %s", metadata.version("kip-lsp"))
        except metadata.PackageNotFoundError:
            logger.info("kip-lsp package: %s (não instalado)", __version__)
    server.start_io()


if __name__ == "__main__":
    main()
