"""
symbols.py - Document symbols (outline) e workspace symbols para Kip

Propósito:
    Converte as declarações registradas pelo analisador em
    DocumentSymbol[] (outline/breadcrumb) e responde workspace/symbol
    sobre todos os documentos abertos.

Mapeamento de declarações Kip → LSP SymbolKind:
    TypeDeclaration    → Class (children: construtores → EnumMember)
    FunctionDefinition → Function (children: parâmetros → Variable)
    VariableDefinition → Variable

Notas de implementação:
    - Sem tabelas, retorna lista vazia (sem crash)
    - Ranges já são 0-based (vêm da AST)
    - Workspace symbols filtram por substring sem diferenciar maiúsculas
      (query vazia retorna tudo)
"""

from __future__ import annotations

import logging
from typing import List, Optional

from lsprotocol.types import DocumentSymbol, Location, SymbolInformation

from kip_lsp.analyzer import DeclarationEntry, SymbolTables
from kip_lsp.cache import DocumentStore

logger = logging.getLogger(__name__)


def compute_document_symbols(tables: Optional[SymbolTables]) -> List[DocumentSymbol]:
    """Outline do documento, na ordem das declarações."""
    if tables is None:
        return []
    return [_to_document_symbol(entry) for entry in tables.declarations]


def _to_document_symbol(entry: DeclarationEntry) -> DocumentSymbol:
    children = [_to_document_symbol(child) for child in entry.children]
    return DocumentSymbol(
        name=entry.name,
        kind=entry.kind,
        range=entry.range,
        selection_range=entry.range,
        detail=entry.detail or None,
        children=children if children else None,
    )


def compute_workspace_symbols(
    store: DocumentStore, query: str
) -> List[SymbolInformation]:
    """
    Declarações de nível superior de todos os documentos analisados.

    Args:
        store: DocumentStore do servidor
        query: Texto digitado pelo usuário (substring, sem caixa)
    """
    needle = (query or "").lower()
    results: List[SymbolInformation] = []

    for uri, cached in store.items():
        for entry in cached.tables.declarations:
            if needle and needle not in entry.name.lower():
                continue
            results.append(
                SymbolInformation(
                    name=entry.name,
                    kind=entry.kind,
                    location=Location(uri=uri, range=entry.range),
                )
            )

    return results
