"""
completion.py - Autocomplete para funções, tipos, variáveis e sufixos

Propósito:
    Fornece sugestões de completamento a partir das tabelas de símbolos
    do documento:
    - Funções declaradas e embutidas
    - Tipos (frases completas e palavras) e seus construtores
    - Variáveis definidas com diyelim
    - Palavras-chave
    - Após apóstrofo (5'|, "x"'|): sufixos de caso

Notas de implementação:
    - Depende do DocumentStore; sem tabelas, retorna lista vazia
    - trigger_char="'" ou cursor logo após "'" ativa sugestões de sufixo
    - Um rótulo aparece uma única vez (o primeiro grupo que o oferece vence)
    - CompletionItemKind: Function, Class, EnumMember, Variable, Keyword, Text
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    Position,
)

from kip_lsp.analyzer import SymbolTables
from kip_lsp.builtins import BUILTIN_FUNCTIONS, BUILTINS
from kip_lsp.lexer import utf16_to_index
from kip_lsp.morphology import CASE_SUFFIXES

logger = logging.getLogger(__name__)


def compute_completions(
    source: str,
    position: Position,
    tables: Optional[SymbolTables],
    trigger_char: Optional[str] = None,
) -> CompletionList:
    """
    Computa lista de completamento.

    Args:
        source: Texto-fonte do documento
        position: Posição do cursor (0-based)
        tables: SymbolTables do DocumentStore
        trigger_char: Caractere que disparou o completion (ex: "'")

    Returns:
        CompletionList com sugestões contextuais
    """
    if tables is None:
        return CompletionList(is_incomplete=False, items=[])

    lines = source.split("\n")
    line = lines[position.line] if position.line < len(lines) else ""

    if trigger_char == "'" or _is_after_apostrophe(line, position.character):
        return CompletionList(is_incomplete=False, items=_suffix_items())

    items: List[CompletionItem] = []
    seen: Set[str] = set()

    def add(item: CompletionItem) -> None:
        if item.label not in seen:
            seen.add(item.label)
            items.append(item)

    for name in sorted(tables.functions):
        detail = tables.function_details.get(name)
        params = ", ".join(detail.parameters) if detail else ""
        add(
            CompletionItem(
                label=name,
                kind=CompletionItemKind.Function,
                detail=f"({params}) {name}" if params else name,
            )
        )

    for name in sorted(BUILTIN_FUNCTIONS):
        doc = BUILTINS[name]
        add(
            CompletionItem(
                label=name,
                kind=CompletionItemKind.Function,
                detail=doc.signature,
                documentation=doc.description,
            )
        )

    for name in sorted(tables.types):
        full = tables.type_phrases.get(name, name)
        add(
            CompletionItem(
                label=name,
                kind=CompletionItemKind.Class,
                detail=f"Tip ({full})" if full != name else "Tip",
            )
        )

    for name in sorted(tables.constructors):
        add(
            CompletionItem(
                label=name,
                kind=CompletionItemKind.EnumMember,
                detail=f"Yapıcı ({tables.constructor_types.get(name, '?')})",
            )
        )

    for name in sorted(tables.variables):
        add(
            CompletionItem(
                label=name,
                kind=CompletionItemKind.Variable,
                detail="Değişken",
            )
        )

    for keyword in sorted(tables.keywords):
        add(CompletionItem(label=keyword, kind=CompletionItemKind.Keyword))

    return CompletionList(is_incomplete=False, items=items)


def _suffix_items() -> List[CompletionItem]:
    """Um item por sufixo de caso, com o caso como detalhe."""
    items = []
    seen = set()
    for suffix, case in CASE_SUFFIXES:
        if suffix in seen:
            continue
        seen.add(suffix)
        items.append(
            CompletionItem(
                label=suffix,
                kind=CompletionItemKind.Text,
                detail=case.value,
                sort_text=f"{len(suffix)}{suffix}",
            )
        )
    return items


def _is_after_apostrophe(line: str, character: int) -> bool:
    """Verifica se o cursor está em um sufixo iniciado por "'"."""
    if character <= 0:
        return False
    prefix = line[:utf16_to_index(line, character)]
    for i in range(len(prefix) - 1, -1, -1):
        ch = prefix[i]
        if ch == "'":
            return True
        if not ch.isalpha():
            return False
    return False
