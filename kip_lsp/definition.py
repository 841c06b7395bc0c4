"""
definition.py - Go-to-definition para funções, tipos, construtores e variáveis

Propósito:
    Resolve a declaração do símbolo sob o cursor no próprio documento:
    - função     → FunctionDefinition (também pela grafia -mak/-mek)
    - tipo       → TypeDeclaration (palavra ou frase completa)
    - construtor → TypeConstructor dentro da declaração do tipo
    - variável   → VariableDefinition (diyelim)
    - parâmetro  → parâmetro da função que contém o cursor

Notas de implementação:
    - Depende do DocumentStore; sem tabelas retorna None
    - Reutiliza _get_word_at_position e resolve_identifier do hover.py
    - Kip não tem imports entre arquivos: a definição está sempre no
      mesmo URI
"""

from __future__ import annotations

import logging
from typing import Optional

from lsprotocol.types import Location, Position, Range, SymbolKind

from kip_lsp.analyzer import SymbolTables
from kip_lsp.hover import _get_word_at_position, resolve_identifier
from kip_lsp.morphology import match_known_name

logger = logging.getLogger(__name__)


def compute_definition(
    source: str, position: Position, tables: Optional[SymbolTables], uri: str
) -> Optional[Location]:
    """
    Resolve definição do identificador sob o cursor.

    Args:
        source: Texto-fonte do documento
        position: Posição do cursor (0-based)
        tables: SymbolTables do DocumentStore
        uri: URI do documento

    Returns:
        Location apontando para a declaração, ou None
    """
    lines = source.split("\n")
    if position.line >= len(lines):
        return None

    word = _get_word_at_position(lines[position.line], position.character)
    if not word or tables is None:
        return None

    target = _find_declaration_range(word, position, tables)
    if target is None:
        return None
    return Location(uri=uri, range=target)


def _find_declaration_range(
    word: str, position: Position, tables: SymbolTables
) -> Optional[Range]:
    parameter = _find_parameter(word, position, tables)
    if parameter is not None:
        return parameter

    resolved = resolve_identifier(word, tables)
    if resolved is None:
        return None

    if resolved.kind == "function":
        found = tables.lookup_function(resolved.name)
        return found[1].range if found else None

    if resolved.kind == "type":
        detail = tables.type_details.get(resolved.name)
        return detail.range if detail else None

    if resolved.kind == "constructor":
        owner = tables.constructor_types.get(resolved.name)
        for entry in tables.declarations:
            if entry.name != owner:
                continue
            for child in entry.children:
                if child.name == resolved.name:
                    return child.range
        return None

    if resolved.kind == "variable":
        detail = tables.variable_details.get(resolved.name)
        return detail.range if detail else None

    return None


def _find_parameter(
    word: str, position: Position, tables: SymbolTables
) -> Optional[Range]:
    """Parâmetro da função cujo range contém o cursor."""
    for entry in tables.declarations:
        if entry.kind != SymbolKind.Function or not _contains(entry.range, position):
            continue
        names = {child.name: child for child in entry.children}
        name = match_known_name(word, names)
        if name:
            return names[name].range
    return None


def _contains(range_: Range, position: Position) -> bool:
    start = (range_.start.line, range_.start.character)
    end = (range_.end.line, range_.end.character)
    return start <= (position.line, position.character) <= end
