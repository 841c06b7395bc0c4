"""
references.py - Find All References para símbolos Kip

Propósito:
    Implementa textDocument/references: todas as ocorrências, no
    documento, do símbolo sob o cursor, inclusive as flexionadas
    ("listeyi", "listenin" para "liste").

LSP Feature:
    textDocument/references → Lista de Location com todas as referências

Notas de implementação:
    - Re-tokeniza o texto: apenas identificadores contam (dizges e
      comentários nunca são referências)
    - Uma ocorrência conta se resolve para o mesmo símbolo que a palavra
      sob o cursor (mesma tolerância a sufixo do hover)
    - Palavra sem símbolo conhecido cai para busca por palavra inteira
"""

from __future__ import annotations

import logging
from typing import List, Optional

from lsprotocol.types import Location, Position, Range

from kip_lsp.analyzer import SymbolTables
from kip_lsp.hover import _get_word_at_position, resolve_identifier
from kip_lsp.lexer import TokenKind, tokenize, utf16_len

logger = logging.getLogger(__name__)


def compute_references(
    source: str, position: Position, tables: Optional[SymbolTables], uri: str
) -> List[Location]:
    """
    Encontra todas as referências ao símbolo sob o cursor.

    Args:
        source: Texto-fonte do documento
        position: Posição do cursor (0-based)
        tables: SymbolTables do DocumentStore
        uri: URI do documento

    Returns:
        Lista de Location em ordem de aparição (vazia se nada encontrado)
    """
    if tables is None:
        return []

    lines = source.split("\n")
    if position.line >= len(lines):
        return []

    word = _get_word_at_position(lines[position.line], position.character)
    if not word:
        return []

    target = resolve_identifier(word, tables)
    locations: List[Location] = []

    for token in tokenize(source):
        if token.kind is not TokenKind.IDENT:
            continue
        if target is None:
            matches = token.text == word
        else:
            matches = resolve_identifier(token.text, tables) == target
        if matches:
            locations.append(_token_location(uri, token.line, token.column, utf16_len(token.text)))

    logger.debug(f"{len(locations)} referências para '{word}' em {uri}")
    return locations


def _token_location(uri: str, line: int, column: int, length: int) -> Location:
    return Location(
        uri=uri,
        range=Range(
            start=Position(line=line, character=column),
            end=Position(line=line, character=column + length),
        ),
    )
