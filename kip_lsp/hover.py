"""
hover.py - Informação contextual ao passar o mouse (textDocument/hover)

Propósito:
    Mostra ao usuário o que é o identificador sob o cursor, mesmo quando
    escrito com sufixo de caso ("toplamını" → função "toplamı").

Mapeamento de hover:
    função      → parâmetros, forma gerúndio, exemplo de chamada
    tipo        → frase completa, tipo (primitivo/vazio/união), construtores
    construtor  → tipo ao qual pertence, parâmetros
    variável    → definida no arquivo ou apenas referenciada
    embutido    → assinatura, descrição e exemplo (builtins.py)
    palavra-chave → descrição

Notas de implementação:
    - Depende do DocumentStore; sem tabelas retorna None
    - _get_word_range / _get_word_at_position extraem a palavra sob o
      cursor (letras, dígitos e hífen) e são reutilizadas por definition
      e references
    - resolve_identifier aplica a mesma tolerância a sufixo do emissor
      de tokens semânticos
    - Conteúdo em Markdown (MarkupContent), textos em turco
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple, Optional, Tuple

from lsprotocol.types import Hover, MarkupContent, MarkupKind, Position, Range

from kip_lsp.analyzer import SymbolTables
from kip_lsp.builtins import BUILTINS
from kip_lsp.lexer import index_to_utf16, utf16_len, utf16_to_index
from kip_lsp.morphology import match_known_name

logger = logging.getLogger(__name__)

# Caracteres válidos em palavras Kip (inclui hífen: tam-sayı)
_WORD_CHARS = re.compile(r"[^\W_]|-")


class ResolvedIdentifier(NamedTuple):
    """Símbolo ao qual uma palavra do texto se refere."""

    name: str
    kind: str  # function | type | constructor | variable | builtin | keyword


def compute_hover(
    source: str, position: Position, tables: Optional[SymbolTables]
) -> Optional[Hover]:
    """
    Computa hover baseado na posição do cursor.

    Args:
        source: Texto-fonte do documento
        position: Posição do cursor (0-based)
        tables: SymbolTables do DocumentStore (pode ser None)

    Returns:
        Hover com MarkupContent ou None se nada encontrado
    """
    if tables is None:
        return None

    lines = source.split("\n")
    if position.line >= len(lines):
        return None

    line = lines[position.line]
    indices = _word_span(line, position.character)
    if indices is None:
        return None

    word = line[indices[0]:indices[1]]
    span = (index_to_utf16(line, indices[0]), index_to_utf16(line, indices[1]))
    resolved = resolve_identifier(word, tables)
    if resolved is None:
        return None

    md = _render(resolved, tables)
    if not md:
        return None

    return Hover(
        contents=MarkupContent(kind=MarkupKind.Markdown, value=md),
        range=Range(
            start=Position(line=position.line, character=span[0]),
            end=Position(line=position.line, character=span[1]),
        ),
    )


def resolve_identifier(word: str, tables: SymbolTables) -> Optional[ResolvedIdentifier]:
    """
    Descobre a qual símbolo a palavra se refere.

    Ordem: palavras-chave (somente exatas; nunca são identificadores),
    funções, tipos, construtores, variáveis (definidas ou referenciadas)
    e por fim embutidos. Um nome exato em qualquer tabela vence antes de
    se tentar a tolerância a sufixo.
    """
    if word in tables.keywords:
        return ResolvedIdentifier(word, "keyword")

    # Chamadas a embutidos também aparecem em variable_refs
    variables = tables.variables | (tables.variable_refs - BUILTINS.keys())
    candidates = [
        (tables.functions, "function"),
        (tables.types, "type"),
        (tables.constructors, "constructor"),
        (variables, "variable"),
        (BUILTINS, "builtin"),
    ]
    for names, kind in candidates:
        if word in names:
            return _resolved(word, kind, tables)
    for names, kind in candidates:
        name = match_known_name(word, names)
        if name:
            return _resolved(name, kind, tables)

    return None


def _resolved(name: str, kind: str, tables: SymbolTables) -> ResolvedIdentifier:
    if kind == "type":
        name = tables.type_phrases.get(name, name)
    return ResolvedIdentifier(name, kind)


def _render(resolved: ResolvedIdentifier, tables: SymbolTables) -> str:
    if resolved.kind == "function":
        return _hover_function(resolved.name, tables)
    if resolved.kind == "type":
        return _hover_type(resolved.name, tables)
    if resolved.kind == "constructor":
        return _hover_constructor(resolved.name, tables)
    if resolved.kind == "variable":
        return _hover_variable(resolved.name, tables)
    return _hover_builtin(resolved.name)


def _hover_function(name: str, tables: SymbolTables) -> str:
    detail = None
    found = tables.lookup_function(name)
    if found is not None:
        name, detail = found

    md = f"### Fonksiyon: `{name}`\n\n"
    params = "argümanlar"
    if detail:
        if detail.parameters:
            described = [
                f"{p} ({t})" if t else p
                for p, t in zip(detail.parameters, detail.parameter_types)
            ]
            md += f"**Parametreler:** {', '.join(described)}\n\n"
            params = " ".join(detail.parameters)
        if detail.is_gerund:
            md += "**Tip:** Gerund (fiilimsi)\n\n"
        if detail.is_builtin:
            md += "**Yerleşik:** gövdesi derleyicide tanımlı\n\n"

    if name in BUILTINS:
        md += f"{BUILTINS[name].description}\n\n"

    md += f"**Kullanım Örneği:**\n```kip\n({params}) {name},\n```"
    return md


def _hover_type(name: str, tables: SymbolTables) -> str:
    detail = tables.type_details.get(name)
    md = f"### Tip: `{name}`\n\n"
    if detail is None:
        return md.rstrip()

    kinds = {"primitive": "yerleşik", "empty": "boş (değersiz)", "union": "birleşim"}
    md += f"**Tür:** {kinds.get(detail.kind, detail.kind)}\n\n"
    if detail.constructors:
        md += f"**Yapıcılar:** {', '.join(detail.constructors)}\n\n"
        alternatives = ",\n  ya da ".join(detail.constructors)
        md += f"**Tanım:**\n```kip\nBir {name}\n  ya {alternatives}\nolabilir.\n```"
    return md.rstrip()


def _hover_constructor(name: str, tables: SymbolTables) -> str:
    owner = tables.constructor_types.get(name, "")
    md = f"### Yapıcı: `{name}`\n\n"
    if owner:
        md += f"**Tip:** `{owner}`"
    for entry in tables.declarations:
        if entry.name != owner:
            continue
        for child in entry.children:
            if child.name == name and child.detail:
                md += f"\n\n**Parametreler:** {child.detail}"
    return md.rstrip()


def _hover_variable(name: str, tables: SymbolTables) -> str:
    md = f"### Değişken: `{name}`\n\n"
    if name in tables.variables:
        md += "**Tanım:** Bu değişken bu dosyada tanımlanmıştır.\n\n"
    else:
        md += "**Referans:** Bu değişkene bir referans.\n\n"
    md += f"**Kullanım Örneği:**\n```kip\n... {name} diyelim.\n```"
    return md


def _hover_builtin(name: str) -> str:
    doc = BUILTINS.get(name)
    if doc is None:
        return f"### Anahtar kelime: `{name}`"

    title = "Anahtar kelime" if doc.category == "keyword" else "Yerleşik"
    md = f"### {title}: `{name}`\n\n"
    md += f"`{doc.signature}`\n\n"
    md += f"{doc.description}\n\n"
    md += f"**Örnek:**\n```kip\n{doc.example}\n```"
    return md


def _get_word_range(line: str, character: int) -> Optional[Tuple[int, int]]:
    """
    Intervalo [início, fim) da palavra sob o cursor, em colunas UTF-16.

    Aceita o cursor logo após a palavra (fim de identificador).
    """
    indices = _word_span(line, character)
    if indices is None:
        return None
    return index_to_utf16(line, indices[0]), index_to_utf16(line, indices[1])


def _word_span(line: str, character: int) -> Optional[Tuple[int, int]]:
    """Como _get_word_range, mas em índices da string."""
    if character > utf16_len(line):
        return None

    character = utf16_to_index(line, character)
    start = character
    while start > 0 and _WORD_CHARS.match(line[start - 1]):
        start -= 1

    end = character
    while end < len(line) and _WORD_CHARS.match(line[end]):
        end += 1

    if start == end:
        return None
    return start, end


def _get_word_at_position(line: str, character: int) -> Optional[str]:
    """Extrai a palavra na posição do cursor."""
    indices = _word_span(line, character)
    if indices is None:
        return None
    return line[indices[0]:indices[1]]
