"""
semantic_tokens.py - Colorização semântica a partir das tabelas de símbolos

Propósito:
    Produz tokens semânticos para o editor colorir código Kip pelo
    significado (tipo, função, variável) em vez de apenas pelo léxico.

Mapeamento de tokens Kip → LSP:
    palavras-chave (Bir, ya, olabilir, doğruysa...)  → Keyword (0)
    nomes de função (com ou sem sufixo de caso)      → Function (1)
    variáveis definidas e referenciadas              → Variable (2)
    dizges                                           → String (3)
    números (5, 5.0, 5'in)                           → Number (4)
    tipos, incluindo frases ("öğe listesi")          → Type (5)

Notas de implementação:
    - Re-tokeniza o texto a cada requisição; as tabelas vêm do cache
    - Legend fixo de 20 tipos e 10 modificadores; só os índices 0–5 são
      emitidos e os modificadores são sempre 0
    - Frases de tipo de 2 ou 3 palavras consomem todos os seus tokens e
      viram um único token semântico (somente na mesma linha)
    - Tolerância a sufixo: o token começa com o nome conhecido e o resto
      tem de 1 a 6 letras (sem validar contra a tabela morfológica)
    - Encoding delta: [deltaLine, deltaStartChar, length, tokenType, tokenModifiers]
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from lsprotocol.types import (
    Range,
    SemanticTokens,
    SemanticTokensLegend,
    SemanticTokenTypes,
    SemanticTokenModifiers,
)

from kip_lsp.analyzer import SymbolTables
from kip_lsp.lexer import KEYWORD_KINDS, Token, TokenKind, tokenize, utf16_len
from kip_lsp.morphology import is_suffix_shaped, match_known_name

logger = logging.getLogger(__name__)

# Tipos de tokens do legend (a ordem é o contrato com o cliente)
TOKEN_TYPES: List[str] = [
    SemanticTokenTypes.Keyword.value,        # 0
    SemanticTokenTypes.Function.value,       # 1
    SemanticTokenTypes.Variable.value,       # 2
    SemanticTokenTypes.String.value,         # 3
    SemanticTokenTypes.Number.value,         # 4
    SemanticTokenTypes.Type.value,           # 5
    SemanticTokenTypes.Operator.value,       # 6
    SemanticTokenTypes.Property.value,       # 7
    SemanticTokenTypes.EnumMember.value,     # 8
    SemanticTokenTypes.Event.value,          # 9
    SemanticTokenTypes.Modifier.value,       # 10
    SemanticTokenTypes.Class.value,          # 11
    SemanticTokenTypes.Interface.value,      # 12
    SemanticTokenTypes.Namespace.value,      # 13
    SemanticTokenTypes.Parameter.value,      # 14
    SemanticTokenTypes.Comment.value,        # 15
    SemanticTokenTypes.Enum.value,           # 16
    SemanticTokenTypes.Struct.value,         # 17
    SemanticTokenTypes.TypeParameter.value,  # 18
    SemanticTokenTypes.Decorator.value,      # 19
]

TOKEN_MODIFIERS: List[str] = [
    SemanticTokenModifiers.Declaration.value,
    SemanticTokenModifiers.Definition.value,
    SemanticTokenModifiers.Readonly.value,
    SemanticTokenModifiers.Static.value,
    SemanticTokenModifiers.Deprecated.value,
    SemanticTokenModifiers.Abstract.value,
    SemanticTokenModifiers.Async.value,
    SemanticTokenModifiers.Modification.value,
    SemanticTokenModifiers.Documentation.value,
    SemanticTokenModifiers.DefaultLibrary.value,
]


def build_legend() -> SemanticTokensLegend:
    """Cria uma instância fresca do legend para evitar mutações acidentais."""
    return SemanticTokensLegend(
        token_types=list(TOKEN_TYPES),
        token_modifiers=list(TOKEN_MODIFIERS),
    )


LEGEND = build_legend()

# Índices dos tipos (ordem em TOKEN_TYPES)
_TK_KEYWORD = 0
_TK_FUNCTION = 1
_TK_VARIABLE = 2
_TK_STRING = 3
_TK_NUMBER = 4
_TK_TYPE = 5

_NUMBER_KINDS = {TokenKind.FLOAT, TokenKind.INTEGER, TokenKind.INTEGER_WITH_SUFFIX}

# RawToken: (line_0based, col_0based, length, token_type_index, modifier_bitmask)
RawToken = Tuple[int, int, int, int, int]


def compute_semantic_tokens(
    source: str,
    tables: Optional[SymbolTables],
    range_: Optional[Range] = None,
) -> SemanticTokens:
    """
    Computa tokens semânticos para um documento Kip.

    Args:
        source: Texto atual do documento
        tables: Tabelas da última análise (None → sem tokens)
        range_: Se informado, apenas tokens que tocam o range são emitidos
    """
    if tables is None:
        return SemanticTokens(data=[])

    tokens = _classify_tokens(tokenize(source), tables, range_)
    return SemanticTokens(data=_encode_deltas(tokens))


def _optional_suffix(remainder: str) -> bool:
    return not remainder or is_suffix_shaped(remainder)


def _in_range(token: Token, range_: Optional[Range]) -> bool:
    if range_ is None:
        return True
    if token.line < range_.start.line or token.line > range_.end.line:
        return False
    if token.line == range_.start.line and token.column + utf16_len(token.text) < range_.start.character:
        return False
    if token.line == range_.end.line and token.column > range_.end.character:
        return False
    return True


def _ident_run(tokens: List[Token], i: int, size: int) -> Optional[List[Token]]:
    """size identificadores consecutivos a partir de i, todos na mesma linha."""
    run = tokens[i:i + size]
    if len(run) < size:
        return None
    if any(t.kind is not TokenKind.IDENT or t.line != run[0].line for t in run):
        return None
    return run


def _phrase_length(run: List[Token]) -> int:
    return run[-1].column + utf16_len(run[-1].text) - run[0].column


def _match_type_phrase(
    tokens: List[Token], i: int, tables: SymbolTables
) -> Optional[List[Token]]:
    """Tokens consumidos por uma frase de tipo começando em i, ou None."""
    phrases = tables.multi_word_types
    if not phrases:
        return None

    pair = _ident_run(tokens, i, 2)
    if pair and f"{pair[0].text} {pair[1].text}" in phrases:
        return pair

    triple = _ident_run(tokens, i, 3)
    if triple and " ".join(t.text for t in triple) in phrases:
        return triple

    if pair:
        first, second = pair[0].text, pair[1].text
        for phrase in sorted(phrases):
            head, rest = phrase.split(" ", 1)
            if not first.startswith(head) or not second.startswith(rest):
                continue
            if _optional_suffix(first[len(head):]) and _optional_suffix(second[len(rest):]):
                return pair

    return None


def _classify_ident(text: str, tables: SymbolTables) -> Optional[int]:
    """Nome exato em qualquer tabela vence um nome mais curto com sufixo."""
    candidates = [
        (tables.single_word_types, _TK_TYPE),
        (tables.functions, _TK_FUNCTION),
        (tables.all_variables, _TK_VARIABLE),
    ]
    for names, token_type in candidates:
        if text in names:
            return token_type
    for names, token_type in candidates:
        if match_known_name(text, names):
            return token_type
    return None


def _classify_tokens(
    tokens: List[Token], tables: SymbolTables, range_: Optional[Range]
) -> List[RawToken]:
    """Classifica cada token ainda não consumido por uma frase de tipo."""
    raw: List[RawToken] = []
    consumed = set()

    for i, token in enumerate(tokens):
        if i in consumed or not _in_range(token, range_):
            continue

        # Dizges multilinha são coloridas só na primeira linha
        length = utf16_len(token.text.split("\n", 1)[0])
        token_type: Optional[int] = None

        if token.kind in KEYWORD_KINDS:
            token_type = _TK_KEYWORD
        elif token.kind is TokenKind.STRING:
            token_type = _TK_STRING
        elif token.kind in _NUMBER_KINDS:
            token_type = _TK_NUMBER
        elif token.kind is TokenKind.IDENT:
            phrase = _match_type_phrase(tokens, i, tables)
            if phrase is not None:
                token_type = _TK_TYPE
                length = _phrase_length(phrase)
                consumed.update(range(i, i + len(phrase)))
            else:
                token_type = _classify_ident(token.text, tables)

        if token_type is not None:
            raw.append((token.line, token.column, length, token_type, 0))

    return raw


def _encode_deltas(tokens: List[RawToken]) -> List[int]:
    """
    Ordena tokens por posição e codifica em formato delta LSP.

    Formato: [deltaLine, deltaStartChar, length, tokenType, tokenModifiers]
    Cada token é relativo ao anterior.
    """
    if not tokens:
        return []

    tokens.sort(key=lambda t: (t[0], t[1]))

    data: List[int] = []
    prev_line = 0
    prev_col = 0

    for line, col, length, token_type, modifiers in tokens:
        delta_line = line - prev_line
        delta_col = col - prev_col if delta_line == 0 else col

        data.extend([delta_line, delta_col, length, token_type, modifiers])

        prev_line = line
        prev_col = col

    return data
