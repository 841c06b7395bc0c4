"""
lexer.py - Tokenizador da linguagem Kip

Propósito:
    Converte o texto-fonte Kip em uma sequência ordenada de tokens.
    Usado pelo parser (a cada versão do documento) e pelo emissor de
    tokens semânticos (a cada requisição de colorização).

Componentes principais:
    - TokenKind: Tipos de token (palavras-chave, literais, pontuação)
    - Token: Token com texto, offset, linha e coluna (0-based)
    - tokenize: Texto → list[Token]
    - KEYWORDS / KEYWORD_KINDS: Tabela de palavras-chave
    - utf16_len / utf16_to_index / index_to_utf16: Conversão de colunas

Notas de implementação:
    - Ordem de tentativa: palavra-chave → float → inteiro com sufixo
      (5'in) → inteiro → dizge → identificador → pontuação
    - Palavras-chave são testadas da mais longa para a mais curta
      ("yerleşiktir" antes de "yerleşik", "doğruysa" antes de "doğru")
    - Palavra-chave só casa se não for seguida de caractere de
      identificador ("doğrusu" é um identificador, não "doğru" + sufixo)
    - Comentários (* ... *) não aninham; comentário sem fechamento não é
      comentário e o "(" vira LParen
    - Caractere desconhecido é pulado (o lexer sempre avança e termina)
    - Colunas são contadas em unidades UTF-16, como as posições LSP;
      offsets (start/end) continuam em code points da string Python
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class TokenKind(str, Enum):
    """Tipos de token Kip."""

    BIR = "Bir"
    YA = "Ya"
    DA = "Da"
    OLABILIR = "Olabilir"
    OLSUN = "Olsun"
    VAR = "Var"
    OLAMAZ = "Olamaz"
    YERLESIK = "Yerlesik"
    YERLESIKTIR = "Yerlesiktir"
    DIYELIM = "Diyelim"
    OLARAK = "Olarak"
    YUKLE = "Yukle"
    ILE = "Ile"
    ISE = "Ise"
    DEGILSE = "Degilse"
    DOGRU = "Dogru"
    YANLIS = "Yanlis"
    DOGRUYSA = "Dogruysa"
    YANLISSA = "Yanlissa"
    YOKLUKSA = "Yokluksa"
    FLOAT = "Float"
    INTEGER_WITH_SUFFIX = "IntegerWithSuffix"
    INTEGER = "Integer"
    STRING = "String"
    IDENT = "Ident"
    DOT = "Dot"
    COMMA = "Comma"
    LPAREN = "LParen"
    RPAREN = "RParen"
    APOSTROPHE = "Apostrophe"


@dataclass(frozen=True)
class Token:
    """Token com posição no texto-fonte (linha e coluna 0-based)."""

    kind: TokenKind
    text: str
    start: int
    line: int
    column: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)


# Ordem importa: mais longa → mais curta
_KEYWORDS_ORDERED: List[Tuple[str, TokenKind]] = [
    ("yerleşiktir", TokenKind.YERLESIKTIR),
    ("yerleşik", TokenKind.YERLESIK),
    ("olabilir", TokenKind.OLABILIR),
    ("değilse", TokenKind.DEGILSE),
    ("doğruysa", TokenKind.DOGRUYSA),
    ("yanlışsa", TokenKind.YANLISSA),
    ("yokluksa", TokenKind.YOKLUKSA),
    ("diyelim", TokenKind.DIYELIM),
    ("olarak", TokenKind.OLARAK),
    ("olamaz", TokenKind.OLAMAZ),
    ("olsun", TokenKind.OLSUN),
    ("yükle", TokenKind.YUKLE),
    ("yanlış", TokenKind.YANLIS),
    ("doğru", TokenKind.DOGRU),
    ("Bir", TokenKind.BIR),
    ("var", TokenKind.VAR),
    ("ile", TokenKind.ILE),
    ("ise", TokenKind.ISE),
    ("ya", TokenKind.YA),
    ("da", TokenKind.DA),
]

KEYWORDS = frozenset(text for text, _ in _KEYWORDS_ORDERED)
KEYWORD_KINDS = frozenset(kind for _, kind in _KEYWORDS_ORDERED)

# Letras aceitas em identificadores e sufixos
LETTERS = "a-zA-ZçğıöşüÇĞİÖŞÜ"

_RE_WHITESPACE = re.compile(r"[ \t\r\n]+")
_RE_COMMENT = re.compile(r"\(\*.*?\*\)", re.DOTALL)
_RE_FLOAT = re.compile(r"-?[0-9]+\.[0-9]+")
_RE_INT_SUFFIX = re.compile(rf"-?[0-9]+'[{LETTERS}]+")
_RE_INT = re.compile(r"-?[0-9]+")
_RE_STRING = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)
_RE_IDENT = re.compile(rf"[{LETTERS}][{LETTERS}0-9\-]*")
_RE_IDENT_CONTINUATION = re.compile(rf"[{LETTERS}0-9\-]")

_LITERAL_PATTERNS: List[Tuple[re.Pattern, TokenKind]] = [
    (_RE_FLOAT, TokenKind.FLOAT),
    (_RE_INT_SUFFIX, TokenKind.INTEGER_WITH_SUFFIX),
    (_RE_INT, TokenKind.INTEGER),
    (_RE_STRING, TokenKind.STRING),
    (_RE_IDENT, TokenKind.IDENT),
]

_PUNCTUATION = {
    ".": TokenKind.DOT,
    ",": TokenKind.COMMA,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "'": TokenKind.APOSTROPHE,
}


def tokenize(source: str) -> List[Token]:
    """
    Divide o texto-fonte em tokens.

    Nunca levanta exceção: caracteres desconhecidos são descartados um a
    um. Linha e coluna são calculadas incrementalmente.
    """
    tokens: List[Token] = []
    pos = 0
    line = 0
    # Coluna (UTF-16) já contada até o offset col_from
    col_from = 0
    col_units = 0
    n = len(source)

    while pos < n:
        skipped_to = _skip_trivia(source, pos)
        if skipped_to != pos:
            line += source.count("\n", pos, skipped_to)
            newline = source.rfind("\n", pos, skipped_to)
            if newline != -1:
                col_from, col_units = newline + 1, 0
            pos = skipped_to
            continue

        column = col_units + utf16_len(source[col_from:pos])
        col_from, col_units = pos, column
        text, kind = _match_token(source, pos)

        if kind is None:
            # Caractere desconhecido: pula sem emitir
            pos += 1
            continue

        tokens.append(Token(kind=kind, text=text, start=pos, line=line, column=column))
        # Dizges podem conter quebras de linha
        newlines = text.count("\n")
        if newlines:
            line += newlines
            col_from, col_units = pos + text.rfind("\n") + 1, 0
        pos += len(text)

    return tokens


def utf16_len(text: str) -> int:
    """Comprimento de text em unidades UTF-16 (caracteres fora do BMP contam 2)."""
    return len(text) + sum(1 for ch in text if ord(ch) > 0xFFFF)


def utf16_to_index(text: str, character: int) -> int:
    """Converte uma coluna UTF-16 em índice da string (limitado a len(text))."""
    units = 0
    for index, ch in enumerate(text):
        if units >= character:
            return index
        units += 2 if ord(ch) > 0xFFFF else 1
    return len(text)


def index_to_utf16(text: str, index: int) -> int:
    """Converte um índice da string em coluna UTF-16."""
    return utf16_len(text[:index])


def _skip_trivia(source: str, pos: int) -> int:
    """Pula espaços e comentários a partir de pos."""
    while True:
        m = _RE_WHITESPACE.match(source, pos) or _RE_COMMENT.match(source, pos)
        if not m:
            return pos
        pos = m.end()


def _match_token(source: str, pos: int):
    """Retorna (texto, kind) do token em pos, ou (None, None)."""
    for keyword, kind in _KEYWORDS_ORDERED:
        if source.startswith(keyword, pos):
            after = pos + len(keyword)
            if after < len(source) and _RE_IDENT_CONTINUATION.match(source[after]):
                continue
            return keyword, kind

    for pattern, kind in _LITERAL_PATTERNS:
        m = pattern.match(source, pos)
        if m:
            return m.group(0), kind

    char = source[pos]
    if char in _PUNCTUATION:
        return char, _PUNCTUATION[char]

    return None, None


def is_name_token(token: Token) -> bool:
    """Identificadores e os literais booleanos podem nomear construtores."""
    return token.kind in (TokenKind.IDENT, TokenKind.DOGRU, TokenKind.YANLIS)
