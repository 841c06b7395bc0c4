"""
test_lexer.py - Testes para a tokenização de fontes Kip

Propósito:
    Validar palavras-chave, literais, identificadores com hífen,
    comentários aninhados em espaço em branco e posições linha/coluna.
"""

from __future__ import annotations

from kip_lsp.lexer import (
    KEYWORDS,
    TokenKind,
    index_to_utf16,
    is_name_token,
    tokenize,
    utf16_len,
    utf16_to_index,
)


def _kinds(source):
    return [t.kind for t in tokenize(source)]


def test_empty_source():
    """Fonte vazio não produz tokens."""
    assert tokenize("") == []


def test_type_declaration_keywords():
    """Palavras-chave de declaração de tipo."""
    kinds = _kinds("Bir yerleşik tam-sayı olsun.")
    assert kinds == [
        TokenKind.BIR,
        TokenKind.YERLESIK,
        TokenKind.IDENT,
        TokenKind.OLSUN,
        TokenKind.DOT,
    ]


def test_keyword_prefix_is_identifier():
    """Palavra que apenas começa com palavra-chave é identificador."""
    tokens = tokenize("doğrusu Birleşim")
    assert [t.kind for t in tokens] == [TokenKind.IDENT, TokenKind.IDENT]
    assert tokens[0].text == "doğrusu"
    assert tokens[1].text == "Birleşim"


def test_keywords_are_case_sensitive():
    """'Bir' é palavra-chave; 'bir' é identificador."""
    tokens = tokenize("Bir bir")
    assert tokens[0].kind is TokenKind.BIR
    assert tokens[1].kind is TokenKind.IDENT


def test_conditional_keywords():
    """doğruysa/yanlışsa/yokluksa/değilse são palavras-chave próprias."""
    kinds = _kinds("doğruysa yanlışsa yokluksa değilse")
    assert kinds == [
        TokenKind.DOGRUYSA,
        TokenKind.YANLISSA,
        TokenKind.YOKLUKSA,
        TokenKind.DEGILSE,
    ]


def test_yerlesiktir_before_yerlesik():
    """'yerleşiktir' não é lido como 'yerleşik' + sufixo."""
    tokens = tokenize("yerleşiktir yerleşik")
    assert tokens[0].kind is TokenKind.YERLESIKTIR
    assert tokens[1].kind is TokenKind.YERLESIK


def test_number_literals():
    """Float, inteiro com sufixo e inteiro."""
    tokens = tokenize("5.0 5'in 5 -5")
    assert [t.kind for t in tokens] == [
        TokenKind.FLOAT,
        TokenKind.INTEGER_WITH_SUFFIX,
        TokenKind.INTEGER,
        TokenKind.INTEGER,
    ]
    assert tokens[1].text == "5'in"
    assert tokens[3].text == "-5"


def test_hyphenated_identifier():
    """Hífen faz parte do identificador."""
    tokens = tokenize("tam-sayı")
    assert len(tokens) == 1
    assert tokens[0].kind is TokenKind.IDENT
    assert tokens[0].text == "tam-sayı"


def test_string_with_escape():
    """Dizge com aspas escapadas é um único token."""
    tokens = tokenize(r'"a\"b" x')
    assert tokens[0].kind is TokenKind.STRING
    assert tokens[0].text == r'"a\"b"'
    assert tokens[1].text == "x"


def test_comment_is_skipped():
    """Comentário (* ... *) é descartado e a coluna continua correta."""
    tokens = tokenize("(* yorum *) 5")
    assert len(tokens) == 1
    assert tokens[0].kind is TokenKind.INTEGER
    assert tokens[0].column == 12


def test_unterminated_comment():
    """Comentário sem fechamento vira parêntese + identificador."""
    kinds = _kinds("(* abc")
    assert kinds == [TokenKind.LPAREN, TokenKind.IDENT]


def test_unknown_character_dropped():
    """Caractere desconhecido é pulado sem erro."""
    tokens = tokenize("@x")
    assert len(tokens) == 1
    assert tokens[0].text == "x"
    assert tokens[0].column == 1


def test_line_and_column():
    """Linha e coluna 0-based após quebra de linha."""
    tokens = tokenize("Bir\n  ev")
    assert tokens[1].line == 1
    assert tokens[1].column == 2


def test_multiline_string_positions():
    """Token após dizge multilinha tem linha e coluna corretas."""
    tokens = tokenize('"a\nb" x')
    assert tokens[0].kind is TokenKind.STRING
    assert tokens[1].line == 1
    assert tokens[1].column == 3


def test_token_end_offset():
    """end = start + len(text)."""
    tokens = tokenize("ab cd")
    assert tokens[1].start == 3
    assert tokens[1].end == 5


def test_punctuation():
    """Pontuação: parênteses, vírgula, ponto e apóstrofo."""
    kinds = _kinds("( ) , . '")
    assert kinds == [
        TokenKind.LPAREN,
        TokenKind.RPAREN,
        TokenKind.COMMA,
        TokenKind.DOT,
        TokenKind.APOSTROPHE,
    ]


def test_is_name_token():
    """Identificadores e literais booleanos podem nomear construtores."""
    tokens = tokenize("ev doğru yanlış 5")
    assert [is_name_token(t) for t in tokens] == [True, True, True, False]


def test_keywords_set():
    assert "Bir" in KEYWORDS
    assert "diyelim" in KEYWORDS
    assert "bir" not in KEYWORDS


class TestUtf16Columns:
    """Colunas seguem as unidades UTF-16 das posições LSP."""

    def test_column_after_astral_string(self):
        tokens = tokenize('"🎉" topla')
        assert tokens[1].text == "topla"
        assert tokens[1].column == 5
        assert tokens[1].start == 4

    def test_column_after_comment(self):
        tokens = tokenize("(* 🎉 *) x")
        assert tokens[0].column == 9

    def test_column_resets_on_new_line(self):
        tokens = tokenize('"🎉🎉"\nx')
        assert (tokens[1].line, tokens[1].column) == (1, 0)

    def test_bmp_letters_count_once(self):
        tokens = tokenize("öğe şu")
        assert tokens[1].column == 4

    def test_conversions(self):
        line = '"🎉" topla'
        assert utf16_len(line) == 10
        assert utf16_to_index(line, 5) == 4
        assert utf16_to_index(line, 99) == len(line)
        assert index_to_utf16(line, 4) == 5
