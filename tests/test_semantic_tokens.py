"""
test_semantic_tokens.py - Testes para colorização semântica

Propósito:
    Validar a classificação de tokens Kip (palavras-chave, literais,
    funções, variáveis, tipos de uma e várias palavras), o filtro por
    range e o encoding delta.
"""

from __future__ import annotations

from lsprotocol.types import Position, Range

from kip_lsp.analyzer import SymbolTables, analyze
from kip_lsp.semantic_tokens import (
    LEGEND,
    TOKEN_TYPES,
    _TK_FUNCTION,
    _TK_KEYWORD,
    _TK_TYPE,
    _encode_deltas,
    compute_semantic_tokens,
)


def _tokens(source, tables=None, range_=None):
    if tables is None:
        tables = analyze(source)
    return compute_semantic_tokens(source, tables, range_).data


def _line_range(line):
    return Range(
        start=Position(line=line, character=0),
        end=Position(line=line, character=200),
    )


def test_legend_order():
    """Índices fixos da legenda."""
    assert LEGEND.token_types == TOKEN_TYPES
    assert TOKEN_TYPES[:6] == ["keyword", "function", "variable", "string", "number", "type"]
    assert _TK_KEYWORD == 0
    assert _TK_TYPE == 5


def test_no_tables():
    """Sem tabelas, nenhum token."""
    assert compute_semantic_tokens("Bir x olsun.", None).data == []


def test_empty_source():
    assert _tokens("") == []


def test_primitive_type_declaration():
    """Bir/yerleşik/olsun são keywords; tam-sayı é tipo."""
    data = _tokens("Bir yerleşik tam-sayı olsun.")
    assert data == [
        0, 0, 3, 0, 0,
        0, 4, 8, 0, 0,
        0, 9, 8, 5, 0,
        0, 9, 5, 0, 0,
    ]


def test_literals():
    """Dizge e números (float, inteiro, inteiro com sufixo)."""
    data = _tokens('"a" 5 5.0 5\'in', SymbolTables())
    assert data == [
        0, 0, 3, 3, 0,
        0, 4, 1, 4, 0,
        0, 2, 3, 4, 0,
        0, 4, 4, 4, 0,
    ]


def test_function_with_suffix():
    """Função conhecida é colorida também flexionada."""
    tables = SymbolTables(functions={"topla"})
    assert _tokens("topla", tables) == [0, 0, 5, _TK_FUNCTION, 0]
    assert _tokens("toplayı", tables) == [0, 0, 7, _TK_FUNCTION, 0]


def test_unknown_identifier_not_emitted():
    assert _tokens("bilinmeyen", SymbolTables()) == []


class TestMultiWordTypes:
    def _tables(self):
        return SymbolTables(types={"öğe listesi", "öğe", "listesi"})

    def test_exact_phrase(self):
        """Frase exata vira um único token."""
        assert _tokens("öğe listesi", self._tables()) == [0, 0, 11, _TK_TYPE, 0]

    def test_phrase_with_suffix(self):
        assert _tokens("öğe listesine", self._tables()) == [0, 0, 13, _TK_TYPE, 0]

    def test_phrase_across_lines_not_joined(self):
        """Palavras em linhas diferentes são tokens separados."""
        data = _tokens("öğe\nlistesi", self._tables())
        assert data == [
            0, 0, 3, _TK_TYPE, 0,
            1, 0, 7, _TK_TYPE, 0,
        ]

    def test_three_word_phrase(self):
        tables = SymbolTables(types={"uzun öğe listesi", "uzun", "öğe", "listesi"})
        assert _tokens("uzun öğe listesi", tables) == [0, 0, 16, _TK_TYPE, 0]

    def test_parameter_header(self):
        """Parâmetro, frase de tipo flexionada e nome da função."""
        source = (
            "Bir öğe listesi ya boş, ya da bir öğenin bir öğe listesine eki olabilir.\n"
            "(bu öğe listesinin) uzunluğu,\n"
            "  bu boşsa, 0.\n"
        )
        data = _tokens(source, range_=_line_range(1))
        assert data == [
            1, 1, 2, 2, 0,
            0, 3, 14, 5, 0,
            0, 16, 8, 1, 0,
        ]


def test_range_filter():
    """Apenas tokens do range pedido."""
    data = _tokens("Bir\nBir\nBir", SymbolTables(), _line_range(1))
    assert data == [1, 0, 3, 0, 0]


def test_multiline_string_first_line_only():
    data = _tokens('"ab\ncd"', SymbolTables())
    assert data == [0, 0, 3, 3, 0]


def test_encode_deltas_sorts():
    """Tokens fora de ordem são ordenados antes do encoding."""
    raw = [(1, 2, 3, 0, 0), (0, 5, 1, 2, 0), (1, 0, 1, 1, 0)]
    assert _encode_deltas(raw) == [
        0, 5, 1, 2, 0,
        1, 0, 1, 1, 0,
        0, 2, 3, 0, 0,
    ]


def test_encode_deltas_empty():
    assert _encode_deltas([]) == []


def test_exact_function_beats_suffixed_type():
    """Nome exato de função vence tipo mais curto seguido de sufixo."""
    tables = SymbolTables(functions={"uzunluğu"}, types={"uzun"})
    assert _tokens("uzunluğu", tables) == [0, 0, 8, _TK_FUNCTION, 0]


def test_suffixed_type_still_classified():
    tables = SymbolTables(functions={"uzunluğu"}, types={"uzun"})
    assert _tokens("uzunu", tables) == [0, 0, 5, _TK_TYPE, 0]


class TestUtf16:
    """Colunas e comprimentos em unidades UTF-16."""

    def test_after_astral_string(self):
        tables = SymbolTables(functions={"topla"})
        assert _tokens('"🎉" topla', tables) == [
            0, 0, 4, 3, 0,
            0, 5, 5, _TK_FUNCTION, 0,
        ]

    def test_range_filter_uses_utf16(self):
        tables = SymbolTables(functions={"topla"})
        range_ = Range(
            start=Position(line=0, character=7), end=Position(line=0, character=12)
        )
        assert _tokens('"🎉🎉" topla', tables, range_) == [0, 7, 5, _TK_FUNCTION, 0]
