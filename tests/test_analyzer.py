"""
test_analyzer.py - Testes para as tabelas de símbolos

Propósito:
    Validar o registro de tipos (frase + palavras), funções (incluindo a
    grafia -mak/-mek dos gerúndios), variáveis, referências, declarações
    de outline e os limites de profundidade/nós do percurso.
"""

from __future__ import annotations

from lsprotocol.types import Position, Range, SymbolKind

from kip_lsp.analyzer import (
    AnalysisOptions,
    SymbolTables,
    analyze,
    build_symbol_tables,
    gerund_spelling,
)
from kip_lsp.nodes import FunctionCall, Literal, Program, VariableReference


LIST_LENGTH = (
    "Bir öğe listesi ya boş, ya da bir öğenin bir öğe listesine eki olabilir.\n"
    "(bu öğe listesinin) uzunluğu,\n"
    "  bu boşsa, 0,\n"
    "  ilkin devamın ekiyse, (devamın uzunluğuyla 1'in toplamı).\n"
)

_R = Range(start=Position(line=0, character=0), end=Position(line=0, character=1))


def _nested_call(depth):
    """f(f(f(...x)))"""
    expr = VariableReference(name="x", range=_R)
    for _ in range(depth):
        expr = FunctionCall(function_name="f", arguments=[expr], range=_R)
    return expr


class TestTypes:
    def test_phrase_and_parts_registered(self):
        tables = analyze(LIST_LENGTH)
        assert {"öğe listesi", "öğe", "listesi"} <= tables.types
        assert tables.type_phrases["listesi"] == "öğe listesi"
        assert tables.multi_word_types == {"öğe listesi"}

    def test_every_part_of_phrase_is_type(self):
        tables = analyze(LIST_LENGTH)
        for phrase in tables.multi_word_types:
            for part in phrase.split(" "):
                assert part in tables.types

    def test_constructors(self):
        tables = analyze(LIST_LENGTH)
        assert tables.constructors == {"boş", "eki"}
        assert tables.constructor_types["eki"] == "öğe listesi"
        assert tables.type_details["öğe listesi"].constructors == ["boş", "eki"]
        assert tables.type_details["öğe listesi"].kind == "union"


class TestFunctions:
    def test_function_details(self):
        tables = analyze(LIST_LENGTH)
        assert "uzunluğu" in tables.functions
        detail = tables.function_details["uzunluğu"]
        assert detail.parameters == ["bu"]
        assert detail.parameter_types == ["öğe listesi"]
        assert not detail.is_gerund
        assert not detail.is_builtin

    def test_gerund_spelling_registered(self):
        tables = analyze('selamlamak,\n  "Merhaba"yı yazmak.')
        assert {"selamla", "selamlamak"} <= tables.functions
        assert tables.function_details["selamla"].is_gerund

    def test_gerund_spelling_harmony(self):
        assert gerund_spelling("topla") == "toplamak"
        assert gerund_spelling("göster") == "göstermek"

    def test_builtin_function(self):
        tables = analyze("(bu tam-sayıyla) (şu tam-sayının) toplamı yerleşiktir.")
        assert tables.function_details["toplamı"].is_builtin


class TestReferences:
    def test_parameters_and_body_names(self):
        tables = analyze(LIST_LENGTH)
        assert {"bu", "boş", "eki", "ilk", "devam", "toplamı", "uzunluğu"} <= tables.variable_refs

    def test_variable_definition(self):
        tables = analyze("sıfırın ardılına bir diyelim.")
        assert tables.variables == {"bir"}
        assert "bir" in tables.variable_details
        assert "sıfır" in tables.variable_refs
        assert tables.all_variables >= {"bir", "sıfır"}


class TestInvariants:
    def test_detail_keys_subset_of_sets(self):
        tables = analyze(LIST_LENGTH + "x diyelim.\n")
        assert set(tables.function_details) <= tables.functions
        assert set(tables.type_details) <= tables.types
        assert set(tables.variable_details) <= tables.variables

    def test_idempotent(self):
        """Mesmo texto produz tabelas iguais."""
        assert analyze(LIST_LENGTH) == analyze(LIST_LENGTH)

    def test_keywords_always_present(self):
        tables = analyze("")
        assert "Bir" in tables.keywords
        assert "diyelim" in tables.keywords


class TestDeclarations:
    def test_outline_entries(self):
        tables = analyze(LIST_LENGTH)
        names = [(d.name, d.kind) for d in tables.declarations]
        assert names == [
            ("öğe listesi", SymbolKind.Class),
            ("uzunluğu", SymbolKind.Function),
        ]

        type_entry, fn_entry = tables.declarations
        assert [c.name for c in type_entry.children] == ["boş", "eki"]
        assert type_entry.children[1].detail == "öğe, öğe listesi"
        assert type_entry.children[0].kind == SymbolKind.EnumMember

        assert [c.name for c in fn_entry.children] == ["bu"]
        assert fn_entry.children[0].detail == "öğe listesi"


class TestLimits:
    def test_max_depth_truncates_walk(self):
        program = Program(range=_R, expressions=[_nested_call(5)])
        tables = build_symbol_tables(program, AnalysisOptions(max_depth=2))
        assert tables.truncated
        assert "f" in tables.variable_refs
        assert "x" not in tables.variable_refs

    def test_within_depth(self):
        program = Program(range=_R, expressions=[_nested_call(5)])
        tables = build_symbol_tables(program, AnalysisOptions(max_depth=10))
        assert not tables.truncated
        assert "x" in tables.variable_refs

    def test_max_nodes_budget(self):
        literals = [Literal(value=i, literal_type="number", range=_R) for i in range(5)]
        refs = [VariableReference(name="late", range=_R)]
        program = Program(range=_R, expressions=literals + refs)
        tables = build_symbol_tables(program, AnalysisOptions(max_nodes=5))
        assert tables.truncated
        assert "late" not in tables.variable_refs

    def test_parser_truncation_propagates(self):
        tables = analyze("(((x)))", AnalysisOptions(max_depth=1))
        assert tables.truncated

    def test_empty_tables(self):
        tables = SymbolTables()
        assert tables.functions == set()
        assert not tables.truncated
