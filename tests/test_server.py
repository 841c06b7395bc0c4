"""
test_server.py - Testes para os handlers do servidor LSP

Propósito:
    Validar o ciclo de vida do documento (open/change/close), a leitura
    de configuração, o comando kip/getDocumentStats e os handlers de
    features chamados diretamente com um servidor falso.
"""

from __future__ import annotations

from types import SimpleNamespace

from lsprotocol.types import CompletionItemKind, Position

from kip_lsp import __version__
from kip_lsp.analyzer import AnalysisOptions, analyze
from kip_lsp.cache import DocumentStore
from kip_lsp.server import (
    completion,
    definition,
    did_change,
    did_change_configuration,
    did_close,
    did_open,
    document_symbol,
    get_document_stats,
    hover,
    parse_settings,
    references,
    semantic_tokens_full,
    semantic_tokens_range,
    workspace_symbol,
)


URI = "file:///liste.kip"

SOURCE = (
    "Bir öğe listesi ya boş, ya da bir öğenin bir öğe listesine eki olabilir.\n"
    "(bu öğe listesinin) uzunluğu,\n"
    "  bu boşsa, 0,\n"
    "  ilkin devamın ekiyse, (devamın uzunluğuyla 1'in toplamı).\n"
)


# --- Mocks ---


class FakeWorkspace:
    """Workspace mínimo: documentos por URI."""

    def __init__(self, documents):
        self.documents = documents

    def get_document(self, uri):
        source, version = self.documents[uri]
        return SimpleNamespace(uri=uri, source=source, version=version)


class FakeServer:
    """Mock mínimo de KipLanguageServer para testes unitários."""

    def __init__(self, documents=None):
        self.store = DocumentStore()
        self.analysis_options = AnalysisOptions()
        self.semantic_tokens_enabled = True
        self.workspace = FakeWorkspace(documents or {})


def _doc_params(uri=URI):
    return SimpleNamespace(text_document=SimpleNamespace(uri=uri))


def _position_params(line, character, uri=URI, context=None):
    return SimpleNamespace(
        text_document=SimpleNamespace(uri=uri),
        position=Position(line=line, character=character),
        context=context,
    )


def _opened(source=SOURCE, version=1):
    ls = FakeServer({URI: (source, version)})
    did_open(ls, _doc_params())
    return ls


# --- Ciclo de vida ---


class TestLifecycle:
    def test_open_analyzes(self):
        ls = _opened()
        tables = ls.store.get_tables(URI)
        assert tables is not None
        assert "uzunluğu" in tables.functions
        assert ls.store.get(URI).version == 1

    def test_change_replaces_tables(self):
        ls = _opened()
        ls.workspace.documents[URI] = ("Bir yerleşik tam-sayı olsun.", 2)
        did_change(ls, _doc_params())

        tables = ls.store.get_tables(URI)
        assert tables.types == {"tam-sayı"}
        assert tables.functions == set()
        assert ls.store.get(URI).version == 2

    def test_close_removes_tables(self):
        ls = _opened()
        did_close(ls, _doc_params())
        assert not ls.store.has(URI)

    def test_analysis_error_keeps_previous(self):
        """Falha na leitura do documento não apaga o último resultado."""
        ls = _opened()
        del ls.workspace.documents[URI]
        did_change(ls, _doc_params())
        assert "uzunluğu" in ls.store.get_tables(URI).functions


# --- Configuração ---


class TestSettings:
    def test_defaults(self):
        options, enabled = parse_settings(None)
        assert options == AnalysisOptions()
        assert enabled is True

    def test_kip_section(self):
        options, enabled = parse_settings(
            {"kip": {"analysis": {"maxDepth": 5, "maxNodes": 50}, "semanticTokens": {"enabled": False}}}
        )
        assert options.max_depth == 5
        assert options.max_nodes == 50
        assert enabled is False

    def test_section_itself(self):
        options, _ = parse_settings({"analysis": {"maxDepth": 7}})
        assert options.max_depth == 7
        assert options.max_nodes == AnalysisOptions().max_nodes

    def test_invalid_values_fall_back(self):
        options, enabled = parse_settings(
            {"kip": {"analysis": {"maxDepth": -1, "maxNodes": True}, "semanticTokens": {"enabled": "no"}}}
        )
        assert options == AnalysisOptions()
        assert enabled is True

    def test_large_max_depth_deep_source(self):
        """maxDepth alto com aninhamento profundo analisa sem erro."""
        options, _ = parse_settings({"kip": {"analysis": {"maxDepth": 5000}}})
        tables = analyze("(" * 1200 + "x" + ")" * 1200 + " f.", options)
        assert not tables.truncated
        assert {"x", "f"} <= tables.variable_refs

    def test_change_configuration_reanalyzes(self):
        ls = _opened(source="(((x))).")
        assert not ls.store.get_tables(URI).truncated

        did_change_configuration(
            ls, SimpleNamespace(settings={"kip": {"analysis": {"maxDepth": 1}}})
        )
        assert ls.analysis_options.max_depth == 1
        assert ls.store.get_tables(URI).truncated

    def test_disable_semantic_tokens(self):
        ls = _opened()
        did_change_configuration(
            ls, SimpleNamespace(settings={"kip": {"semanticTokens": {"enabled": False}}})
        )
        assert semantic_tokens_full(ls, _doc_params()).data == []


# --- kip/getDocumentStats ---


class TestDocumentStats:
    def test_stats(self):
        ls = _opened()
        result = get_document_stats(ls, [{"uri": URI}])
        assert result["success"] is True
        assert result["stats"]["function_count"] == 1
        assert result["stats"]["type_count"] == 1
        assert result["stats"]["constructor_count"] == 2
        assert result["truncated"] is False

    def test_dict_params(self):
        ls = _opened()
        assert get_document_stats(ls, {"uri": URI})["success"] is True

    def test_missing_uri(self):
        result = get_document_stats(FakeServer(), [])
        assert result["success"] is False

    def test_not_analyzed(self):
        result = get_document_stats(FakeServer(), {"uri": URI})
        assert result["success"] is False
        assert "analiz" in result["error"]


# --- Features ---


class TestFeatures:
    def test_semantic_tokens_full(self):
        ls = _opened()
        data = semantic_tokens_full(ls, _doc_params()).data
        assert len(data) > 0
        assert len(data) % 5 == 0

    def test_semantic_tokens_range(self):
        ls = _opened()
        params = SimpleNamespace(
            text_document=SimpleNamespace(uri=URI),
            range=SimpleNamespace(
                start=Position(line=2, character=0), end=Position(line=2, character=100)
            ),
        )
        data = semantic_tokens_range(ls, params).data
        assert data[0] == 2

    def test_semantic_tokens_unknown_document(self):
        """Documento inexistente: erro logado e resultado vazio."""
        ls = FakeServer()
        assert semantic_tokens_full(ls, _doc_params()).data == []

    def test_hover(self):
        ls = _opened()
        result = hover(ls, _position_params(1, 22))
        assert "Fonksiyon: `uzunluğu`" in result.contents.value

    def test_hover_unknown_document(self):
        assert hover(FakeServer(), _position_params(0, 0)) is None

    def test_definition(self):
        ls = _opened()
        location = definition(ls, _position_params(3, 19))
        assert location.uri == URI
        assert location.range.start.line == 0

    def test_references(self):
        ls = _opened()
        locations = references(ls, _position_params(1, 22))
        assert len(locations) == 2

    def test_completion_trigger(self):
        ls = _opened()
        context = SimpleNamespace(trigger_character="'")
        result = completion(ls, _position_params(3, 27, context=context))
        assert all(item.kind == CompletionItemKind.Text for item in result.items)

    def test_completion_unknown_document(self):
        result = completion(FakeServer(), _position_params(0, 0))
        assert result.items == []

    def test_document_symbol(self):
        ls = _opened()
        symbols = document_symbol(ls, _doc_params())
        assert [s.name for s in symbols] == ["öğe listesi", "uzunluğu"]

    def test_workspace_symbol(self):
        ls = _opened()
        results = workspace_symbol(ls, SimpleNamespace(query="öğe"))
        assert [r.name for r in results] == ["öğe listesi"]


# --- Versão ---


def test_version_string():
    """Instalado ou não, o pacote expõe uma versão não vazia."""
    assert isinstance(__version__, str)
    assert __version__
