"""
test_morphology.py - Testes para a resolução de sufixos de caso

Propósito:
    Validar candidatos de análise, escolha da base (com e sem nomes
    conhecidos) e a tolerância a sufixos usada pelas features de IDE.
"""

from __future__ import annotations

from kip_lsp.morphology import (
    CASE_SUFFIXES,
    Case,
    analyze_morphology,
    extract_case,
    find_base_identifier,
    has_case,
    is_suffixed,
    match_known_name,
    resolve_base,
)


class TestAnalyzeMorphology:
    def test_nominative_first(self):
        """Primeiro candidato é sempre a identidade nominativa."""
        results = analyze_morphology("evin")
        assert results[0].base == "evin"
        assert results[0].case is Case.NOM
        assert results[0].suffix == ""

    def test_short_base_rejected(self):
        """Bases com menos de 2 caracteres não são candidatas."""
        results = analyze_morphology("ye")
        assert len(results) == 1

    def test_suffixes_longest_first(self):
        lengths = [len(suffix) for suffix, _ in CASE_SUFFIXES]
        assert lengths == sorted(lengths, reverse=True)


class TestFindBaseIdentifier:
    def test_genitive(self):
        result = find_base_identifier("evin")
        assert result.base == "ev"
        assert result.case is Case.GEN

    def test_bare_word(self):
        """Sem sufixo reconhecido, retorna a própria palavra."""
        result = find_base_identifier("ev")
        assert result.base == "ev"
        assert result.case is Case.NOM

    def test_shortest_suffix_without_known(self):
        """Sem nomes conhecidos vence o sufixo mais curto."""
        assert resolve_base("listesine") == "listesin"

    def test_known_name_preferred(self):
        """Base conhecida vence a heurística do sufixo mais curto."""
        result = find_base_identifier("listesine", known={"listesi"})
        assert result.base == "listesi"
        assert result.case is Case.DAT

    def test_known_word_itself_wins(self):
        """Palavra conhecida como está fica no nominativo."""
        result = find_base_identifier("eki", known={"eki", "ek"})
        assert result.base == "eki"
        assert result.case is Case.NOM

    def test_known_as_list(self):
        assert resolve_base("toplamını", ["toplamı"]) == "toplamı"


class TestCaseHelpers:
    def test_extract_case_locative(self):
        assert extract_case("evde") is Case.LOC

    def test_extract_case_nominative(self):
        assert extract_case("x") is Case.NOM

    def test_has_case_conditional(self):
        assert has_case("boşsa", Case.COND)
        assert not has_case("boş", Case.COND)


class TestSuffixTolerance:
    def test_is_suffixed(self):
        assert is_suffixed("listeyi", "liste")

    def test_same_word_not_suffixed(self):
        assert not is_suffixed("liste", "liste")

    def test_long_remainder_rejected(self):
        """Resto com mais de 6 letras não é sufixo."""
        assert not is_suffixed("listeabcdefg", "liste")

    def test_match_known_name_longest(self):
        """Nome conhecido mais longo vence."""
        assert match_known_name("toplamını", {"toplamı", "top"}) == "toplamı"

    def test_match_known_name_exact(self):
        assert match_known_name("top", {"toplamı", "top"}) == "top"

    def test_match_known_name_none(self):
        assert match_known_name("ev", {"liste"}) is None
