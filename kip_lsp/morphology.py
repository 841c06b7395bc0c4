"""
morphology.py - Análise morfológica de sufixos de caso do turco

Propósito:
    Identificadores Kip carregam sufixos de caso gramatical ("evin",
    "listesine", "boşsa"). Este módulo separa a palavra em candidatos
    (base, caso, sufixo) para que o parser normalize nomes referenciados
    e o analisador relacione um token ao símbolo declarado.

Componentes principais:
    - Case: Os 9 casos reconhecidos (Nom, Gen, Dat, Acc, Ins, Loc, Abl,
      Cond, P3s)
    - MorphologyResult: Candidato (base, case, suffix)
    - analyze_morphology: Todos os candidatos de uma palavra
    - find_base_identifier: Melhor candidato único
    - has_case / extract_case: Consultas auxiliares
    - is_suffixed / match_known_name: Tolerância a sufixo usada pelas
      features de IDE (nome conhecido + 1 a 6 letras)

Notas de implementação:
    - Funções puras e totais; nenhum estado global mutável
    - Tabela ordenada do sufixo mais longo para o mais curto, incluindo
      variantes com consoante de ligação (ya, nın, yla, ysa)
    - Um sufixo só é aceito se deixar uma base com pelo menos 2 letras
    - Desempate: nominativo quando nenhum sufixo casa (ou a palavra já é
      um nome conhecido), senão o sufixo mais curto
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional


class Case(str, Enum):
    """Casos gramaticais reconhecidos."""

    NOM = "Nom"    # yalın hal
    GEN = "Gen"    # -in
    DAT = "Dat"    # -e
    ACC = "Acc"    # -i
    INS = "Ins"    # -le
    LOC = "Loc"    # -de
    ABL = "Abl"    # -den
    COND = "Cond"  # -se (şart kipi)
    P3S = "P3s"    # -sI (tamlanan eki)


class MorphologyResult(NamedTuple):
    base: str
    case: Case
    suffix: str


_MIN_BASE_LENGTH = 2

_SUFFIXES_BY_CASE = {
    Case.GEN: ["nın", "nin", "nun", "nün", "ın", "in", "un", "ün"],
    Case.DAT: ["ya", "ye", "na", "ne", "a", "e"],
    Case.ACC: ["yı", "yi", "yu", "yü", "nı", "ni", "nu", "nü", "ı", "i", "u", "ü"],
    Case.INS: ["yla", "yle", "la", "le"],
    Case.LOC: ["nda", "nde", "da", "de", "ta", "te"],
    Case.ABL: ["ndan", "nden", "dan", "den", "tan", "ten"],
    Case.COND: ["ysa", "yse", "sa", "se"],
    Case.P3S: ["sı", "si", "su", "sü"],
}

# (sufixo, caso), do mais longo para o mais curto; empate mantém a ordem acima
CASE_SUFFIXES = sorted(
    ((suffix, case) for case, suffixes in _SUFFIXES_BY_CASE.items() for suffix in suffixes),
    key=lambda entry: -len(entry[0]),
)


def analyze_morphology(word: str) -> List[MorphologyResult]:
    """
    Retorna todos os candidatos de análise para uma palavra.

    O primeiro candidato é sempre a identidade nominativa; os demais
    seguem a ordem da tabela (sufixo mais longo primeiro).
    """
    results = [MorphologyResult(base=word, case=Case.NOM, suffix="")]

    for suffix, case in CASE_SUFFIXES:
        if not word.endswith(suffix):
            continue
        base = word[: -len(suffix)]
        if len(base) >= _MIN_BASE_LENGTH:
            results.append(MorphologyResult(base=base, case=case, suffix=suffix))

    return results


def find_base_identifier(
    word: str, known: Optional[Iterable[str]] = None
) -> MorphologyResult:
    """
    Escolhe o candidato mais provável para a palavra.

    Args:
        word: Palavra com possível sufixo de caso
        known: Nomes já declarados (opcional). Quando informado, bases
            conhecidas têm prioridade sobre as desconhecidas.

    Returns:
        MorphologyResult escolhido. A identidade nominativa vence quando
        nenhum sufixo casa ou quando a própria palavra é conhecida; fora
        isso vence o sufixo mais curto.
    """
    analyses = analyze_morphology(word)

    if known is not None:
        known_set = known if isinstance(known, (set, frozenset, dict)) else set(known)
        matches = [a for a in analyses if a.base in known_set]
        if matches:
            # sorted é estável: nominativo (sufixo vazio) vem primeiro
            return sorted(matches, key=lambda a: len(a.suffix))[0]

    suffixed = [a for a in analyses if a.case is not Case.NOM]
    if not suffixed:
        return analyses[0]
    return sorted(suffixed, key=lambda a: len(a.suffix))[0]


def resolve_base(word: str, known: Optional[Iterable[str]] = None) -> str:
    """Atalho: apenas a base escolhida por find_base_identifier."""
    return find_base_identifier(word, known).base


def has_case(word: str, case: Case) -> bool:
    """Verifica se algum candidato da palavra tem o caso informado."""
    return any(a.case is case for a in analyze_morphology(word))


def extract_case(word: str) -> Case:
    """Primeiro caso não nominativo encontrado, ou Nom."""
    for analysis in analyze_morphology(word):
        if analysis.case is not Case.NOM:
            return analysis.case
    return Case.NOM


# Sufixo plausível sem validação morfológica: 1 a 6 letras
_SUFFIX_SHAPE = re.compile(r"[a-zA-ZçğıöşüÇĞİÖŞÜ]{1,6}")


def is_suffixed(word: str, name: str) -> bool:
    """word = name + resto com forma de sufixo (1 a 6 letras)."""
    if len(word) <= len(name) or not word.startswith(name):
        return False
    return _SUFFIX_SHAPE.fullmatch(word[len(name):]) is not None


def is_suffix_shaped(remainder: str) -> bool:
    return _SUFFIX_SHAPE.fullmatch(remainder) is not None


def match_known_name(word: str, names: Iterable[str]) -> Optional[str]:
    """
    Nome conhecido ao qual a palavra se refere.

    Igualdade exata vence; senão o nome mais longo do qual a palavra é
    nome + sufixo. None se nenhum casar.
    """
    names = names if isinstance(names, (set, frozenset, dict)) else set(names)
    if word in names:
        return word
    candidates = [name for name in names if is_suffixed(word, name)]
    if not candidates:
        return None
    return max(candidates, key=lambda name: (len(name), name))
