"""
analyzer.py - Tabelas de símbolos por documento Kip

Propósito:
    Percorre a AST produzida pelo parser e monta as tabelas consultadas
    pelo emissor de tokens semânticos e pelas features de IDE (hover,
    completion, definition, references, symbols).

Componentes principais:
    - AnalysisOptions: Limites de profundidade e de nós do percurso
    - SymbolTables: Conjuntos de nomes + mapas de detalhes + declarações
    - DeclarationEntry: Entrada de outline (nome, SymbolKind, range, filhos)
    - analyze: Texto → SymbolTables (lex + parse + análise)
    - build_symbol_tables: Program → SymbolTables

Notas de implementação:
    - Tabelas são sempre recriadas; nada é reaproveitado entre chamadas
    - Tipos registram a frase completa e cada palavra; type_phrases mapeia
      palavra/frase → frase completa
    - Gerúndios registram também a grafia -mak/-mek (harmonia vocálica)
    - Expressões são percorridas com pilha explícita; ultrapassar
      max_depth ou max_nodes marca truncated e mantém o resultado parcial
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from lsprotocol.types import Range, SymbolKind

from kip_lsp.lexer import KEYWORDS
from kip_lsp.nodes import (
    ConditionalExpression,
    Expression,
    FunctionCall,
    FunctionDefinition,
    PatternMatch,
    Program,
    TypeDeclaration,
    VariableDefinition,
    VariableReference,
)
from kip_lsp.parser import parse

logger = logging.getLogger(__name__)

_BACK_VOWELS = set("aıou")
_FRONT_VOWELS = set("eiöü")


@dataclass(frozen=True)
class AnalysisOptions:
    """Limites do percurso de expressões."""

    max_depth: int = 100
    max_nodes: int = 10000


@dataclass
class FunctionDetail:
    parameters: List[str]
    parameter_types: List[Optional[str]]
    is_gerund: bool
    is_builtin: bool
    range: Range


@dataclass
class TypeDetail:
    constructors: List[str]
    kind: str
    range: Range


@dataclass
class VariableDetail:
    range: Range


@dataclass
class DeclarationEntry:
    """Declaração para outline: tipos têm os construtores como filhos."""

    name: str
    kind: SymbolKind
    range: Range
    detail: str = ""
    children: List["DeclarationEntry"] = field(default_factory=list)


@dataclass
class SymbolTables:
    """
    Tabelas de símbolos de um documento.

    Todo nome que é chave de um mapa de detalhes também está no conjunto
    correspondente (function_details ⊆ functions, type_details ⊆ types,
    variable_details ⊆ variables).
    """

    functions: Set[str] = field(default_factory=set)
    function_details: Dict[str, FunctionDetail] = field(default_factory=dict)
    types: Set[str] = field(default_factory=set)
    type_details: Dict[str, TypeDetail] = field(default_factory=dict)
    type_phrases: Dict[str, str] = field(default_factory=dict)
    constructors: Set[str] = field(default_factory=set)
    constructor_types: Dict[str, str] = field(default_factory=dict)
    variables: Set[str] = field(default_factory=set)
    variable_details: Dict[str, VariableDetail] = field(default_factory=dict)
    variable_refs: Set[str] = field(default_factory=set)
    keywords: Set[str] = field(default_factory=lambda: set(KEYWORDS))
    declarations: List[DeclarationEntry] = field(default_factory=list)
    truncated: bool = False

    @property
    def multi_word_types(self) -> Set[str]:
        return {name for name in self.types if " " in name}

    @property
    def single_word_types(self) -> Set[str]:
        return {name for name in self.types if " " not in name}

    @property
    def all_variables(self) -> Set[str]:
        return self.variables | self.variable_refs

    def lookup_function(self, name: str) -> Optional[Tuple[str, FunctionDetail]]:
        """(nome base, detalhe) da função, aceitando a grafia -mak/-mek."""
        detail = self.function_details.get(name)
        if detail is not None:
            return name, detail
        for base, candidate in self.function_details.items():
            if candidate.is_gerund and gerund_spelling(base) == name:
                return base, candidate
        return None


def analyze(text: str, options: Optional[AnalysisOptions] = None) -> SymbolTables:
    """Tokeniza, analisa e monta as tabelas de símbolos do texto."""
    options = options or AnalysisOptions()
    program = parse(text, max_depth=options.max_depth)
    tables = build_symbol_tables(program, options)
    return tables


def gerund_spelling(name: str) -> str:
    """Grafia -mak/-mek conforme a última vogal (topla → toplamak)."""
    for char in reversed(name.lower()):
        if char in _BACK_VOWELS:
            return name + "mak"
        if char in _FRONT_VOWELS:
            return name + "mek"
    return name + "mek"


def build_symbol_tables(
    program: Program, options: Optional[AnalysisOptions] = None
) -> SymbolTables:
    """Percorre as declarações e expressões de um Program."""
    options = options or AnalysisOptions()
    tables = SymbolTables(truncated=program.truncated)
    walker = _ReferenceWalker(tables, options)

    for declaration in program.declarations:
        if isinstance(declaration, TypeDeclaration):
            _add_type(tables, declaration)
        elif isinstance(declaration, FunctionDefinition):
            _add_function(tables, declaration)
            walker.walk(declaration.prelude)
            if declaration.body is not None:
                walker.walk([declaration.body])
        elif isinstance(declaration, VariableDefinition):
            _add_variable(tables, declaration)
            if declaration.value is not None:
                walker.walk([declaration.value])

    walker.walk(program.expressions)

    if tables.truncated:
        logger.debug(
            f"Análise truncada (max_depth={options.max_depth}, "
            f"max_nodes={options.max_nodes})"
        )
    return tables


def _add_type(tables: SymbolTables, node: TypeDeclaration) -> None:
    tables.types.add(node.name)
    tables.type_phrases[node.name] = node.name
    for part in node.name_parts:
        tables.types.add(part)
        tables.type_phrases.setdefault(part, node.name)

    ctor_names = [ctor.name for ctor in node.constructors]
    tables.type_details[node.name] = TypeDetail(
        constructors=ctor_names, kind=node.kind, range=node.range
    )

    children = []
    for ctor in node.constructors:
        tables.constructors.add(ctor.name)
        tables.constructor_types[ctor.name] = node.name
        children.append(
            DeclarationEntry(
                name=ctor.name,
                kind=SymbolKind.EnumMember,
                range=ctor.range,
                detail=", ".join(p.name for p in ctor.parameters),
            )
        )

    tables.declarations.append(
        DeclarationEntry(
            name=node.name,
            kind=SymbolKind.Class,
            range=node.range,
            detail=node.kind,
            children=children,
        )
    )


def _add_function(tables: SymbolTables, node: FunctionDefinition) -> None:
    tables.functions.add(node.name)
    if node.is_gerund:
        tables.functions.add(gerund_spelling(node.name))

    tables.function_details[node.name] = FunctionDetail(
        parameters=[p.name for p in node.parameters],
        parameter_types=[p.type for p in node.parameters],
        is_gerund=node.is_gerund,
        is_builtin=node.is_builtin,
        range=node.range,
    )
    # Parâmetros são usados no corpo como variáveis
    tables.variable_refs.update(p.name for p in node.parameters)

    children = [
        DeclarationEntry(
            name=p.name, kind=SymbolKind.Variable, range=p.range, detail=p.type or ""
        )
        for p in node.parameters
    ]
    detail = "yerleşik" if node.is_builtin else ""
    tables.declarations.append(
        DeclarationEntry(
            name=node.name,
            kind=SymbolKind.Function,
            range=node.range,
            detail=detail,
            children=children,
        )
    )


def _add_variable(tables: SymbolTables, node: VariableDefinition) -> None:
    for name in node.names:
        tables.variables.add(name)
        tables.variable_details[name] = VariableDetail(range=node.range)
        tables.declarations.append(
            DeclarationEntry(name=name, kind=SymbolKind.Variable, range=node.range)
        )


class _ReferenceWalker:
    """Coleta nomes referenciados em expressões, com orçamento de nós."""

    def __init__(self, tables: SymbolTables, options: AnalysisOptions):
        self.tables = tables
        self.options = options
        self.visited = 0

    def walk(self, roots: List[Expression]) -> None:
        stack = [(expr, 0) for expr in reversed(roots) if expr is not None]

        while stack:
            expr, depth = stack.pop()
            if depth > self.options.max_depth:
                self.tables.truncated = True
                continue
            if self.visited >= self.options.max_nodes:
                self.tables.truncated = True
                return
            self.visited += 1

            for child in reversed(self._visit(expr)):
                if child is not None:
                    stack.append((child, depth + 1))

    def _visit(self, expr: Expression) -> List[Optional[Expression]]:
        """Registra o nó e retorna os filhos a percorrer."""
        if isinstance(expr, VariableReference):
            self.tables.variable_refs.add(expr.name)
            return []
        if isinstance(expr, FunctionCall):
            self.tables.variable_refs.add(expr.function_name)
            return list(expr.arguments)
        if isinstance(expr, ConditionalExpression):
            return [expr.condition, expr.then_branch, expr.else_branch]
        if isinstance(expr, PatternMatch):
            children: List[Optional[Expression]] = [expr.value]
            for case in expr.patterns:
                children.extend([case.pattern, case.result])
            return children
        return []
