"""
nodes.py - Nós da AST Kip

Propósito:
    Define a árvore sintática produzida pelo parser e consumida pelo
    analisador de símbolos.

Componentes principais:
    - Program: Raiz (declarações + expressões de nível superior)
    - TypeDeclaration / TypeConstructor / TypeParameter
    - FunctionDefinition / FunctionParameter
    - VariableDefinition
    - Expression: União fechada de FunctionCall, VariableReference,
      Literal, ConditionalExpression e PatternMatch

Notas de implementação:
    - Ranges usam lsprotocol Range/Position (0-based), prontos para
      Location e DocumentSymbol
    - Visitantes despacham por isinstance sobre a união fechada
    - Nomes declarados ficam como escritos; nomes referenciados ficam na
      base resolvida pela morfologia
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from lsprotocol.types import Position, Range

from kip_lsp.lexer import Token, utf16_len


def make_range(start: Token, end: Token) -> Range:
    """Range do início de start ao fim de end."""
    return Range(
        start=Position(line=start.line, character=start.column),
        end=Position(line=end.line, character=end.column + utf16_len(end.text)),
    )


# --- Expressões ---


@dataclass
class FunctionCall:
    """Chamada: argumentos vêm antes do nome ("(5'le 3'ün) toplamı")."""

    function_name: str
    arguments: List["Expression"]
    range: Range


@dataclass
class VariableReference:
    name: str
    range: Range


@dataclass
class Literal:
    value: Union[str, int, float, bool]
    literal_type: str  # "string" | "number" | "boolean"
    range: Range


@dataclass
class ConditionalExpression:
    """<condição> doğruysa, <então>, değilse, <senão>"""

    condition: "Expression"
    then_branch: "Expression"
    else_branch: Optional["Expression"]
    range: Range


@dataclass
class PatternCase:
    """Par padrão/resultado. pattern None representa o "değilse" final."""

    pattern: Optional["Expression"]
    result: "Expression"
    range: Range


@dataclass
class PatternMatch:
    value: "Expression"
    patterns: List[PatternCase]
    range: Range


Expression = Union[
    FunctionCall,
    VariableReference,
    Literal,
    ConditionalExpression,
    PatternMatch,
]


# --- Declarações ---


@dataclass
class TypeParameter:
    name: str
    range: Range


@dataclass
class TypeConstructor:
    name: str
    parameters: List[TypeParameter]
    range: Range


@dataclass
class TypeDeclaration:
    """
    Declaração de tipo.

    kind:
        "primitive" → Bir yerleşik tam-sayı olsun.
        "empty"     → Bir boşluk var olamaz.
        "union"     → Bir doğruluk ya doğru ya da yanlış olabilir.
    """

    name: str
    name_parts: List[str]
    constructors: List[TypeConstructor]
    kind: str
    range: Range


@dataclass
class FunctionParameter:
    name: str
    type: Optional[str]
    range: Range


@dataclass
class FunctionDefinition:
    """
    Definição de função.

    body é None para funções "yerleşiktir". prelude guarda as expressões
    do corpo que precedem o casamento de padrões (ex: "x'i yazıp,").
    """

    name: str
    parameters: List[FunctionParameter]
    is_gerund: bool
    range: Range
    body: Optional[Expression] = None
    is_builtin: bool = False
    prelude: List[Expression] = field(default_factory=list)


@dataclass
class VariableDefinition:
    names: List[str]
    range: Range
    value: Optional[Expression] = None


Declaration = Union[TypeDeclaration, FunctionDefinition, VariableDefinition]


@dataclass
class Program:
    """Raiz da AST. truncated indica aninhamento ignorado por max_depth."""

    range: Range
    declarations: List[Declaration] = field(default_factory=list)
    expressions: List[Expression] = field(default_factory=list)
    truncated: bool = False
