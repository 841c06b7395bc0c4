"""
parser.py - Parser descendente recursivo da linguagem Kip

Propósito:
    Converte a sequência de tokens do lexer em um Program (AST) com
    declarações de tipo, funções, variáveis e expressões de nível
    superior. Usado a cada versão do documento pelo analisador.

Formas reconhecidas (nesta ordem de prioridade em cada posição):
    (a) Bir yerleşik <nome> olsun.                 → tipo primitivo
    (b) Bir <nome...> var olamaz.                  → tipo vazio
    (c) Bir <nome...> ya <ctor>, ya da ... olabilir. → união etiquetada
    (d) <valor> <nomes...> diyelim.                → definição de variável
    (e) (<param> <tipo>)... <nome>,  |  <nome-mak/mek>,  → função
    (f) expressões até o próximo "."

Notas de implementação:
    - Nunca levanta exceção: construção não reconhecida faz o parser
      tentar a próxima forma e, por fim, avançar um token
    - Chamadas escrevem os argumentos antes do nome: (5'le 3'ün) toplamı
    - Corpo de função é um casamento de padrões: segmentos separados por
      vírgula, padrão terminado em sufixo condicional (boşsa, ekiyse)
      seguido do resultado
    - Aninhamento de parênteses acima de max_depth não é descido e marca
      Parser.truncated
    - Nomes declarados ficam como escritos; nomes referenciados ficam na
      base resolvida pela morfologia, priorizando nomes já conhecidos
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set, Tuple

from lsprotocol.types import Position, Range

from kip_lsp.builtins import BUILTIN_NAMES
from kip_lsp.lexer import Token, TokenKind, is_name_token, tokenize, utf16_len
from kip_lsp.morphology import (
    Case,
    analyze_morphology,
    has_case,
    resolve_base,
)
from kip_lsp.nodes import (
    ConditionalExpression,
    Expression,
    FunctionCall,
    FunctionDefinition,
    FunctionParameter,
    Literal,
    PatternCase,
    PatternMatch,
    Program,
    TypeConstructor,
    TypeDeclaration,
    TypeParameter,
    VariableDefinition,
    VariableReference,
    make_range,
)

logger = logging.getLogger(__name__)

MAX_DEPTH = 100

DEFAULT_SCRUTINEE = "bu"

# Quantos tokens do início do corpo são examinados em busca do parâmetro
_SCRUTINEE_LOOKAHEAD = 3

_VOWELS = set("aeıioöuüâîû")

_GERUND_SUFFIXES = ("mak", "mek")

_PATTERN_KEYWORDS = {
    TokenKind.DOGRUYSA,
    TokenKind.YANLISSA,
    TokenKind.YOKLUKSA,
    TokenKind.DEGILSE,
}

_NUMBER_KINDS = {TokenKind.FLOAT, TokenKind.INTEGER, TokenKind.INTEGER_WITH_SUFFIX}

_EXPRESSION_START = _NUMBER_KINDS | {
    TokenKind.STRING,
    TokenKind.IDENT,
    TokenKind.LPAREN,
    TokenKind.DOGRU,
    TokenKind.YANLIS,
}

_STRING_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"'}


def parse(source: str, max_depth: int = MAX_DEPTH) -> Program:
    """Tokeniza e analisa o texto-fonte."""
    parser = Parser(tokenize(source), max_depth=max_depth)
    return parser.parse_program(_source_range(source))


def _source_range(source: str) -> Range:
    lines = source.split("\n")
    return Range(
        start=Position(line=0, character=0),
        end=Position(line=len(lines) - 1, character=utf16_len(lines[-1])),
    )


class Parser:
    """
    Parser sobre uma lista de tokens.

    Attributes:
        tokens: Tokens produzidos por lexer.tokenize
        max_depth: Limite de aninhamento de parênteses em expressões
        truncated: True se algum grupo foi ignorado por exceder max_depth
    """

    def __init__(self, tokens: Sequence[Token], max_depth: int = MAX_DEPTH):
        self.tokens = list(tokens)
        self.max_depth = max_depth
        self.truncated = False
        self._known: Set[str] = set(BUILTIN_NAMES)

    # --- Utilitários ---

    def _kind(self, i: int) -> Optional[TokenKind]:
        if 0 <= i < len(self.tokens):
            return self.tokens[i].kind
        return None

    def _resolve(self, word: str) -> str:
        return resolve_base(word, self._known)

    def _with_optional_dot(self, i: int) -> Tuple[int, int]:
        """(índice do último token da declaração, próxima posição)."""
        if self._kind(i + 1) is TokenKind.DOT:
            return i + 1, i + 2
        return i, i + 1

    def _statement_end(self, start: int) -> Tuple[int, int]:
        """
        Fim da sentença iniciada em start.

        Retorna (fim exclusivo, próxima posição). A sentença termina no
        próximo "." fora de parênteses ou antes de um "Bir", que sempre
        inicia uma nova declaração.
        """
        depth = 0
        j = start
        while j < len(self.tokens):
            kind = self.tokens[j].kind
            if kind is TokenKind.LPAREN:
                depth += 1
            elif kind is TokenKind.RPAREN:
                depth = max(0, depth - 1)
            elif depth == 0 and kind is TokenKind.DOT:
                return j, j + 1
            elif kind is TokenKind.BIR and j > start:
                return j, j
            j += 1
        return j, j

    def _split_segments(self, start: int, end: int) -> List[Tuple[int, int]]:
        """Divide [start, end) nas vírgulas de nível zero."""
        segments: List[Tuple[int, int]] = []
        depth = 0
        seg_start = start
        for j in range(start, end):
            kind = self.tokens[j].kind
            if kind is TokenKind.LPAREN:
                depth += 1
            elif kind is TokenKind.RPAREN:
                depth = max(0, depth - 1)
            elif kind is TokenKind.COMMA and depth == 0:
                segments.append((seg_start, j))
                seg_start = j + 1
        segments.append((seg_start, end))
        return [(s, e) for s, e in segments if s < e]

    def _matching_paren(self, open_index: int, end: int) -> int:
        """Índice do ")" correspondente, ou end se não houver."""
        depth = 0
        for j in range(open_index, end):
            kind = self.tokens[j].kind
            if kind is TokenKind.LPAREN:
                depth += 1
            elif kind is TokenKind.RPAREN:
                depth -= 1
                if depth == 0:
                    return j
        return end

    # --- Programa ---

    def parse_program(self, source_range: Range) -> Program:
        program = Program(range=source_range)
        i = 0

        while i < len(self.tokens):
            declaration = None
            if self._kind(i) is TokenKind.BIR:
                declaration = self._parse_type_declaration(i)
            if declaration is None:
                declaration = self._parse_variable_definition(i)
            if declaration is None:
                declaration = self._parse_function_definition(i)

            if declaration is not None:
                node, i = declaration
                program.declarations.append(node)
                continue

            expressions, next_i = self._parse_statement(i)
            if expressions:
                program.expressions.extend(expressions)
                i = next_i
                continue

            # Nada reconhecido: avança um token e tenta de novo
            i += 1

        if self.truncated:
            program.truncated = True
            logger.debug(f"Aninhamento acima de {self.max_depth} ignorado")

        return program

    # --- Tipos ---

    def _collect_type_name(self, i: int) -> Tuple[List[Token], int]:
        """Palavras do nome do tipo (parênteses são ignorados)."""
        words: List[Token] = []
        j = i
        while self._kind(j) in (TokenKind.IDENT, TokenKind.LPAREN, TokenKind.RPAREN):
            if self.tokens[j].kind is TokenKind.IDENT:
                words.append(self.tokens[j])
            j += 1
        return words, j

    def _parse_type_declaration(self, i: int):
        """Tenta (a) primitivo, (b) vazio e (c) união, nessa ordem."""
        return (
            self._parse_primitive_type(i)
            or self._parse_empty_type(i)
            or self._parse_union_type(i)
        )

    def _parse_primitive_type(self, i: int):
        if self._kind(i + 1) is not TokenKind.YERLESIK:
            return None
        words, j = self._collect_type_name(i + 2)
        if not words or self._kind(j) is not TokenKind.OLSUN:
            return None
        last, next_i = self._with_optional_dot(j)
        node = self._make_type(words, [], "primitive", i, last)
        return node, next_i

    def _parse_empty_type(self, i: int):
        words, j = self._collect_type_name(i + 1)
        if not words:
            return None
        if self._kind(j) is not TokenKind.VAR or self._kind(j + 1) is not TokenKind.OLAMAZ:
            return None
        last, next_i = self._with_optional_dot(j + 1)
        node = self._make_type(words, [], "empty", i, last)
        return node, next_i

    def _parse_union_type(self, i: int):
        words, ya_index = self._collect_type_name(i + 1)
        if not words or self._kind(ya_index) is not TokenKind.YA:
            return None

        # "olabilir" precisa vir antes do fim da sentença
        end = ya_index + 1
        while end < len(self.tokens):
            kind = self.tokens[end].kind
            if kind is TokenKind.OLABILIR:
                break
            if kind in (TokenKind.DOT, TokenKind.BIR):
                return None
            end += 1
        else:
            return None

        # Tipos recursivos referem o próprio nome nos construtores
        self._known.add(" ".join(t.text for t in words))
        self._known.update(t.text for t in words)

        constructors = []
        for seg_start, seg_end in self._constructor_segments(ya_index + 1, end):
            ctor = self._parse_constructor(seg_start, seg_end)
            if ctor is not None:
                constructors.append(ctor)

        last, next_i = self._with_optional_dot(end)
        node = self._make_type(words, constructors, "union", i, last)
        return node, next_i

    def _constructor_segments(self, start: int, end: int) -> List[Tuple[int, int]]:
        """Segmentos entre separadores "," / "ya" / "da"."""
        segments = []
        seg_start = start
        for j in range(start, end):
            if self.tokens[j].kind in (TokenKind.COMMA, TokenKind.YA, TokenKind.DA):
                segments.append((seg_start, j))
                seg_start = j + 1
        segments.append((seg_start, end))
        return [(s, e) for s, e in segments if s < e]

    def _parse_constructor(self, start: int, end: int) -> Optional[TypeConstructor]:
        """
        Construtor: parâmetros introduzidos por "bir" e o nome por último.

        Ex: "bir öğenin bir öğe listesine eki" → eki(öğe, öğe listesi)
        """
        names = [t for t in self.tokens[start:end] if is_name_token(t)]
        if not names:
            return None
        ctor_token = names[-1]

        groups: List[List[Token]] = []
        for token in names[:-1]:
            if token.text == "bir":
                groups.append([])
                continue
            if not groups:
                groups.append([])
            groups[-1].append(token)

        parameters = []
        for group in groups:
            if not group:
                continue
            phrase = " ".join(
                [t.text for t in group[:-1]] + [self._resolve(group[-1].text)]
            )
            parameters.append(TypeParameter(name=phrase, range=make_range(group[0], group[-1])))

        self._known.add(ctor_token.text)
        return TypeConstructor(
            name=ctor_token.text,
            parameters=parameters,
            range=make_range(ctor_token, ctor_token),
        )

    def _make_type(self, words, constructors, kind, first, last) -> TypeDeclaration:
        name_parts = [t.text for t in words]
        name = " ".join(name_parts)
        self._known.add(name)
        self._known.update(name_parts)
        return TypeDeclaration(
            name=name,
            name_parts=name_parts,
            constructors=constructors,
            kind=kind,
            range=make_range(self.tokens[first], self.tokens[last]),
        )

    # --- Variáveis ---

    def _parse_variable_definition(self, i: int):
        """
        <valor> <nomes...> diyelim.

        Os nomes são a sequência de identificadores imediatamente antes
        de "diyelim", depois da última palavra no dativo (o valor).
        """
        if self._kind(i) not in _EXPRESSION_START:
            return None

        end, _ = self._statement_end(i)
        diyelim = None
        depth = 0
        for j in range(i, end):
            kind = self.tokens[j].kind
            if kind is TokenKind.LPAREN:
                depth += 1
            elif kind is TokenKind.RPAREN:
                depth = max(0, depth - 1)
            elif depth == 0 and kind is TokenKind.COMMA:
                return None
            elif depth == 0 and kind is TokenKind.DIYELIM:
                diyelim = j
                break
        if diyelim is None:
            return None

        run_start = diyelim
        while run_start > i and self._kind(run_start - 1) is TokenKind.IDENT:
            run_start -= 1
        if run_start == diyelim:
            return None

        run = self.tokens[run_start:diyelim]
        names_start = run_start
        for k in range(len(run) - 2, -1, -1):
            if has_case(run[k].text, Case.DAT):
                names_start = run_start + k + 1
                break

        value = None
        if names_start > i:
            value = self._parse_segment(i, names_start)

        names = [t.text for t in self.tokens[names_start:diyelim]]
        self._known.update(names)
        last, next_i = self._with_optional_dot(diyelim)
        node = VariableDefinition(
            names=names,
            range=make_range(self.tokens[i], self.tokens[last]),
            value=value,
        )
        return node, next_i

    # --- Funções ---

    def _parse_function_definition(self, i: int):
        header = self._parse_gerund_header(i) or self._parse_paren_header(i)
        if header is None:
            return None

        name, parameters, is_gerund, name_index = header
        self._known.add(name)
        if is_gerund:
            self._known.add(self.tokens[name_index].text)
        self._known.update(p.name for p in parameters)

        terminator = name_index + 1
        if self.tokens[terminator].kind is TokenKind.YERLESIKTIR:
            last, next_i = self._with_optional_dot(terminator)
            node = FunctionDefinition(
                name=name,
                parameters=parameters,
                is_gerund=is_gerund,
                range=make_range(self.tokens[i], self.tokens[last]),
                is_builtin=True,
            )
            return node, next_i

        body_start = terminator + 1
        body_end, next_i = self._statement_end(body_start)
        body, prelude = self._parse_body(body_start, body_end, parameters)
        last = max(terminator, min(next_i, len(self.tokens)) - 1)
        node = FunctionDefinition(
            name=name,
            parameters=parameters,
            is_gerund=is_gerund,
            range=make_range(self.tokens[i], self.tokens[last]),
            body=body,
            prelude=prelude,
        )
        return node, next_i

    def _is_header_end(self, i: int) -> bool:
        return self._kind(i) in (TokenKind.COMMA, TokenKind.YERLESIKTIR)

    def _parse_gerund_header(self, i: int):
        """<isim-mak/mek>,"""
        if self._kind(i) is not TokenKind.IDENT or not self._is_header_end(i + 1):
            return None
        text = self.tokens[i].text
        if len(text) <= 3 or not text.endswith(_GERUND_SUFFIXES):
            return None
        return text[:-3], [], True, i

    def _parse_paren_header(self, i: int):
        """(<param> <tipo...>) (<param> <tipo...>) <isim>,"""
        parameters: List[FunctionParameter] = []
        j = i
        while self._kind(j) is TokenKind.LPAREN:
            k = j + 1
            group: List[Token] = []
            while self._kind(k) is TokenKind.IDENT:
                group.append(self.tokens[k])
                k += 1
            # Grupo com algo além de identificadores é argumento de chamada
            if not group or self._kind(k) is not TokenKind.RPAREN:
                return None
            parameters.append(self._make_parameter(group))
            j = k + 1

        if not parameters:
            return None
        if self._kind(j) is not TokenKind.IDENT or not self._is_header_end(j + 1):
            return None
        return self.tokens[j].text, parameters, False, j

    def _make_parameter(self, group: List[Token]) -> FunctionParameter:
        type_name = None
        if len(group) > 1:
            words = group[1:]
            type_name = " ".join(
                [t.text for t in words[:-1]] + [self._resolve(words[-1].text)]
            )
        return FunctionParameter(
            name=group[0].text,
            type=type_name,
            range=make_range(group[0], group[-1]),
        )

    # --- Corpo (casamento de padrões) ---

    def _parse_body(self, start: int, end: int, parameters: List[FunctionParameter]):
        """
        Retorna (corpo, prelúdio).

        corpo é um PatternMatch quando há padrões; sem padrões é a última
        expressão e as anteriores vão para o prelúdio.
        """
        if start >= end:
            return None, []

        segments = self._split_segments(start, end)
        scrutinee, scrutinee_token = self._find_scrutinee(start, end, parameters)
        value: Expression = VariableReference(
            name=scrutinee, range=make_range(scrutinee_token, scrutinee_token)
        )

        cases: List[PatternCase] = []
        prelude: List[Expression] = []
        k = 0
        while k < len(segments):
            seg_start, seg_end = segments[k]
            if self._is_pattern_segment(seg_start, seg_end):
                pattern, subject = self._parse_pattern(seg_start, seg_end, scrutinee)
                if not cases and subject is not None:
                    value = subject
                if k + 1 < len(segments):
                    res_start, res_end = segments[k + 1]
                    result = self._parse_segment(res_start, res_end)
                    if result is not None:
                        cases.append(
                            PatternCase(
                                pattern=pattern,
                                result=result,
                                range=make_range(
                                    self.tokens[seg_start], self.tokens[res_end - 1]
                                ),
                            )
                        )
                k += 2
                continue

            expression = self._parse_segment(seg_start, seg_end)
            if expression is not None:
                prelude.append(expression)
            k += 1

        if cases:
            body = PatternMatch(
                value=value,
                patterns=cases,
                range=make_range(self.tokens[start], self.tokens[end - 1]),
            )
            return body, prelude
        if prelude:
            return prelude[-1], prelude[:-1]
        return None, []

    def _find_scrutinee(self, start: int, end: int, parameters):
        """Primeiro parâmetro nos tokens iniciais do corpo, senão "bu"."""
        names = {p.name for p in parameters}
        for token in self.tokens[start:min(start + _SCRUTINEE_LOOKAHEAD, end)]:
            if token.kind is not TokenKind.IDENT:
                continue
            if token.text in names:
                return token.text, token
            base = resolve_base(token.text, names)
            if base in names:
                return base, token
        return DEFAULT_SCRUTINEE, self.tokens[start]

    def _conditional_base(self, word: str) -> Optional[str]:
        """
        Base de uma palavra no condicional (boşsa → boş, ekiyse → eki).

        Prioriza bases conhecidas; senão aplica a consoante de ligação:
        "ysa"/"yse" só depois de vogal.
        """
        candidates = [a for a in analyze_morphology(word) if a.case is Case.COND]
        if not candidates:
            return None
        for analysis in candidates:
            if analysis.base in self._known:
                return analysis.base
        for analysis in candidates:
            if analysis.suffix.startswith("y") and analysis.base[-1] not in _VOWELS:
                continue
            return analysis.base
        return candidates[-1].base

    def _is_pattern_segment(self, start: int, end: int) -> bool:
        last = self.tokens[end - 1]
        if last.kind in _PATTERN_KEYWORDS:
            return True
        return last.kind is TokenKind.IDENT and self._conditional_base(last.text) is not None

    def _parse_pattern(self, start: int, end: int, scrutinee: str):
        """
        Retorna (padrão, sujeito).

        padrão None representa "değilse". sujeito é a expressão casada
        quando o segmento a escreve explicitamente (ex: "(x'in sıfırlığı)
        doğruysa"), senão None.
        """
        last = self.tokens[end - 1]
        last_range = make_range(last, last)

        if last.kind is TokenKind.DEGILSE:
            return None, None
        if last.kind in (TokenKind.DOGRUYSA, TokenKind.YANLISSA):
            pattern = Literal(
                value=last.kind is TokenKind.DOGRUYSA,
                literal_type="boolean",
                range=last_range,
            )
            return pattern, self._pattern_subject(start, end - 1, scrutinee)
        if last.kind is TokenKind.YOKLUKSA:
            pattern = VariableReference(name="yokluk", range=last_range)
            return pattern, self._pattern_subject(start, end - 1, scrutinee)

        constructor = self._conditional_base(last.text)
        prefix = self.tokens[start:end - 1]
        if prefix and prefix[0].kind is TokenKind.IDENT and (
            prefix[0].text == scrutinee or self._resolve(prefix[0].text) == scrutinee
        ):
            prefix = prefix[1:]

        if all(t.kind is TokenKind.IDENT for t in prefix):
            if not prefix:
                return VariableReference(name=constructor, range=last_range), None
            binders = [
                VariableReference(name=self._resolve(t.text), range=make_range(t, t))
                for t in prefix
            ]
            pattern = FunctionCall(
                function_name=constructor,
                arguments=binders,
                range=make_range(prefix[0], last),
            )
            return pattern, None

        subject_start = start + (end - 1 - start - len(prefix))
        subject = self._parse_segment(subject_start, end - 1)
        return VariableReference(name=constructor, range=last_range), subject

    def _pattern_subject(self, start: int, end: int, scrutinee: str) -> Optional[Expression]:
        if start >= end:
            return None
        if end - start == 1:
            token = self.tokens[start]
            if token.kind is TokenKind.IDENT and (
                token.text == scrutinee or self._resolve(token.text) == scrutinee
            ):
                return None
        return self._parse_segment(start, end)

    # --- Expressões ---

    def _parse_statement(self, i: int) -> Tuple[List[Expression], int]:
        """
        Expressões de nível superior até o próximo ".".

        "<cond> doğruysa, <então>, değilse, <senão>" vira
        ConditionalExpression; demais segmentos viram uma expressão cada.
        """
        if self._kind(i) not in _EXPRESSION_START:
            return [], i

        end, next_i = self._statement_end(i)
        segments = self._split_segments(i, end)
        expressions: List[Expression] = []
        k = 0
        while k < len(segments):
            seg_start, seg_end = segments[k]
            conditional = self._parse_conditional(segments, k)
            if conditional is not None:
                expression, consumed = conditional
                expressions.append(expression)
                k += consumed
                continue
            expression = self._parse_segment(seg_start, seg_end)
            if expression is not None:
                expressions.append(expression)
            k += 1
        return expressions, next_i

    def _parse_conditional(self, segments, k: int):
        seg_start, seg_end = segments[k]
        last = self.tokens[seg_end - 1]
        if last.kind not in (TokenKind.DOGRUYSA, TokenKind.YANLISSA) or seg_end - 1 <= seg_start:
            return None
        if k + 1 >= len(segments):
            return None

        condition = self._parse_segment(seg_start, seg_end - 1)
        then_start, then_end = segments[k + 1]
        then_branch = self._parse_segment(then_start, then_end)
        if condition is None or then_branch is None:
            return None

        else_branch = None
        consumed = 2
        last_index = then_end - 1
        if k + 3 < len(segments):
            marker_start, marker_end = segments[k + 2]
            if marker_end - marker_start == 1 and self.tokens[marker_start].kind in _PATTERN_KEYWORDS:
                else_start, else_end = segments[k + 3]
                else_branch = self._parse_segment(else_start, else_end)
                consumed = 4
                last_index = else_end - 1

        node = ConditionalExpression(
            condition=condition,
            then_branch=then_branch,
            else_branch=else_branch,
            range=make_range(self.tokens[seg_start], self.tokens[last_index]),
        )
        return node, consumed

    def _parse_segment(self, start: int, end: int, depth: int = 0) -> Optional[Expression]:
        """
        Expressão formada pelos átomos de [start, end).

        Dois ou mais átomos terminando em identificador formam uma
        chamada: os anteriores são os argumentos. Grupos entre parênteses
        são descidos com pilha explícita, então o aninhamento é limitado
        só por max_depth.
        """
        # Quadro: [posição, fim, profundidade, átomos, "(" de abertura, último token]
        stack = [[start, end, depth, [], None, None]]
        while True:
            frame = stack[-1]
            child = self._collect_atoms(frame)
            if child is not None:
                stack.append(child)
                continue

            stack.pop()
            _, _, _, atoms, open_token, last_token = frame
            expression = self._combine_atoms(atoms)
            if not stack:
                return expression
            if expression is not None:
                stack[-1][3].append((expression, open_token, last_token))

    def _combine_atoms(self, atoms) -> Optional[Expression]:
        if not atoms:
            return None
        if len(atoms) == 1:
            return atoms[0][0]

        last_expr, first_token, last_token = atoms[-1]
        if isinstance(last_expr, VariableReference) and first_token is last_token:
            return FunctionCall(
                function_name=last_expr.name,
                arguments=[expr for expr, _, _ in atoms[:-1]],
                range=make_range(atoms[0][1], last_token),
            )
        return atoms[0][0]

    def _collect_atoms(self, frame):
        """
        Acumula (expressão, primeiro token, último token) no quadro.

        Para num "(" e devolve o quadro do grupo interno; devolve None
        quando o intervalo do quadro termina.
        """
        j, end, depth, atoms = frame[0], frame[1], frame[2], frame[3]
        while j < end:
            token = self.tokens[j]
            kind = token.kind

            if kind is TokenKind.LPAREN:
                close = self._matching_paren(j, end)
                last_token = self.tokens[min(close, end - 1)]
                frame[0] = self._skip_suffix(close + 1, end, last_token)
                if depth + 1 > self.max_depth:
                    self.truncated = True
                    j = frame[0]
                    continue
                return [j + 1, min(close, end), depth + 1, [], token, last_token]

            if kind in _NUMBER_KINDS or kind is TokenKind.STRING:
                atoms.append((self._literal(token), token, token))
                j = self._skip_suffix(j + 1, end, token)
                continue

            if kind in (TokenKind.DOGRU, TokenKind.YANLIS):
                literal = Literal(
                    value=kind is TokenKind.DOGRU,
                    literal_type="boolean",
                    range=make_range(token, token),
                )
                atoms.append((literal, token, token))
                j += 1
                continue

            if kind is TokenKind.IDENT:
                reference = VariableReference(
                    name=self._resolve(token.text), range=make_range(token, token)
                )
                atoms.append((reference, token, token))
                j += 1
                continue

            # Palavras-chave e pontuação restantes não formam átomos
            j += 1

        frame[0] = j
        return None

    def _skip_suffix(self, j: int, end: int, previous: Token) -> int:
        """Pula sufixo colado a um literal ou grupo: 5'e, "x"yı, (...)'nın."""
        if j >= end:
            return j
        token = self.tokens[j]
        if (
            token.kind is TokenKind.APOSTROPHE
            and j + 1 < end
            and self.tokens[j + 1].kind is TokenKind.IDENT
        ):
            return j + 2
        if token.kind is TokenKind.IDENT and token.start == previous.end:
            return j + 1
        return j

    def _literal(self, token: Token) -> Literal:
        token_range = make_range(token, token)
        if token.kind is TokenKind.STRING:
            return Literal(value=_unescape(token.text[1:-1]), literal_type="string", range=token_range)
        if token.kind is TokenKind.FLOAT:
            return Literal(value=float(token.text), literal_type="number", range=token_range)
        digits = token.text.split("'", 1)[0]
        return Literal(value=int(digits), literal_type="number", range=token_range)


def _unescape(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            out.append(_STRING_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)
