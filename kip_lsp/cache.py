"""
cache.py - Armazenamento de SymbolTables por documento

Propósito:
    Guarda o resultado da última análise de cada documento aberto para
    servir tokens semânticos, hover, completion e demais requisições sem
    reanalisar o texto.

Componentes principais:
    - CachedAnalysis: Tabelas + versão do documento + timestamp
    - DocumentStore: Dicionário de análises por URI

Notas de implementação:
    - Cada análise substitui a anterior por inteiro (nunca é mesclada)
    - Entradas são removidas no didClose para não crescer sem limite
    - Um documento tem no máximo uma análise em cache
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from kip_lsp.analyzer import SymbolTables

logger = logging.getLogger(__name__)


@dataclass
class CachedAnalysis:
    """Tabelas de símbolos em cache com versão e timestamp."""

    tables: SymbolTables
    version: Optional[int] = None
    timestamp: float = field(default_factory=time.time)


class DocumentStore:
    """Cache de SymbolTables por URI de documento."""

    def __init__(self):
        self._cache: Dict[str, CachedAnalysis] = {}

    def get(self, uri: str) -> Optional[CachedAnalysis]:
        """Retorna a análise em cache para o documento, ou None."""
        return self._cache.get(uri)

    def get_tables(self, uri: str) -> Optional[SymbolTables]:
        """Atalho: apenas as tabelas, ou None."""
        cached = self._cache.get(uri)
        return cached.tables if cached else None

    def put(self, uri: str, tables: SymbolTables, version: Optional[int] = None) -> None:
        """Armazena (substitui) a análise do documento."""
        self._cache[uri] = CachedAnalysis(tables=tables, version=version)
        logger.debug(f"Análise atualizada para: {uri} (versão {version})")

    def invalidate(self, uri: str) -> None:
        """Remove a análise do documento."""
        if self._cache.pop(uri, None):
            logger.info(f"Análise removida para: {uri}")

    def has(self, uri: str) -> bool:
        """Verifica se há análise em cache para o documento."""
        return uri in self._cache

    def items(self) -> Iterator[Tuple[str, CachedAnalysis]]:
        """(uri, análise) de todos os documentos, ordenados por URI."""
        for uri in sorted(self._cache):
            yield uri, self._cache[uri]

    def __len__(self) -> int:
        return len(self._cache)
