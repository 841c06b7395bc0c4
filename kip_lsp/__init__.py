"""
kip_lsp - Language Server Protocol para a linguagem Kip

Propósito:
    Motor de análise da linguagem Kip (lexer, morfologia turca, parser,
    tabelas de símbolos, tokens semânticos) e servidor LSP que o expõe a
    editores compatíveis.

Componentes principais:
    - lexer / morphology / parser / analyzer: Motor de análise
    - semantic_tokens: Colorização semântica
    - hover / completion / definition / references / symbols: Features de IDE
    - server: Servidor principal usando pygls

Dependências críticas:
    - pygls: Framework LSP
    - lsprotocol: Tipos do protocolo

Exemplo de uso:
    python -m kip_lsp.server
"""
from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("kip-lsp")
except PackageNotFoundError:
    # Checkout sem instalação (python -m kip_lsp.server na raiz)
    __version__ = "0.0.0+local"

__all__ = ["analyzer", "parser", "server", "semantic_tokens"]
