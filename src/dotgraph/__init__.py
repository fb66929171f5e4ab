"""dotgraph: read Graphviz DOT text into an immutable graph model.

Pipeline: ``tokenize`` → ``parse_ast`` → ``convert``, wrapped by ``parse``.
"""

from dotgraph.exceptions import (
    DotGraphError,
    DotSyntaxError,
    LexicalError,
    LimitExceededError,
    ParseError,
)
from dotgraph.models import (
    Attr,
    AttrTarget,
    Compass,
    Edge,
    Graph,
    Node,
    Port,
    Subgraph,
    get_attr,
)
from dotgraph.parser import (
    DotParser,
    ParserConfig,
    convert,
    parse,
    parse_ast,
    parse_dot_file,
    parse_dot_string,
    tokenize,
)
from dotgraph.render import escape_dot_string, quote_id, render_dot

__version__ = "0.1.0"

__all__ = [
    "Attr",
    "AttrTarget",
    "Compass",
    "DotGraphError",
    "DotParser",
    "DotSyntaxError",
    "Edge",
    "Graph",
    "LexicalError",
    "LimitExceededError",
    "Node",
    "ParseError",
    "ParserConfig",
    "Port",
    "Subgraph",
    "__version__",
    "convert",
    "escape_dot_string",
    "get_attr",
    "parse",
    "parse_ast",
    "parse_dot_file",
    "parse_dot_string",
    "quote_id",
    "render_dot",
    "tokenize",
]
