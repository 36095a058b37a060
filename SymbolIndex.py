"""Definition index for the Symbols menu."""

import re
from dataclasses import dataclass
from typing import Dict, List

from SexpNavigation import CODE, TextSnapshot

FUNCTIONS = "Functions"
TYPES = "Types"
VARIABLES = "Variables"
NAMESPACES = "Namespaces"

DEFINITION_KINDS: Dict[str, str] = {
    "ns": NAMESPACES,
    "defn": FUNCTIONS,
    "defn-": FUNCTIONS,
    "defmacro": FUNCTIONS,
    "defmulti": FUNCTIONS,
    "defmethod": FUNCTIONS,
    "defrecord": TYPES,
    "deftype": TYPES,
    "defprotocol": TYPES,
    "definterface": TYPES,
    "defstruct": TYPES,
}

# (defXXX ^meta ^{:doc "..."} name ...), "default..." is not a definition form
_DEFINITION_RE = re.compile(
    r"\((ns|def(?!ault)[\w\-!?*]*)\s+"
    r"(?:\^(?:\{[^{}]*\}|[^\s()\[\]{}]+)\s+)*"
    r"([^\s()\[\]{}\"',;^@~`]+)"
)


@dataclass(frozen=True)
class Symbol:
    name: str
    kind: str
    position: int
    line: int


def build_symbol_index(text: str) -> List[Symbol]:
    """Return the definitions found in ``text`` in buffer order.

    Forms that start inside strings or comments are skipped.
    """
    snapshot = TextSnapshot(text)
    symbols: List[Symbol] = []
    for match in _DEFINITION_RE.finditer(text):
        if snapshot.kind(match.start()) != CODE:
            continue
        form = match.group(1)
        position = match.start(2)
        symbols.append(
            Symbol(
                name=match.group(2),
                kind=DEFINITION_KINDS.get(form, VARIABLES),
                position=position,
                line=text.count("\n", 0, position) + 1,
            )
        )
    return symbols


def group_symbols(symbols: List[Symbol]) -> Dict[str, List[Symbol]]:
    """Group symbols by kind, kinds ordered by first appearance."""
    groups: Dict[str, List[Symbol]] = {}
    for symbol in symbols:
        groups.setdefault(symbol.kind, []).append(symbol)
    return groups
