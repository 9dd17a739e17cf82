"""
Variable scopes for the Thor interpreter.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .values import Value


@dataclass
class Scope:
    """
    A named symbol table.

    The global scope has no parent. Every function call gets a child of
    the global scope, so a function body sees its parameters and the
    globals but never the caller's locals.
    """
    name: str = "<program>"
    symbols: Dict[str, Value] = field(default_factory=dict)
    parent: Optional["Scope"] = field(default=None, repr=False)

    def get(self, name: str) -> Optional[Value]:
        """Look up a name in this scope, then in the parent chain."""
        if name in self.symbols:
            return self.symbols[name]
        if self.parent is not None:
            return self.parent.get(name)
        return None

    def set(self, name: str, value: Value) -> None:
        """Bind a name in this scope, overwriting any existing binding."""
        self.symbols[name] = value

    def contains(self, name: str) -> bool:
        return self.get(name) is not None

    @property
    def globals(self) -> "Scope":
        """The root of the scope chain."""
        scope = self
        while scope.parent is not None:
            scope = scope.parent
        return scope

    def child(self, name: str) -> "Scope":
        """Create an empty scope whose parent is this one."""
        return Scope(name=name, parent=self)
