from typing import Any, Dict, Optional, Set
from .errors import AssembleError, ErrorVal


MAX_ITERATIONS = 100_000


class Environment:
    """A scope mapping identifiers to values, chained to a parent scope.

    Lookup and assignment walk outward from the innermost scope to the root
    and use the first scope that declares the name. Constness is recorded
    per scope. `max_iterations` is the loop guard ceiling; child scopes
    inherit it from their parent.
    """
    def __init__(self, parent: Optional['Environment'] = None, max_iterations: Optional[int] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}
        self.consts: Set[str] = set()
        if max_iterations is None:
            max_iterations = parent.max_iterations if parent is not None else MAX_ITERATIONS
        self.max_iterations = max_iterations

    def declare(self, name: str, value: Any, is_const: bool = False) -> Any:
        if name in self.values:
            raise AssembleError(ErrorVal(
                'DuplicateDeclaration',
                f'cannot declare variable {name}, it is already defined in the scope'))
        self.values[name] = value
        if is_const:
            self.consts.add(name)
        return value

    def assign(self, name: str, value: Any) -> Any:
        env = self.resolve(name)
        if name in env.consts:
            raise AssembleError(ErrorVal('ConstReassignment', f'cannot reassign to const variable {name}'))
        env.values[name] = value
        return value

    def lookup(self, name: str) -> Any:
        return self.resolve(name).values[name]

    def resolve(self, name: str) -> 'Environment':
        if name in self.values:
            return self
        if self.parent is None:
            raise AssembleError(ErrorVal('UnresolvedIdentifier', f'cannot resolve {name} in the scope'))
        return self.parent.resolve(name)

    def clear(self) -> None:
        # only this scope's own bindings; ancestors are untouched
        self.values.clear()
        self.consts.clear()

    def guard_iteration(self, count: int) -> None:
        if count > self.max_iterations:
            raise AssembleError(ErrorVal(
                'IterationLimitExceeded',
                f'loop exceeded {self.max_iterations} iterations, possible infinite loop'))
