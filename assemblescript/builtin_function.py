from dataclasses import dataclass
from typing import Any, Callable, List


@dataclass
class NativeFunction:
    """A host function callable from AssembleScript.

    `fn` receives the evaluated argument list and the caller's environment
    and must return a runtime value (use `NullVal()` for nothing).
    """
    name: str
    fn: Callable[[List[Any], Any], Any]

    def call(self, args: List[Any], env: Any) -> Any:
        return self.fn(args, env)

    def __repr__(self) -> str:
        return f"<native {self.name}>"
