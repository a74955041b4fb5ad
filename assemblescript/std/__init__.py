from typing import Optional

from assemblescript.environment import Environment
from assemblescript.types import NullVal
from .general import populate_general
from .number import populate_number
from .strings import populate_string


def setup_global_scope(max_iterations: Optional[int] = None) -> Environment:
    """Create the root scope: constants plus every native function."""
    env = Environment(max_iterations=max_iterations)
    env.declare('SHIELD', True, is_const=True)
    env.declare('HYDRA', False, is_const=True)
    env.declare('null', NullVal(), is_const=True)
    populate_general(env)
    populate_number(env)
    populate_string(env)
    return env
