import pytest

from assemblescript.environment import Environment, MAX_ITERATIONS
from assemblescript.errors import AssembleError


def test_declare_and_lookup():
    env = Environment()
    assert env.declare('x', 1.0) == 1.0
    assert env.lookup('x') == 1.0


def test_duplicate_declaration_in_same_scope():
    env = Environment()
    env.declare('x', 1.0)
    with pytest.raises(AssembleError) as excinfo:
        env.declare('x', 2.0)
    assert excinfo.value.kind == 'DuplicateDeclaration'


def test_redeclare_in_child_scope_shadows_parent():
    parent = Environment()
    parent.declare('x', 1.0)
    child = Environment(parent=parent)
    child.declare('x', 2.0)
    assert child.lookup('x') == 2.0
    assert parent.lookup('x') == 1.0


def test_assign_walks_to_owning_scope():
    parent = Environment()
    parent.declare('x', 1.0)
    child = Environment(parent=parent)
    assert child.assign('x', 5.0) == 5.0
    assert parent.lookup('x') == 5.0
    assert 'x' not in child.values


def test_unresolved_identifier():
    env = Environment(parent=Environment())
    with pytest.raises(AssembleError) as excinfo:
        env.lookup('missing')
    assert excinfo.value.kind == 'UnresolvedIdentifier'
    with pytest.raises(AssembleError) as excinfo:
        env.assign('missing', 1.0)
    assert excinfo.value.kind == 'UnresolvedIdentifier'


def test_const_reassignment():
    env = Environment()
    env.declare('PI', 3.14, is_const=True)
    child = Environment(parent=env)
    with pytest.raises(AssembleError) as excinfo:
        child.assign('PI', 3.0)
    assert excinfo.value.kind == 'ConstReassignment'
    assert env.lookup('PI') == 3.14


def test_resolve_returns_nearest_owner():
    root = Environment()
    root.declare('x', 1.0)
    middle = Environment(parent=root)
    middle.declare('x', 2.0)
    leaf = Environment(parent=middle)
    assert leaf.resolve('x') is middle


def test_clear_only_touches_own_bindings():
    parent = Environment()
    parent.declare('x', 1.0)
    child = Environment(parent=parent)
    child.declare('y', 2.0, is_const=True)
    child.clear()
    assert child.values == {}
    assert child.consts == set()
    assert child.lookup('x') == 1.0
    # a cleared constant can be declared again
    child.declare('y', 3.0)


def test_guard_iteration_ceiling():
    env = Environment(max_iterations=3)
    env.guard_iteration(3)
    with pytest.raises(AssembleError) as excinfo:
        env.guard_iteration(4)
    assert excinfo.value.kind == 'IterationLimitExceeded'


def test_child_inherits_iteration_ceiling():
    parent = Environment(max_iterations=10)
    assert Environment(parent=parent).max_iterations == 10
    assert Environment().max_iterations == MAX_ITERATIONS
