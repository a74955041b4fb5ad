import math

import pytest

from assemblescript import run_program, setup_global_scope
from assemblescript.errors import AssembleError
from assemblescript.std.strings import parse_int
from assemblescript.types import NullVal


def call(name, *args):
    env = setup_global_scope()
    return env.lookup(name).call(list(args), env)


def test_constants_are_declared_constant():
    env = setup_global_scope()
    assert env.lookup('SHIELD') is True
    assert env.lookup('HYDRA') is False
    assert env.lookup('null') == NullVal()
    for name in ('SHIELD', 'vision', 'len', 'sqrt'):
        assert name in env.consts


def test_vision_formats_values(capsys):
    run_program('vision(1, 2.5, SHIELD, HYDRA, null, "text", 1 / 0, 0 / 0);')
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['1', '2.5', 'true', 'false', 'null', 'text', 'Infinity', 'NaN']


def test_vision_without_arguments_prints_blank_lines(capsys):
    run_program('vision();')
    assert capsys.readouterr().out == '\n\n'


def test_vision_rejects_arrays():
    with pytest.raises(AssembleError) as excinfo:
        run_program('team t[1] = {1}; vision(t);')
    assert excinfo.value.kind == 'TypeError'


def test_assert_equal_failure(capsys):
    with pytest.raises(AssembleError) as excinfo:
        run_program('assertEqual(1 + 1, 3);')
    assert excinfo.value.kind == 'AssertionError'
    out = capsys.readouterr().out
    assert '❌Test failed!' in out


def test_assert_equal_type_mismatch():
    with pytest.raises(AssembleError) as excinfo:
        run_program('assertEqual("1", 1);')
    assert excinfo.value.kind == 'AssertionError'


@pytest.mark.parametrize('source, expected', [
    ('1', 'number'),
    ('"a"', 'string'),
    ('SHIELD', 'boolean'),
    ('null', 'null'),
    ('len', 'function'),
])
def test_type_of(source, expected):
    assert run_program(f'typeOf({source});') == expected


def test_type_of_user_values():
    assert run_program('assemble f() { } typeOf(f);') == 'function'
    assert run_program('team t[1] = {1}; typeOf(t);') == 'array'


@pytest.mark.parametrize('name, args, expected', [
    ('abs', (-3.5,), 3.5),
    ('floor', (-2.5,), -3.0),
    ('ceil', (2.1,), 3.0),
    ('round', (2.5,), 3.0),
    ('round', (-2.5,), -2.0),
    ('sqrt', (9.0,), 3.0),
    ('min', (4.0, -1.0), -1.0),
    ('max', (4.0, -1.0), 4.0),
    ('pow', (2.0, 3.0), 8.0),
    ('sin', (0.0,), 0.0),
    ('cos', (0.0,), 1.0),
    ('iTan', (0.0,), 0.0),
])
def test_number_natives(name, args, expected):
    assert call(name, *args) == expected


def test_number_natives_outside_domain():
    assert math.isnan(call('sqrt', -1.0))
    assert math.isnan(call('iSin', 2.0))
    assert call('floor', math.inf) == math.inf
    assert math.isnan(call('max', math.nan, 1.0))


def test_time_and_rand():
    assert call('time') > 0
    assert 0.0 <= call('rand') < 1.0


@pytest.mark.parametrize('name, args, expected', [
    ('len', ('hello',), 5.0),
    ('charAt', ('hello', 1.0), 'e'),
    ('charAt', ('hello', 10.0), ''),
    ('concat', ('a', 'b'), 'a b'),
    ('concat', ('a', 'b', ', '), 'a, b'),
    ('toLowerCase', ('HeLLo',), 'hello'),
    ('toUpperCase', ('HeLLo',), 'HELLO'),
    ('indexOf', ('banana', 'an'), 1.0),
    ('indexOf', ('banana', 'an', 2.0), 3.0),
    ('indexOf', ('banana', 'x'), -1.0),
    ('subStr', ('avengers', 1.0, 4.0), 'ven'),
    ('subStr', ('avengers', 4.0, 1.0), 'ven'),
    ('subStr', ('avengers', -5.0, 100.0), 'avengers'),
    ('trim', ('  hi  ',), 'hi'),
    ('parseInt', ('42',), 42.0),
    ('parseInt', ('  -17px',), -17.0),
    ('parseInt', ('ff', 16.0), 255.0),
    ('parseInt', ('0x1A',), 26.0),
])
def test_string_natives(name, args, expected):
    assert call(name, *args) == expected


def test_parse_int_without_digits_is_nan():
    assert math.isnan(parse_int('hero'))
    assert math.isnan(parse_int('12', 1))


@pytest.mark.parametrize('source', [
    'len(1);',
    'len("a", "b");',
    'sqrt("4");',
    'concat("a");',
    'typeOf();',
])
def test_natives_validate_arguments(source):
    with pytest.raises(AssembleError) as excinfo:
        run_program(source)
    assert excinfo.value.kind == 'TypeError'


def test_natives_cannot_be_reassigned():
    with pytest.raises(AssembleError) as excinfo:
        run_program('vision = 1;')
    assert excinfo.value.kind == 'ConstReassignment'
