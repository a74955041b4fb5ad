import io
import json

import pytest

from assemblescript.__main__ import main


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding='utf-8')
    return path


def test_run_program_file(tmp_path, capsys):
    path = write(tmp_path, 'hello.avenger', 'vision(concat("Hello", "Wakanda"));')
    main([str(path)])
    assert capsys.readouterr().out.strip() == 'Hello Wakanda'


def test_runtime_error_exits_with_status_1(tmp_path, capsys):
    path = write(tmp_path, 'broken.avenger', 'vision(1);\nvision(ghost);\n')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out.strip() == '1'
    assert captured.err.strip() == 'Runtime error: UnresolvedIdentifier: cannot resolve ghost in the scope (line 2)'


def test_syntax_error_exits_with_status_1(tmp_path, capsys):
    path = write(tmp_path, 'bad.avenger', 'newAvenger = ;')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith('Runtime error: SyntaxError')


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.avenger')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_max_iterations_flag(tmp_path, capsys):
    path = write(tmp_path, 'loop.avenger', 'wakandaForEach (i in 1 to 20) { }\nvision("ok");\n')
    main(['--max-iterations', '50', str(path)])
    assert capsys.readouterr().out.strip() == 'ok'
    with pytest.raises(SystemExit):
        main(['--max-iterations', '10', str(path)])
    assert 'IterationLimitExceeded' in capsys.readouterr().err


def test_emit_ast_then_run_it(tmp_path, capsys):
    path = write(tmp_path, 'sum.avenger', 'newAvenger a = 40;\nvision(a + 2);\n')
    main(['--emit-ast', str(path)])
    out_path = tmp_path / 'sum.avenger.ast.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    data = json.loads(out_path.read_text(encoding='utf-8'))
    assert data['type'] == 'Program'
    assert data['body'][1]['line'] == 2
    main(['--ast', str(out_path)])
    assert capsys.readouterr().out.strip() == '42'


def test_debug_file_written(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    path = write(tmp_path, 'traced.avenger', 'assemble f(x) { snap x; }\nvision(f(1));\n')
    main(['-vv', str(path)])
    trace = (tmp_path / 'debug.txt').read_text(encoding='utf-8')
    assert 'program start' in trace
    assert 'define function f(x)' in trace
    assert 'call f(1)' in trace
    assert capsys.readouterr().out.strip() == '1'


def test_repl_keeps_bindings_and_survives_errors(monkeypatch, capsys):
    lines = 'newAvenger a = 2;\nvision(missing);\nvision(a * 3);\nexit\n'
    monkeypatch.setattr('sys.stdin', io.StringIO(lines))
    main([])
    captured = capsys.readouterr()
    # prompts share the line with the printed value
    assert any(line.endswith('6') for line in captured.out.split('\n'))
    assert 'UnresolvedIdentifier' in captured.err


@pytest.mark.parametrize('text', [
    '{"type": "Program", "body": [',
    '{"type": "Bogus", "body": []}',
])
def test_bad_ast_file_exits_with_status_1(tmp_path, capsys, text):
    path = write(tmp_path, 'bad.ast.json', text)
    with pytest.raises(SystemExit) as excinfo:
        main(['--ast', str(path)])
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith('Runtime error: ')
