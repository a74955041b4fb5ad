from pathlib import Path

from assemblescript.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_10_closures(capsys):
    with open(EXAMPLES / 'program_10.avenger', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    # each call to makeCounter captures its own count
    assert out_lines == ['3', '1']
