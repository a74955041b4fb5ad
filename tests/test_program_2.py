from pathlib import Path

from assemblescript.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_2_arithmetic(capsys):
    with open(EXAMPLES / 'program_2.avenger', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['9', '5', '14', '3.5', '1', '49']
