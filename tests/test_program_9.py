from pathlib import Path

from assemblescript.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_9_multiverse(capsys):
    with open(EXAMPLES / 'program_9.avenger', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['Iron Man', 'Captain America', 'Hulk']
