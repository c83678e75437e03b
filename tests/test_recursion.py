import sys

from pyparsa.Builtins import char, word, whitespace
from pyparsa.Combinators import sep_by
from pyparsa.Parser import run_parser


def test_stack_safety():
    sys.setrecursionlimit(1000)
    n = 5000
    input_str = "a" * n
    res = run_parser(char('a').repeat(), input_str)
    assert res.is_ok()
    assert len(res.unwrap()) == n


def test_long_separated_list():
    n = 3000
    res = run_parser(sep_by(word, whitespace), " ".join(["w"] * n))
    assert len(res.unwrap()) == n
