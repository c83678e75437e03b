from hypothesis import given, strategies as st

from pyparsa.Builtins import (
    next_char, satisfy, char, word, whitespace, literal, delimited, number, integer, floating, eof,
    UNICODE_WHITESPACE,
    CharError, EndOfInput, Unexpected, WordError, TakeError, NoSpace, NoMatch,
    DelimitedError, MissingOpener, MissingCloser, NumberError, NoWord, MalformedNumber, ExpectedEnd,
)
from pyparsa.Cursor import Cursor
from pyparsa.Errors import Never, ParseFailure
from pyparsa.Result import Ok, Err

from conftest import run_on, assert_ok, assert_err


# --- next_char / satisfy / char ---

def test_next_char():
    c = Cursor("abc")
    assert next_char.run(c) == Ok("a")
    assert next_char.run(c) == Ok("b")
    assert next_char.run(c) == Ok("c")
    assert next_char.run(c) == Err(EndOfInput())


def test_next_char_on_empty_input():
    res, c = run_on(next_char, "")
    assert_err(res, EndOfInput)
    assert str(res.error) == "unexpected end of input"


def test_satisfy_does_not_consume_on_mismatch():
    p = satisfy(str.isdigit, "digit")
    assert p.err_type is CharError
    res, c = run_on(p, "x1")
    assert res == Err(Unexpected("x", "digit"))
    assert str(res.error) == "unexpected 'x', expecting digit"
    assert c.offset == 0


@given(st.characters())
def test_char_parser(ch):
    assert_ok(run_on(char(ch), ch)[0], ch)
    other = chr(ord(ch) + 1) if ord(ch) < 0x10FFFF else chr(0)
    assert_err(run_on(char(ch), other)[0], Unexpected)


# --- word ---

def test_word_then_whitespace_then_word():
    p = word.then(whitespace).then(word)
    res, c = run_on(p, "abc 123")
    assert_ok(res, (("abc", 1), "123"))
    assert c.at_end()


def test_word_stops_before_whitespace():
    res, c = run_on(word, "abc 123")
    assert_ok(res, "abc")
    assert c.remaining() == " 123"


def test_word_other_whitespace():
    res, c = run_on(word, "abc\tdef")
    assert_ok(res, "abc")
    assert c.remaining() == "\tdef"


def test_word_fails_on_empty():
    for text in ["", " abc", "\nabc"]:
        res, c = run_on(word, text)
        assert res == Err(WordError())
        assert c.offset == 0


def test_word_stops_only_at_unicode_whitespace():
    res, c = run_on(word, "a\x1cb\x1fc d")
    assert_ok(res, "a\x1cb\x1fc")
    assert c.remaining() == " d"

    for ws in ["\u00a0", "\u2003", "\u3000", "\x85", "\u2028"]:
        res, c = run_on(word, "ab" + ws + "cd")
        assert_ok(res, "ab")
        assert c.remaining() == ws + "cd"


@given(st.text())
def test_word_reads_up_to_first_space(text):
    res, c = run_on(word, text)
    head = ""
    for ch in text:
        if ch in UNICODE_WHITESPACE:
            break
        head += ch
    if head:
        assert_ok(res, head)
    else:
        assert_err(res, WordError)
    assert c.remaining() == text[len(head):]


# --- whitespace ---

def test_whitespace_counts_spaces():
    res, c = run_on(whitespace, "    abc")
    assert_ok(res, 4)
    assert c.remaining() == "abc"


def test_whitespace_never_fails():
    assert whitespace.err_type is Never
    res, c = run_on(whitespace, "abc")
    assert_ok(res, 0)
    assert c.offset == 0
    res, c = run_on(whitespace, "   ")
    assert_ok(res, 3)
    assert c.at_end()


def test_whitespace_only_ascii_space():
    res, c = run_on(whitespace, " \tx")
    assert_ok(res, 1)
    assert c.remaining() == "\tx"


# --- literal ---

def test_literal_match():
    res, c = run_on(literal("ab"), "abc 123")
    assert_ok(res, "ab")
    assert c.remaining() == "c 123"


def test_literal_mismatch_keeps_consumption():
    p = literal("abc")
    assert p.err_type is TakeError
    res, c = run_on(p, "abd!")
    assert res == Err(NoMatch("abc", "abd"))
    assert c.remaining() == "!"


def test_literal_mismatch_with_rewind():
    res, c = run_on(literal("abc").rewind_on_failure(), "abd!")
    assert_err(res, NoMatch)
    assert c.remaining() == "abd!"


def test_literal_insufficient_input():
    res, c = run_on(literal("abc"), "ab")
    assert res == Err(NoSpace("abc"))
    assert c.offset == 0


def test_literal_exact_fit():
    res, c = run_on(literal("abc"), "abc")
    assert_ok(res, "abc")
    assert c.at_end()


# --- delimited ---

def test_delimited_segment():
    res, c = run_on(delimited("(", ")"), "(abc) ")
    assert_ok(res, "abc")
    assert c.remaining() == " "


def test_delimited_multichar_delimiters():
    res, c = run_on(delimited("<!--", "-->"), "<!--hello world-->rest")
    assert_ok(res, "hello world")
    assert c.remaining() == "rest"


def test_delimited_empty_segment():
    assert_ok(run_on(delimited('"', '"'), '""')[0], "")


def test_delimited_missing_opener():
    p = delimited("(", ")")
    assert p.err_type is DelimitedError
    res, c = run_on(p, "abc)")
    assert res == Err(MissingOpener("("))
    assert c.offset == 0


def test_delimited_missing_closer():
    res, c = run_on(delimited("(", ")"), "(abc")
    assert res == Err(MissingCloser(")"))
    assert c.remaining() == "abc"


# --- numbers ---

def test_integer():
    res, c = run_on(integer, "123 rest")
    assert_ok(res, 123)
    assert c.remaining() == " rest"
    assert_ok(run_on(integer, "-42")[0], -42)
    assert integer.err_type is NumberError


def test_integer_no_word():
    res, _ = run_on(integer, " 12")
    assert_err(res, NoWord)
    assert res.error.source == WordError()


def test_integer_malformed():
    res, c = run_on(integer, "12abc")
    assert_err(res, MalformedNumber)
    assert isinstance(res.error.source, ValueError)
    assert c.at_end()


def test_floating():
    assert_ok(run_on(floating, "2.5")[0], 2.5)
    assert_ok(run_on(floating, "1e3")[0], 1000.0)
    assert_err(run_on(floating, "2.5.1")[0], MalformedNumber)


def test_custom_number():
    hexadecimal = number(lambda s: int(s, 16))
    assert_ok(run_on(hexadecimal, "ff")[0], 255)
    assert_err(run_on(hexadecimal, "zz")[0], MalformedNumber)


@given(st.integers())
def test_integer_roundtrip(n):
    assert_ok(run_on(integer, f"{n} tail")[0], n)


# --- eof ---

def test_eof():
    assert_ok(run_on(eof, "")[0], None)
    res, _ = run_on(eof, "abc")
    assert res == Err(ExpectedEnd("abc"))
    assert str(res.error) == "expected end of input, found 'abc'"


class LineError(ParseFailure):
    pass


@LineError.variant(WordError)
class LineWordError(LineError):
    pass


@LineError.variant(ExpectedEnd)
class TrailingInput(LineError):
    pass


def test_single_word_line():
    p = word.convert_errors_to(LineError).after(whitespace).after(eof)
    assert p.err_type is LineError
    assert_ok(run_on(p, "abc  ")[0], "abc")
    res, _ = run_on(p, "abc def")
    assert_err(res, TrailingInput)
    assert res.error.source == ExpectedEnd("def")
    assert_err(run_on(p, "")[0], LineWordError)
