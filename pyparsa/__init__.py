# Core
from .Cursor import Cursor, UncheckedCursor, Mark, SourcePos
from .Result import Ok, Err, Result, catching
from .Errors import (
    ParseFailure, Never, CursorError, CoercionError, UnwrapError,
    coerce, can_coerce,
)
from .Parser import Parser, ParserLike, Parsable, as_parser, parser, run_parser

# Combinators
from .Combinators import (
    Sequence, Alternation, Repetition, Map, MapError, AndThen, Rewind, ConvertErrors, Lazy,
    pure, fail, lazy, choice, optional, many1, count, sep_by, between, trace,
)

# Ready-made parsers
from .Builtins import (
    next_char, satisfy, char, word, whitespace, literal, delimited,
    number, integer, floating, eof, UNICODE_WHITESPACE,
    CharError, EndOfInput, Unexpected, WordError, TakeError, NoSpace, NoMatch,
    DelimitedError, MissingOpener, MissingCloser, NumberError, NoWord, MalformedNumber, ExpectedEnd,
)
