"""
Parsers that combine or manipulate other parsers.

Every class here is itself a `Parser`, so they nest without limit. Most have a
builder method on `Parser` (`then`, `or_else`, `repeat`, `map`, ...).

Error coercion rules: a composite reports a single failure type, its target.
The target is the failure type of the first parser in source order, or the one
given to `convert_errors_to`. Every other constituent's failure type must
convert into the target (see `ParseFailure.variant`); this is checked when the
composite is built. `Never` converts into anything, and a `Never` on the left
of a sequence yields the target to the right-hand side.

A constituent with no declared failure type (`err_type=None`) cannot be checked
up front. At run time its failures are coerced when a conversion exists and
otherwise pass through unchanged. A declared constituent that fails with a
value its declaration does not cover raises `CoercionError`.
"""
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from .Cursor import Cursor
from .Errors import Never, can_coerce, check_coercible, coerce
from .Parser import Parser, ParserLike, as_parser
from .Result import Ok, Err, Result

T = TypeVar('T')
U = TypeVar('U')


def _unify(left: Optional[type], right: Optional[type]) -> Optional[type]:
    """Target failure type of a sequence whose parts fail with `left` and `right`."""
    if left is Never:
        return right
    return left


def _coerce_from(declared: Optional[type], error: Any, target: Optional[type]) -> Any:
    """
    Coerce a constituent's failure into `target`. When the constituent declared
    no failure type and `error` has no conversion, it is returned unchanged.
    """
    if declared is None and not can_coerce(type(error), target):
        return error
    return coerce(error, target)


class Sequence(Parser[Tuple[T, U]]):
    """
    Runs `p1` then `p2`, returning both values as a pair.

    A failure of `p1` is returned as-is and `p2` never runs. Nothing is rewound:
    if `p2` fails, whatever `p1` consumed stays consumed. Wrap the sequence in
    `Rewind` to undo that.
    """
    def __init__(self, p1: ParserLike[T], p2: ParserLike[U]):
        self.p1 = as_parser(p1)
        self.p2 = as_parser(p2)
        target = _unify(self.p1.err_type, self.p2.err_type)
        check_coercible(self.p1.err_type, target)
        check_coercible(self.p2.err_type, target)
        super().__init__(err_type=target, name=f"({self.p1.name} & {self.p2.name})")

    def run(self, cursor: Cursor) -> Result[Tuple[T, U], Any]:
        first = self.p1.run(cursor)
        if isinstance(first, Err):
            return Err(_coerce_from(self.p1.err_type, first.error, self.err_type))
        second = self.p2.run(cursor)
        if isinstance(second, Err):
            return Err(_coerce_from(self.p2.err_type, second.error, self.err_type))
        return Ok((first.value, second.value))


class Alternation(Parser[T]):
    """
    Tries `p1`; if it fails, rewinds and tries `p2` from the same position.

    First match wins: when `p1` succeeds `p2` never runs. The failure of `p1`
    is dropped and the failure of `p2` is reported, coerced into `p1`'s type.
    When both fail the cursor is left where the alternation started.
    """
    def __init__(self, p1: ParserLike[T], p2: ParserLike[T]):
        self.p1 = as_parser(p1)
        self.p2 = as_parser(p2)
        check_coercible(self.p2.err_type, self.p1.err_type)
        super().__init__(err_type=self.p1.err_type, name=f"({self.p1.name} | {self.p2.name})")

    def run(self, cursor: Cursor) -> Result[T, Any]:
        start = cursor.mark()
        first = self.p1.run(cursor)
        if isinstance(first, Ok):
            return first
        cursor.unchecked.set_offset(start)
        second = self.p2.run(cursor)
        if isinstance(second, Err):
            cursor.unchecked.set_offset(start)
            return Err(_coerce_from(self.p2.err_type, second.error, self.err_type))
        return second


class Repetition(Parser[List[T]]):
    """
    Applies `p` until it fails, collecting the values in input order.

    Each attempt is rewound on failure, and the failure only ends the loop, so
    a repetition never fails. An attempt that succeeds without consuming input
    also ends the loop (and is not collected); otherwise it would never stop.
    """
    def __init__(self, p: ParserLike[T]):
        self.p = as_parser(p)
        super().__init__(err_type=Never, name=f"{self.p.name}*")

    def run(self, cursor: Cursor) -> Result[List[T], Never]:
        out: List[T] = []
        while True:
            start = cursor.mark()
            res = self.p.run(cursor)
            if isinstance(res, Err):
                cursor.unchecked.set_offset(start)
                break
            if cursor.offset == start.offset:
                break
            out.append(res.value)
        return Ok(out)


class Map(Parser[U]):
    """Transforms the success value of `p` with `f`. Failures pass through."""
    def __init__(self, p: ParserLike[T], f: Callable[[T], U]):
        self.p = as_parser(p)
        self.f = f
        super().__init__(err_type=self.p.err_type, name=self.p.name)

    def run(self, cursor: Cursor) -> Result[U, Any]:
        res = self.p.run(cursor)
        if isinstance(res, Ok):
            return Ok(self.f(res.value))
        return res


class MapError(Parser[T]):
    """Transforms the failure of `p` with `f`. `err_type` declares the new failure type."""
    def __init__(self, p: ParserLike[T], f: Callable[[Any], Any], err_type: Optional[type] = None):
        self.p = as_parser(p)
        self.f = f
        super().__init__(err_type=err_type, name=self.p.name)

    def run(self, cursor: Cursor) -> Result[T, Any]:
        res = self.p.run(cursor)
        if isinstance(res, Err):
            return Err(self.f(res.error))
        return res


class AndThen(Parser[U]):
    """
    Feeds the value of `p` to `f`, which returns a `Result` of its own.

    A failure from `f` is coerced into `p`'s failure type when a conversion
    exists, and returned unchanged otherwise. Nothing is rewound when `f`
    rejects the value.
    """
    def __init__(self, p: ParserLike[T], f: Callable[[T], Result[U, Any]]):
        self.p = as_parser(p)
        self.f = f
        target = None if self.p.err_type is Never else self.p.err_type
        super().__init__(err_type=target, name=self.p.name)

    def run(self, cursor: Cursor) -> Result[U, Any]:
        res = self.p.run(cursor)
        if isinstance(res, Err):
            return res
        converted = self.f(res.value)
        if isinstance(converted, Err):
            return Err(_coerce_from(None, converted.error, self.err_type))
        return converted


class Rewind(Parser[T]):
    """
    Runs `p`, restoring the cursor to where it started if `p` fails.

    This is the only combinator that backtracks on behalf of its caller.
    """
    def __init__(self, p: ParserLike[T]):
        self.p = as_parser(p)
        super().__init__(err_type=self.p.err_type, name=self.p.name)

    def run(self, cursor: Cursor) -> Result[T, Any]:
        start = cursor.mark()
        res = self.p.run(cursor)
        if isinstance(res, Err):
            cursor.unchecked.set_offset(start)
        return res


class ConvertErrors(Parser[T]):
    """Coerces every failure of `p` into `target`, making it the target of later composites."""
    def __init__(self, p: ParserLike[T], target: type):
        self.p = as_parser(p)
        check_coercible(self.p.err_type, target)
        super().__init__(err_type=target, name=self.p.name)

    def run(self, cursor: Cursor) -> Result[T, Any]:
        res = self.p.run(cursor)
        if isinstance(res, Err):
            return Err(_coerce_from(self.p.err_type, res.error, self.err_type))
        return res


class Lazy(Parser[T]):
    """Defers building a parser until it first runs, for recursive grammars."""
    def __init__(self, thunk: Callable[[], ParserLike[T]], err_type: Optional[type] = None):
        self.thunk = thunk
        self._parser: Optional[Parser[T]] = None
        super().__init__(err_type=err_type, name=getattr(thunk, '__name__', 'lazy'))

    def run(self, cursor: Cursor) -> Result[T, Any]:
        if self._parser is None:
            self._parser = as_parser(self.thunk())
        res = self._parser.run(cursor)
        if isinstance(res, Err):
            return Err(_coerce_from(self._parser.err_type, res.error, self.err_type))
        return res


# 1. pure: Succeeds with a value without consuming input
def pure(value: T) -> Parser[T]:
    """A parser that always succeeds with `value` and consumes nothing."""
    return Parser(lambda _cursor: Ok(value), Never, f"pure({value!r})")


# 2. fail: Always fails with the given failure
def fail(error: Any) -> Parser[Any]:
    """A parser that always fails with `error` and consumes nothing."""
    return Parser(lambda _cursor: Err(error), type(error), f"fail({error!r})")


# 3. lazy: Recursive grammar support
def lazy(thunk: Callable[[], ParserLike[T]], err_type: Optional[type] = None) -> Parser[T]:
    return Lazy(thunk, err_type)


# 4. choice: Tries parsers in order until one succeeds
def choice(*parsers: ParserLike[T]) -> Parser[T]:
    """
    Alternation over any number of parsers, first match wins.
    Failures are coerced into the first parser's failure type.
    """
    if not parsers:
        raise ValueError("choice() needs at least one alternative")
    result = as_parser(parsers[0])
    for p in parsers[1:]:
        result = Alternation(result, p)
    return result


# 5. optional: Tries a parser, None on failure
def optional(p: ParserLike[T]) -> Parser[Optional[T]]:
    """Tries `p`; returns its value, or None (with the cursor restored) if it fails. Never fails."""
    attempt = Rewind(p)

    def parse(cursor: Cursor) -> Result[Optional[T], Never]:
        res = attempt.run(cursor)
        if isinstance(res, Ok):
            return res
        return Ok(None)
    return Parser(parse, Never, f"{attempt.name}?")


# 6. many1: Applies a parser one or more times
def many1(p: ParserLike[T]) -> Parser[List[T]]:
    """Like `Repetition`, but fails with `p`'s failure if there is not even one match."""
    p = as_parser(p)
    return Sequence(p, Repetition(p)).map(lambda pair: [pair[0]] + pair[1])


# 7. count: Parses exactly n occurrences of a parser
def count(n: int, p: ParserLike[T]) -> Parser[List[T]]:
    p = as_parser(p)

    def parse(cursor: Cursor) -> Result[List[T], Any]:
        results: List[T] = []
        for _ in range(n):
            res = p.run(cursor)
            if isinstance(res, Err):
                return res
            results.append(res.value)
        return Ok(results)
    return Parser(parse, p.err_type, f"{p.name}{{{n}}}")


# 8. sep_by: Zero or more occurrences separated by a separator
def sep_by(p: ParserLike[T], sep: ParserLike[Any]) -> Parser[List[T]]:
    """
    Parses zero or more `p` separated by `sep`. Never fails; a trailing
    separator that is not followed by `p` is left unconsumed. A separator and
    item that together consume nothing end the list, like `Repetition`.
    """
    p = as_parser(p)
    sep = as_parser(sep)

    def parse(cursor: Cursor) -> Result[List[T], Never]:
        start = cursor.mark()
        first = p.run(cursor)
        if isinstance(first, Err):
            cursor.unchecked.set_offset(start)
            return Ok([])
        results = [first.value]
        while True:
            start = cursor.mark()
            if isinstance(sep.run(cursor), Err):
                cursor.unchecked.set_offset(start)
                break
            item = p.run(cursor)
            if isinstance(item, Err) or cursor.offset == start.offset:
                cursor.unchecked.set_offset(start)
                break
            results.append(item.value)
        return Ok(results)
    return Parser(parse, Never, f"sep_by({p.name}, {sep.name})")


# 9. between: Parses open, p, close and keeps p's value
def between(open: ParserLike[Any], close: ParserLike[Any], p: ParserLike[T]) -> Parser[T]:
    """Failures of `p` and `close` are coerced into `open`'s failure type."""
    return Sequence(Sequence(open, p), close).map(lambda t: t[0][1])


# 10. trace: Debugging aid that prints the remaining input
def trace(label: str, p: ParserLike[T]) -> Parser[T]:
    """Prints where `p` is entered and why it failed, if it does. Consumption is unchanged."""
    p = as_parser(p)

    def parse(cursor: Cursor) -> Result[T, Any]:
        rest = cursor.remaining()
        print(f"{label}: \"{rest[:30]}{'...' if len(rest) > 30 else ''}\" at {cursor.position()}")
        res = p.run(cursor)
        if isinstance(res, Err):
            print(f"{label} failed: {res.error}")
        return res
    return Parser(parse, p.err_type, label)
