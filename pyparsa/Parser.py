from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Generic, Optional, Protocol, Tuple, Type, TypeVar, Union

from .Cursor import Cursor
from .Errors import ParseFailure
from .Result import Result

T = TypeVar('T')  # Generic type for parser results
U = TypeVar('U')
P = TypeVar('P', bound='Parsable')


class ParserLike(Protocol[T]):
    """Anything callable on a cursor that returns `Ok(value)` or `Err(failure)`."""
    def __call__(self, cursor: Cursor) -> Result[T, Any]: ...


class Parser(Generic[T]):
    """
    A parsing step: consume a prefix of the cursor, return a value or a failure.

    `err_type` is the failure kind this parser declares. Composite parsers use
    the first constituent's `err_type` as their target and coerce every other
    constituent's failures into it. `None` means undeclared; a failure of an
    undeclared parser is coerced when a conversion exists and otherwise passes
    through composites unchanged.

    None of the builder methods touch a cursor; they return new parsers.
    """
    def __init__(self, parse_fn: Optional[Callable[[Cursor], Result[T, Any]]] = None,
                 err_type: Optional[type] = None, name: Optional[str] = None):
        self.parse_fn = parse_fn
        self.err_type = err_type
        self.name = name or getattr(parse_fn, '__name__', None) or type(self).__name__

    def run(self, cursor: Cursor) -> Result[T, Any]:
        """Run this parser. The only required operation; everything else is built on it."""
        return self.parse_fn(cursor)

    def __call__(self, cursor: Cursor) -> Result[T, Any]:
        return self.run(cursor)

    def __repr__(self) -> str:
        err = self.err_type.__name__ if self.err_type is not None else '?'
        return f"<{type(self).__name__} {self.name} err={err}>"

    # --- Derived operations ---

    def map(self, f: Callable[[T], U]) -> 'Parser[U]':
        from .Combinators import Map
        return Map(self, f)

    def map_error(self, f: Callable[[Any], Any], err_type: Optional[type] = None) -> 'Parser[T]':
        from .Combinators import MapError
        return MapError(self, f, err_type)

    def and_then(self, f: Callable[[T], Result[U, Any]]) -> 'Parser[U]':
        """Feed the value to a fallible conversion; its failure is coerced into this parser's failure type."""
        from .Combinators import AndThen
        return AndThen(self, f)

    def rewind_on_failure(self) -> 'Parser[T]':
        from .Combinators import Rewind
        return Rewind(self)

    def then(self, other: ParserLike[U]) -> 'Parser[Tuple[T, U]]':
        from .Combinators import Sequence
        return Sequence(self, other)

    def or_else(self, other: ParserLike[T]) -> 'Parser[T]':
        from .Combinators import Alternation
        return Alternation(self, other)

    def repeat(self) -> 'Parser[list]':
        from .Combinators import Repetition
        return Repetition(self)

    def after(self, other: ParserLike[Any]) -> 'Parser[T]':
        """Run `other` after this parser, keeping only this parser's value."""
        from .Combinators import Sequence
        return Sequence(self, other).map(lambda pair: pair[0])

    def convert_errors_to(self, target: type) -> 'Parser[T]':
        from .Combinators import ConvertErrors
        return ConvertErrors(self, target)

    # Sequence (&)
    def __and__(self, other: ParserLike[U]) -> 'Parser[Tuple[T, U]]':
        return self.then(other)

    # Alternative (|)
    def __or__(self, other: ParserLike[T]) -> 'Parser[T]':
        return self.or_else(other)

    # Sequence keeping the left value (<). Both operands must be Parsers:
    # `fn > p` reflects to `p < fn`.
    def __lt__(self, other: 'Parser[Any]') -> 'Parser[T]':
        if not isinstance(other, Parser):
            return NotImplemented
        return self.after(other)

    # Sequence keeping the right value (>)
    def __gt__(self, other: 'Parser[U]') -> 'Parser[U]':
        if not isinstance(other, Parser):
            return NotImplemented
        from .Combinators import Sequence
        return Sequence(self, other).map(lambda pair: pair[1])


def as_parser(p: Union[ParserLike[T], Type['Parsable']], err_type: Optional[type] = None) -> Parser[T]:
    """
    Bridge anything with the parser shape into a `Parser`.

    Accepts `Parser` instances (returned as-is unless `err_type` overrides),
    `Parsable` subclasses, and plain callables. A callable's failure type is
    taken from `err_type`, else from an `err_type` attribute set by `@parser`.
    """
    if isinstance(p, Parser):
        if err_type is None or err_type is p.err_type:
            return p
        return Parser(p.run, err_type, p.name)
    if isinstance(p, type) and issubclass(p, Parsable):
        return p.parser()
    if not callable(p):
        raise TypeError(f"{p!r} is not a parser")
    return Parser(p, err_type if err_type is not None else getattr(p, 'err_type', None))


def parser(fn: Optional[Callable[[Cursor], Result[T, Any]]] = None, *,
           err: Optional[type] = None) -> Any:
    """
    Decorator turning a `cursor -> Result` function into a `Parser`.

        @parser(err=WordError)
        def word(cursor): ...
    """
    def wrap(f: Callable[[Cursor], Result[T, Any]]) -> Parser[T]:
        return Parser(f, err, getattr(f, '__name__', None))
    if fn is not None:
        return wrap(fn)
    return wrap


class Parsable(ABC):
    """
    A type that knows how to parse itself.

    Subclasses implement `parse` and name its failure kind in `parse_error`:

        class Var(Parsable):
            parse_error = VarError

            @classmethod
            def parse(cls, cursor): ...
    """
    parse_error: ClassVar[Optional[type]] = ParseFailure

    @classmethod
    @abstractmethod
    def parse(cls: Type[P], cursor: Cursor) -> Result[P, Any]:
        ...

    @classmethod
    def parser(cls: Type[P]) -> Parser[P]:
        """This type's `parse` as a composable parser."""
        return Parser(cls.parse, cls.parse_error, cls.__name__)

    @classmethod
    def from_str(cls: Type[P], text: str, name: str = "") -> Result[P, Any]:
        return cls.parse(Cursor(text, name))


def run_parser(p: ParserLike[T], input_str: str, name: str = "") -> Result[T, Any]:
    """Run a parser over a fresh cursor on `input_str`."""
    return as_parser(p).run(Cursor(input_str, name))
