from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Generic, Type, TypeVar, Union

from .Errors import UnwrapError

T = TypeVar('T')  # Success value
E = TypeVar('E')  # Failure value
U = TypeVar('U')


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful parse carrying its value."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Any:
        raise UnwrapError(f"called unwrap_err() on {self!r}", self.value)

    def unwrap_or(self, default: Any) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> 'Ok[U]':
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], Any]) -> 'Ok[T]':
        return self

    def replace(self, value: U) -> 'Ok[U]':
        return Ok(value)

    def replace_err(self, error: Any) -> 'Ok[T]':
        return self

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed parse carrying its failure value. The failure is data, never raised here."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """Raise the failure if it is an exception, otherwise raise `UnwrapError`."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise UnwrapError(f"called unwrap() on {self!r}", self.error)

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or(self, default: U) -> U:
        return default

    def map(self, f: Callable[[Any], Any]) -> 'Err[E]':
        return self

    def map_err(self, f: Callable[[E], U]) -> 'Err[U]':
        return Err(f(self.error))

    def replace(self, value: Any) -> 'Err[E]':
        return self

    def replace_err(self, error: U) -> 'Err[U]':
        return Err(error)

    def __bool__(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]


def catching(fn: Callable[..., T], *exc_types: Type[BaseException]) -> Callable[..., Result[T, BaseException]]:
    """
    Wrap a raising callable so it returns `Ok(value)` or `Err(exception)` instead.

    Only the listed exception types are turned into failures; anything else
    propagates. With no types given, `Exception` is caught.

    >>> catching(int, ValueError)("12")
    Ok(value=12)
    """
    caught = exc_types or (Exception,)

    @wraps(fn, updated=())
    def wrapper(*args, **kwargs):
        try:
            return Ok(fn(*args, **kwargs))
        except caught as exc:
            return Err(exc)
    return wrapper
