from typing import Any, Callable, Dict, Optional, Type, TypeVar

F = TypeVar('F', bound='ParseFailure')


class CursorError(RuntimeError):
    """Raised when a caller-audited cursor operation is misused. This is a bug, not a parse failure."""


class CoercionError(TypeError):
    """Raised when a failure kind has no conversion into a composite's target failure type."""


class UnwrapError(RuntimeError):
    """Raised by `Err.unwrap()` / `Ok.unwrap_err()` when the payload is not an exception."""
    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class ParseFailure(Exception):
    """
    Base class for every failure kind a parser may return.

    Failures are ordinary values wrapped in `Err`; combinators never raise them.
    Subclassing is how a failure kind is declared. A failure kind that can absorb
    foreign kinds lists them with the `variant` decorator:

        class VarError(ParseFailure):
            pass

        @VarError.variant(WordError)
        class VarWordError(VarError):
            pass

    after which any `WordError` coerces into `VarWordError(word_error)`.
    """
    message: str = ""
    _conversions: Dict[type, Callable[[Any], 'ParseFailure']] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # Conversion tables are per class, never inherited.
        cls._conversions = {}

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(a) for a in self.args)})"

    @classmethod
    def variant(cls, *sources: type) -> Callable[[Type[F]], Type[F]]:
        """Register the decorated subclass as the wrapper for each of `sources`."""
        def register(variant_cls: Type[F]) -> Type[F]:
            if not (isinstance(variant_cls, type) and issubclass(variant_cls, cls)):
                raise TypeError(f"{variant_cls!r} must subclass {cls.__name__} to be one of its variants")
            for source in sources:
                if source in cls._conversions:
                    raise TypeError(f"{cls.__name__} already has a variant for {source.__name__}")
                cls._conversions[source] = variant_cls
            return variant_cls
        return register

    @property
    def source(self) -> Optional[BaseException]:
        """The wrapped foreign failure, for variants created by coercion."""
        if self.args and isinstance(self.args[0], BaseException):
            return self.args[0]
        return None

    def __str__(self) -> str:
        src = self.source
        if src is not None and len(self.args) == 1:
            return str(src) or type(src).__name__
        if not self.args:
            return self.message or type(self).__name__
        return super().__str__()


class Never(ParseFailure):
    """
    The uninhabited failure kind of parsers that cannot fail.

    No instance can exist, so it converts into every target failure type.
    """
    def __new__(cls, *args, **kwargs):
        raise TypeError("Never has no values")


def _find_conversion(source_type: type, target: type) -> Optional[Callable[[Any], Any]]:
    table = getattr(target, '_conversions', None)
    if not table:
        return None
    for klass in source_type.__mro__:
        conv = table.get(klass)
        if conv is not None:
            return conv
    return None


def can_coerce(source_type: Optional[type], target: Optional[type]) -> bool:
    """Whether failures of `source_type` can be converted into `target`."""
    if target is None or source_type is None:
        # Undeclared failure types are passed through untouched.
        return True
    if source_type is Never or issubclass(source_type, target):
        return True
    return _find_conversion(source_type, target) is not None


def coerce(error: Any, target: Optional[type]) -> Any:
    """Convert a failure value into the `target` failure type."""
    if target is None or isinstance(error, target):
        return error
    conv = _find_conversion(type(error), target)
    if conv is None:
        raise CoercionError(
            f"no conversion from {type(error).__name__} into {target.__name__}; "
            f"declare one with @{target.__name__}.variant({type(error).__name__})"
        )
    return conv(error)


def check_coercible(source_type: Optional[type], target: Optional[type]) -> None:
    if not can_coerce(source_type, target):
        raise CoercionError(
            f"failures of type {source_type.__name__} cannot be coerced into {target.__name__}; "
            f"declare one with @{target.__name__}.variant({source_type.__name__})"
        )
