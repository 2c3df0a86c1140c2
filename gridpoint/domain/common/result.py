# gridpoint/domain/common/result.py

"""
Success-or-failure return values.

Geometry, configuration and collaborator calls return a Result instead of
raising, so an expected failure (a bad cell number, a failed xdotool call)
is handled where it is reported and never unwinds the Qt event loop.
"""
from typing import TypeVar, Generic, Optional, Union, Any, Callable, Dict

from gridpoint.domain.common.errors import DomainError

T = TypeVar('T')
U = TypeVar('U')


class Result(Generic[T]):
    """
    Either a value or a DomainError, never both.

    Build with ``Result.ok(value)`` or ``Result.fail(error)``; a plain string
    passed to ``fail`` becomes an uncategorised DomainError.
    """

    def __init__(self, value: Optional[T], error: Optional[Union[str, DomainError]]):
        self._value = value
        self._error = DomainError(message=error) if isinstance(error, str) else error

    @classmethod
    def ok(cls, value: T) -> 'Result[T]':
        return cls(value, None)

    @classmethod
    def fail(cls, error: Union[str, DomainError]) -> 'Result[T]':
        return cls(None, error)

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        """The success value; reading it from a failure is a programming error."""
        if self._error is not None:
            raise ValueError(f"Cannot access value of a failed result: {self._error}")
        return self._value

    @property
    def error(self) -> DomainError:
        """The failure; reading it from a success is a programming error."""
        if self._error is None:
            raise ValueError("Cannot access error of a successful result")
        return self._error

    def map(self, func: Callable[[T], U]) -> 'Result[U]':
        """
        Apply ``func`` to the value of a success.

        An exception raised by ``func`` turns into a failed Result.
        """
        if self._error is not None:
            return Result.fail(self._error)
        try:
            return Result.ok(func(self._value))
        except Exception as e:
            return Result.fail(DomainError.from_exception(e))

    def and_then(self, func: Callable[[T], 'Result[U]']) -> 'Result[U]':
        """Chain a step that itself returns a Result; failures short-circuit."""
        if self._error is not None:
            return Result.fail(self._error)
        return func(self._value)

    def to_thread_safe_dict(self) -> Dict[str, Any]:
        """
        Plain dictionary form for a queued Qt signal.

        Used when a worker result crosses from the injection thread to the
        event loop thread. The DomainError object is passed as is so its
        category and code survive the crossing.
        """
        if self.is_success:
            return {"success": True, "value": self._value}
        return {"success": False, "error": self._error}

    @classmethod
    def from_thread_safe_dict(cls, data: Dict[str, Any]) -> 'Result[Any]':
        if data.get("success", False):
            return cls.ok(data.get("value"))
        return cls.fail(data.get("error") or "Unknown error")

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.ok({self._value!r})"
        return f"Result.fail({self._error})"
