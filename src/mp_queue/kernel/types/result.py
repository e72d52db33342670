"""Dispatch Result – Ok and Err variants returned by dispatchers."""

from __future__ import annotations

from typing import Any, Mapping, TypeGuard


class Ok:
    """Successful delivery. ``details`` is carried into the message's last result."""

    __slots__ = ("_details", "_message")

    code = "OK"

    def __init__(self, details: Mapping[str, Any] | None = None, message: str = "") -> None:
        self._details = dict(details or {})
        self._message = message

    @property
    def details(self) -> dict[str, Any]:
        return self._details

    @property
    def message(self) -> str:
        return self._message

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ok):
            return NotImplemented
        return self._details == other._details and self._message == other._message

    def __repr__(self) -> str:
        return f"Ok(details={self._details!r}, message={self._message!r})"


class Err:
    """Failed delivery signalled by the dispatcher without raising."""

    __slots__ = ("_code", "_details", "_message")

    def __init__(
        self,
        code: str = "ERROR",
        message: str = "",
        details: Mapping[str, Any] | None = None,
    ) -> None:
        self._code = code
        self._message = message
        self._details = dict(details or {})

    @property
    def code(self) -> str:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def details(self) -> dict[str, Any]:
        return self._details

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Err):
            return NotImplemented
        return (self._code, self._message, self._details) == (other._code, other._message, other._details)

    def __repr__(self) -> str:
        return f"Err(code={self._code!r}, message={self._message!r}, details={self._details!r})"


type Result = Ok | Err


def is_result(value: object) -> TypeGuard[Result]:
    return isinstance(value, (Ok, Err))


__all__ = ["Err", "Ok", "Result", "is_result"]
