"""Closed success/error result type shared by every client operation.

Expected failures (HTTP errors, transport errors, bad URLs) are returned
as :class:`ResultError`, never raised.  The one exception is
:class:`ErrorTaxonomyViolation`: building an error for a status code the
operation never declared is a programming error and aborts immediately.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar, Union

from code_client.constants import ErrorCodes
from code_client.taxonomy import PREFLIGHT_ERROR_MESSAGES, ErrorTaxonomy

T = TypeVar("T")


class ErrorTaxonomyViolation(RuntimeError):
    """A status code outside the operation's declared taxonomy."""

    def __init__(self, status_code: int, api_name: str, taxonomy: ErrorTaxonomy):
        self.status_code = status_code
        self.api_name = api_name
        self.declared = sorted(int(code) for code in taxonomy)
        super().__init__(
            f"{api_name} produced status {status_code}, "
            f"declared taxonomy is {self.declared}"
        )


@dataclass(frozen=True)
class ApiError:
    """Error payload: status code, human-readable text, originating operation."""

    status_code: ErrorCodes
    status_text: str
    api_name: str


@dataclass(frozen=True)
class ResultSuccess(Generic[T]):
    value: T
    type: Literal["success"] = "success"

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class ResultError:
    error: ApiError
    type: Literal["error"] = "error"

    @property
    def is_success(self) -> bool:
        return False


Result = Union[ResultSuccess[T], ResultError]


def success(value: T) -> ResultSuccess[T]:
    """Wrap *value* in a success result."""
    return ResultSuccess(value=value)


def build_error(
    status_code: int,
    taxonomy: ErrorTaxonomy,
    api_name: str,
    message: str | None = None,
) -> ResultError:
    """Build an error result for *status_code* within *taxonomy*.

    Args:
        status_code: Status reported by the executor or synthesised locally.
        taxonomy: The calling operation's declared error taxonomy.
        api_name: Operation name carried on the error.
        message: Overrides the taxonomy's default text when not ``None``.

    Raises:
        ErrorTaxonomyViolation: If *status_code* is not declared in *taxonomy*.
    """
    if status_code not in taxonomy:
        raise ErrorTaxonomyViolation(status_code, api_name, taxonomy)

    code = ErrorCodes(status_code)
    status_text = message if message is not None else taxonomy[code]
    return ResultError(
        error=ApiError(status_code=code, status_text=status_text, api_name=api_name)
    )


def build_preflight_error(api_name: str, message: str) -> ResultError:
    """Error for a request that failed before reaching the network."""
    return build_error(ErrorCodes.BAD_REQUEST, PREFLIGHT_ERROR_MESSAGES, api_name, message)
