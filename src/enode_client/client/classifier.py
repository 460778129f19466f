"""Response classification -- one status-to-error mapping for every endpoint.

Every resource operation runs its :class:`httpx.Response` through
:func:`classify`, which applies three stages in order and stops at the first
failure:

1. **Status** -- the status code is looked up in the endpoint's override
   table, then in the base table built from its :class:`ErrorMessages`
   (``200``/``204`` succeed, ``401`` is unauthorized, everything else is a
   general server error).
2. **Readability** -- when a body is expected it must be present.
3. **Parseability** -- the body must be JSON and, when a ``shape`` is given,
   validate against it.

The outcome is a :class:`ClassifiedResult` value; :meth:`ClassifiedResult.unwrap`
turns it into the parsed body or the matching
:class:`~enode_client.exceptions.EnodeError`.

Example::

    result = classify(
        response,
        USER_MESSAGES,
        {404: StatusRule(ErrorKind.RESOURCE_NOT_FOUND, "no such user")},
        expect_body=True,
        shape=User,
    )
    user = result.unwrap()
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, NamedTuple, Optional

import httpx
import pydantic
from pydantic import TypeAdapter

from enode_client.exceptions import ERRORS_BY_KIND, EnodeError, ErrorKind

OK_STATUSES = frozenset({200, 204})
"""Statuses that always count as success, whatever the override table says."""

EMPTY_BODY_DETAIL = "unexpected end of input"


class StatusRule(NamedTuple):
    """Maps one status code to an error kind and its message."""

    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class ErrorMessages:
    """The per-resource wording used for the base table and the body stages.

    Attributes:
        transfer: Network failure or bad gateway.
        read: Body missing or unreadable.
        parse: Body is not valid JSON of the expected shape.
        unauthorized: HTTP 401.
        general: HTTP 500 and any unmapped status.
    """

    transfer: str
    read: str
    parse: str
    unauthorized: str
    general: str

    def base_table(self) -> dict[int, StatusRule]:
        return {
            401: StatusRule(ErrorKind.UNAUTHORIZED, self.unauthorized),
            500: StatusRule(ErrorKind.GENERAL_SERVER, self.general),
        }

    def default_rule(self) -> StatusRule:
        return StatusRule(ErrorKind.GENERAL_SERVER, self.general)


@dataclass(frozen=True)
class ClassifiedResult:
    """Outcome of :func:`classify`.

    A result is *ok* when :attr:`kind` is ``None``; :attr:`body` then holds
    the parsed payload (or ``None`` when no body was expected). Otherwise
    :attr:`kind` names the failure and :attr:`detail` carries the message
    and the raw status line.
    """

    status_code: int
    kind: Optional[ErrorKind] = None
    detail: str = ""
    body: Any = None

    @property
    def ok(self) -> bool:
        return self.kind is None

    @classmethod
    def success(cls, status_code: int, body: Any = None) -> ClassifiedResult:
        return cls(status_code=status_code, body=body)

    @classmethod
    def failure(cls, status_code: int, kind: ErrorKind, detail: str) -> ClassifiedResult:
        return cls(status_code=status_code, kind=kind, detail=detail)

    def to_error(self) -> EnodeError:
        """Build the exception for a failed result.

        Raises:
            ValueError: If the result is ok.
        """
        if self.kind is None:
            raise ValueError("A successful result has no error")
        error_cls = ERRORS_BY_KIND[self.kind]
        return error_cls(self.detail, status_code=self.status_code)

    def unwrap(self) -> Any:
        """Return the body of an ok result, raise the mapped error otherwise."""
        if self.kind is not None:
            raise self.to_error()
        return self.body


def status_line(response: httpx.Response) -> str:
    """Return the status line as ``"<code> <reason>"``, e.g. ``"404 Not Found"``."""
    reason = response.reason_phrase
    return f"{response.status_code} {reason}" if reason else str(response.status_code)


def classify(
    response: httpx.Response,
    messages: ErrorMessages,
    overrides: Optional[Mapping[int, StatusRule]] = None,
    *,
    expect_body: bool = False,
    shape: Any = None,
) -> ClassifiedResult:
    """Classify *response* into a :class:`ClassifiedResult`.

    Args:
        response: The response to classify. Its body must already be read
            (the default for non-streaming :mod:`httpx` calls).
        messages: The resource's wording for base-table errors and the body
            stages.
        overrides: Endpoint-specific ``status -> StatusRule`` entries,
            consulted before the base table.
        expect_body: Whether a successful response must carry a JSON body.
        shape: Optional type (a pydantic model, ``list[Model]``, ...) the
            JSON body is validated against. Without it the decoded JSON is
            returned as-is.

    Returns:
        The classified outcome. The function has no side effects; calling
        it twice with the same inputs yields equal results.
    """
    status = response.status_code

    # Stage 1: status
    if status not in OK_STATUSES:
        rule = None
        if overrides:
            rule = overrides.get(status)
        if rule is None:
            rule = messages.base_table().get(status, messages.default_rule())
        return ClassifiedResult.failure(
            status, rule.kind, f"{rule.message}\n{status_line(response)}"
        )

    if not expect_body:
        return ClassifiedResult.success(status)

    # Stage 2: readability
    try:
        content = response.content
    except httpx.ResponseNotRead as exc:
        return ClassifiedResult.failure(status, ErrorKind.READ, f"{messages.read}\n{exc}")
    if not content:
        return ClassifiedResult.failure(status, ErrorKind.READ, EMPTY_BODY_DETAIL)

    # Stage 3: parseability
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        return ClassifiedResult.failure(status, ErrorKind.PARSE, f"{messages.parse}\n{exc}")

    if shape is None:
        return ClassifiedResult.success(status, data)

    try:
        body = TypeAdapter(shape).validate_python(data)
    except pydantic.ValidationError as exc:
        return ClassifiedResult.failure(status, ErrorKind.PARSE, f"{messages.parse}\n{exc}")
    return ClassifiedResult.success(status, body)
