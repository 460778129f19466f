"""The request/classify step shared by every resource operation."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from urllib.parse import quote

from enode_client.client.classifier import ErrorMessages, StatusRule, classify
from enode_client.session import Session

logger = logging.getLogger(__name__)


def segment(value: str) -> str:
    """Percent-encode *value* for use as a single URL path segment."""
    return quote(str(value), safe="")


def call(
    session: Session,
    method: str,
    path: str,
    messages: ErrorMessages,
    overrides: Optional[Mapping[int, StatusRule]] = None,
    *,
    expect_body: bool = False,
    shape: Any = None,
    json_body: Optional[Any] = None,
) -> Any:
    """Send one request through *session* and classify the response.

    Returns:
        The parsed body (validated against *shape* when given), or ``None``
        when no body is expected.

    Raises:
        EnodeError: The subclass matching the classified failure.
    """
    response = session.send(
        method,
        path,
        json_body=json_body,
        transfer_message=messages.transfer,
    )
    result = classify(response, messages, overrides, expect_body=expect_body, shape=shape)
    if not result.ok:
        logger.debug("%s %s failed (%s): %s", method, path, result.kind.value, result.detail)
    return result.unwrap()
