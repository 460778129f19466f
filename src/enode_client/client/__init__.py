"""HTTP response handling for enode_client.

:func:`classify` maps an :class:`httpx.Response` to a
:class:`ClassifiedResult` using a resource's :class:`ErrorMessages` and an
optional table of :class:`StatusRule` overrides. Every resource operation
goes through it, so the status-to-error mapping is defined in one place.
"""

from enode_client.client.classifier import (
    ClassifiedResult,
    ErrorMessages,
    StatusRule,
    classify,
    status_line,
)

__all__ = ["ClassifiedResult", "ErrorMessages", "StatusRule", "classify", "status_line"]
