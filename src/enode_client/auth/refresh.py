"""Background access-token refresh.

:class:`TokenRefresher` keeps a session's token fresh by re-running the
token exchange shortly before the current token expires. It is a chain of
one-shot timers rather than a periodic task: the next timer is armed only
after the previous attempt finished, so at most one refresh is in flight
per session.

Scheduling rules:

* After a successful exchange the next attempt fires
  ``max(expires_in - 30, 0)`` seconds later. A zero delay fires at once,
  and the delay is capped at ``threading.TIMEOUT_MAX``.
* An ``expires_in`` of ``0`` (missing or unparseable hint) stops the chain;
  the token stays usable until it expires and a warning is logged.
* After a failed exchange the next attempt fires after an exponential
  backoff of 15, 30, 60, ... seconds, capped at 300 seconds, and the
  failure count resets on the next success. Unexpected exceptions from
  the exchange count as failures too.

Failures inside the timer thread are logged and never raised, because
there is no caller to hand them to. :meth:`TokenRefresher.stop` cancels
the pending timer and keeps an attempt that is already running from
re-arming.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

from enode_client.auth.exchange import TokenExchanger
from enode_client.exceptions import EnodeError
from enode_client.models import TokenResponse

logger = logging.getLogger(__name__)

REFRESH_MARGIN = 30
"""Seconds before expiry at which the token is renewed."""

FAILURE_BACKOFF_BASE = 15.0
FAILURE_BACKOFF_MAX = 300.0


class Timer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


def daemon_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Default timer factory: a daemon :class:`threading.Timer`."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer


def refresh_delay(expires_in: int) -> Optional[float]:
    """Seconds until the next refresh for a token valid *expires_in* seconds.

    Returns ``None`` when *expires_in* carries no usable expiry. The delay
    never exceeds :data:`threading.TIMEOUT_MAX`.
    """
    if expires_in <= 0:
        return None
    return float(min(max(expires_in - REFRESH_MARGIN, 0), threading.TIMEOUT_MAX))


def failure_backoff(failures: int) -> float:
    """Delay before retrying after *failures* consecutive failed refreshes."""
    return min(FAILURE_BACKOFF_BASE * 2 ** max(failures - 1, 0), FAILURE_BACKOFF_MAX)


class TokenRefresher:
    """Self-rescheduling refresh of an access token.

    Args:
        exchanger: Performs the token exchange on every attempt.
        on_token: Called with each successful
            :class:`~enode_client.models.TokenResponse`; the session uses
            it to install the new token.
        timer_factory: Builds the one-shot timers. Defaults to
            :func:`daemon_timer`.
    """

    def __init__(
        self,
        exchanger: TokenExchanger,
        on_token: Callable[[TokenResponse], None],
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self._exchanger = exchanger
        self._on_token = on_token
        self._timer_factory = timer_factory or daemon_timer
        self._lock = threading.Lock()
        self._timer: Optional[Timer] = None
        self._stopped = False
        self._failures = 0
        self.next_delay: Optional[float] = None

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def pending(self) -> bool:
        """Whether a timer is armed and has not fired yet."""
        return self._timer is not None

    @property
    def failures(self) -> int:
        """Consecutive failed attempts since the last success."""
        return self._failures

    def schedule(self, delay: float) -> None:
        """Arm the next attempt *delay* seconds from now, replacing any pending one."""
        with self._lock:
            if self._stopped:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._timer_factory(max(delay, 0.0), self._run)
            self.next_delay = max(delay, 0.0)
            self._timer.start()
        logger.info("Next token refresh in %.0f seconds", max(delay, 0.0))

    def schedule_for(self, expires_in: int) -> Optional[float]:
        """Arm the next attempt for a token valid *expires_in* seconds.

        Returns:
            The delay used, or ``None`` if no attempt was scheduled.
        """
        delay = refresh_delay(expires_in)
        if delay is None:
            logger.warning(
                "Token response carried no usable expires_in (%r); automatic refresh stopped",
                expires_in,
            )
            with self._lock:
                self.next_delay = None
            return None
        self.schedule(delay)
        return delay

    def stop(self) -> None:
        """Cancel the pending attempt and prevent any further scheduling."""
        with self._lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self.next_delay = None

    def _run(self) -> None:
        with self._lock:
            if self._stopped:
                return
            self._timer = None

        try:
            token_response = self._exchanger.exchange()
        except EnodeError as exc:
            self._failures += 1
            delay = failure_backoff(self._failures)
            logger.error(
                "Token refresh failed (%d consecutive), retrying in %.0f seconds: %s",
                self._failures,
                delay,
                exc.detail,
                exc_info=True,
            )
            self.schedule(delay)
            return
        except Exception:
            self._failures += 1
            delay = failure_backoff(self._failures)
            logger.exception(
                "Token refresh crashed (%d consecutive), retrying in %.0f seconds",
                self._failures,
                delay,
            )
            self.schedule(delay)
            return

        self._failures = 0
        self._on_token(token_response)
        logger.info("Access token refreshed")
        self.schedule_for(token_response.expires_in)
