"""Safe-invocation pipeline for tracking calls.

Cross-cutting concerns are expressed as middlewares: callables that take the
next handler and return a wrapped handler. ``compose`` applies a list of
middlewares so the first one in the list is the outermost. The default safe
invoker runs the consent gate first and isolates failures around the actual
invocation:

    consent_gate -> failure_isolation -> [extra middlewares] -> handler

Example:
    invoker = SafeInvoker(consent_gate, reporter)
    track = invoker.safe(lambda name, props: core.track(name, props))
    track("Signup", {"plan": "pro"})  # never raises
"""

import logging
from functools import wraps
from typing import Any, Callable, Iterable, List, Optional, Sequence

from .consent import ConsentGate
from .diagnostics import DiagnosticReporter, LoggingReporter

logger = logging.getLogger(__name__)


Handler = Callable[..., Any]
Middleware = Callable[[Handler], Handler]

DEFAULT_DIAGNOSTIC_TAG = "[analytics]"


def compose(handler: Handler, middlewares: Sequence[Middleware]) -> Handler:
    """Wrap handler with middlewares, first middleware outermost."""
    wrapped = handler
    for middleware in reversed(list(middlewares)):
        wrapped = middleware(wrapped)
    return wrapped


def consent_gate(consent: ConsentGate) -> Middleware:
    """Middleware that drops calls while analytics consent is withdrawn.

    Consent is read when the wrapped handler is called, not when it is built.
    """
    def middleware(next_handler: Handler) -> Handler:
        @wraps(next_handler)
        def gated(*args, **kwargs):
            if not consent.is_enabled:
                return None
            return next_handler(*args, **kwargs)
        return gated
    return middleware


def failure_isolation(
    reporter: DiagnosticReporter,
    tag: str = DEFAULT_DIAGNOSTIC_TAG
) -> Middleware:
    """Middleware that reports and swallows any error raised by the handler."""
    def middleware(next_handler: Handler) -> Handler:
        @wraps(next_handler)
        def isolated(*args, **kwargs):
            try:
                return next_handler(*args, **kwargs)
            except Exception as e:
                try:
                    reporter.report(tag, e)
                except Exception as report_error:  # noqa: BLE001
                    logger.debug(f"Diagnostic reporter failed: {report_error}")
                return None
        return isolated
    return middleware


class SafeInvoker:
    """Wraps tracking calls with consent gating and failure isolation."""

    def __init__(
        self,
        consent: ConsentGate,
        reporter: Optional[DiagnosticReporter] = None,
        middlewares: Optional[Iterable[Middleware]] = None,
        tag: str = DEFAULT_DIAGNOSTIC_TAG
    ):
        """Initialize safe invoker.

        Args:
            consent: Consent gate checked on every call
            reporter: Diagnostic reporter for swallowed failures
            middlewares: Extra middlewares run inside the failure boundary
            tag: Diagnostic tag passed to the reporter
        """
        self.consent = consent
        self.reporter = reporter or LoggingReporter()
        self.tag = tag
        self.extra_middlewares: List[Middleware] = list(middlewares or [])

    @property
    def middlewares(self) -> List[Middleware]:
        """Ordered middleware list, outermost first."""
        return [
            consent_gate(self.consent),
            failure_isolation(self.reporter, self.tag),
            *self.extra_middlewares
        ]

    def safe(self, fn: Handler) -> Handler:
        """Return fn wrapped so it is consent-gated and never raises."""
        return compose(fn, self.middlewares)

    def __call__(self, fn: Handler) -> Handler:
        return self.safe(fn)
