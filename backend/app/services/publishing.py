"""
Sendwize Compliance Engine - Result Publishing

Hands finished audit results to downstream collaborators (audit history
store, advisory text generation). Those collaborators live outside this
service; a failing sink is logged and skipped so the caller still gets
its result.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishedResult:
    kind: str  # "consent_audit", "list_hygiene", "content_scan", "vendor_check"
    payload: Dict[str, Any]
    user_id: Optional[str] = None
    check_date: Optional[date] = None


ResultSink = Callable[[PublishedResult], None]


class ResultPublisher:
    """Fan-out to zero or more sinks, isolating each sink's failures."""

    def __init__(self, sinks: Sequence[ResultSink] = ()):
        self.sinks: List[ResultSink] = list(sinks)

    def add_sink(self, sink: ResultSink) -> None:
        self.sinks.append(sink)

    def publish(
        self,
        kind: str,
        payload: Dict[str, Any],
        user_id: Optional[str] = None,
        check_date: Optional[date] = None,
    ) -> int:
        """
        Deliver one result to every sink.

        Returns:
            Number of sinks that accepted the result
        """
        if not user_id:
            # History rows are keyed by user; anonymous checks are not recorded
            return 0

        event = PublishedResult(kind=kind, payload=payload, user_id=user_id, check_date=check_date)
        delivered = 0
        for sink in self.sinks:
            try:
                sink(event)
                delivered += 1
            except Exception:
                logger.exception(f"Result sink {getattr(sink, '__name__', sink)!r} failed for {kind}")
        if delivered:
            logger.info(f"Published {kind} for user {user_id} to {delivered} sink(s)")
        return delivered
