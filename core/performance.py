"""Performance sinks that receive finished-session summaries."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol

from core.models import DocumentPerformance, PerformanceRecord, PerformanceSummary

log = logging.getLogger("typeninja.performance")


class PerformanceSink(Protocol):
    """Receives the summary of every finished custom-practice session."""

    def record_performance(
        self, document_id: str, summary: PerformanceSummary
    ) -> object:
        ...


class InMemoryPerformanceLog:
    """Keeps performance records in memory and aggregates them per document."""

    def __init__(self):
        self.records: list[PerformanceRecord] = []

    def record_performance(
        self, document_id: str, summary: PerformanceSummary
    ) -> PerformanceRecord:
        """Store a summary as a new performance record.

        Args:
            document_id: Document the session was typed from
            summary: Finished session summary

        Returns:
            The stored record
        """
        record = PerformanceRecord(
            id=str(uuid.uuid4()),
            document_id=document_id,
            completed_at=datetime.now(timezone.utc),
            **summary.model_dump(),
        )
        self.records.append(record)
        log.info(
            f"Recorded performance for {document_id}: "
            f"{record.wpm} WPM, {record.accuracy}% accuracy"
        )
        return record

    def for_document(self, document_id: str) -> DocumentPerformance:
        """Get records and best/average statistics for one document.

        Records are ordered newest first.
        """
        records = sorted(
            (r for r in self.records if r.document_id == document_id),
            key=lambda r: r.completed_at,
        )
        records.reverse()
        if not records:
            return DocumentPerformance(document_id=document_id)

        return DocumentPerformance(
            document_id=document_id,
            performances=records,
            best_wpm=max(r.wpm for r in records),
            best_accuracy=max(r.accuracy for r in records),
            average_wpm=sum(r.wpm for r in records) / len(records),
            average_accuracy=sum(r.accuracy for r in records) / len(records),
        )

    def latest(self, document_id: str) -> Optional[PerformanceRecord]:
        """Get the most recent record for a document."""
        performances = self.for_document(document_id).performances
        return performances[0] if performances else None

    def delete_document(self, document_id: str) -> int:
        """Drop all records of a document.

        Returns:
            Number of records removed
        """
        before = len(self.records)
        self.records = [r for r in self.records if r.document_id != document_id]
        return before - len(self.records)
