"""Candidate sources feeding the headlines pipeline."""

import json
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog
from pydantic import ValidationError

from src.headlines.errors import CandidateSourceError
from src.ranker.models import Candidate


logger = structlog.get_logger()


@runtime_checkable
class CandidateSource(Protocol):
    """Supplies a bounded list of recent, already-relevant candidates."""

    def fetch_candidates(self) -> list[Candidate]:
        """Return the current candidate pool.

        Returns:
            Candidates, possibly empty.

        Raises:
            CandidateSourceError: If the pool cannot be obtained.
        """
        ...


class StaticCandidateSource:
    """Serves a fixed, in-memory candidate list."""

    def __init__(self, candidates: list[Candidate]) -> None:
        """Initialize the source.

        Args:
            candidates: Candidates to serve on every fetch.
        """
        self._candidates = list(candidates)

    def fetch_candidates(self) -> list[Candidate]:
        """Return a copy of the configured candidates."""
        return list(self._candidates)


def parse_candidate_records(
    records: list[object],
    origin: str = "records",
) -> list[Candidate]:
    """Validate raw candidate records, skipping invalid ones.

    Args:
        records: Raw JSON-like records.
        origin: Label used in log messages.

    Returns:
        Valid candidates in input order.
    """
    log = logger.bind(component="source", origin=origin)
    candidates: list[Candidate] = []
    for position, record in enumerate(records):
        try:
            candidates.append(Candidate.model_validate(record))
        except ValidationError as exc:
            log.warning(
                "candidate_record_invalid",
                position=position,
                errors=exc.error_count(),
            )
    if len(candidates) < len(records):
        log.info(
            "candidate_records_skipped",
            skipped=len(records) - len(candidates),
            kept=len(candidates),
        )
    return candidates


class JsonFileCandidateSource:
    """Reads candidates from a JSON file holding an array of records.

    The file is re-read on every fetch so upstream refreshes are seen.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the source.

        Args:
            path: Path to the JSON file.
        """
        self._path = path

    def fetch_candidates(self) -> list[Candidate]:
        """Load and validate candidates from the file.

        Returns:
            Valid candidates; invalid records are skipped.

        Raises:
            CandidateSourceError: If the file is unreadable, is not JSON,
                or does not hold an array.
        """
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as exc:
            msg = f"Cannot read candidates file {self._path}: {exc}"
            raise CandidateSourceError(msg) from exc
        except json.JSONDecodeError as exc:
            msg = f"Candidates file {self._path} is not valid JSON: {exc}"
            raise CandidateSourceError(msg) from exc

        if not isinstance(payload, list):
            msg = f"Candidates file {self._path} must contain a JSON array"
            raise CandidateSourceError(msg)

        return parse_candidate_records(payload, origin=str(self._path))
