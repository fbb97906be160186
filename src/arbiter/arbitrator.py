"""Model-arbitrated final headline selection."""

from __future__ import annotations

import structlog
from pydantic import ValidationError

from src.arbiter.models import (
    ArbitrationEnvelope,
    ArbitrationFailure,
    ArbitrationOutcome,
    FinalHeadline,
    ModelSelection,
)
from src.arbiter.prompts import build_system_instruction, build_user_prompt
from src.config.constants import MAX_HEADLINES
from src.features.llm.errors import (
    LlmApiError,
    LlmProcessingError,
    LlmTimeoutError,
)
from src.features.llm.json_utils import parse_json_object
from src.features.llm.protocols import LlmClient
from src.ranker.models import ScoredCandidate


logger = structlog.get_logger()

DEFAULT_RATIONALE = "Significant market development"
DEFAULT_CONFIDENCE = 0.8


class HeadlineArbitrator:
    """Delegates the final pick to an external model under a strict contract.

    The model sees the shortlist enumerated with zero-based indices and
    must answer with a JSON object whose selections cite those indices.
    The response is treated as untrusted input: it is parsed, validated
    against a schema, and every selection is range-checked and mapped
    back to the shortlist entry it cites. Model and network faults are
    reported as a failed outcome, never raised.
    """

    def __init__(
        self,
        client: LlmClient,
        max_headlines: int = MAX_HEADLINES,
    ) -> None:
        """Initialize the arbitrator.

        Args:
            client: LLM client used to generate the selection.
            max_headlines: Maximum headlines to accept from the model.
        """
        self._client = client
        self._max_headlines = max_headlines
        self._log = logger.bind(component="arbiter", subcomponent="arbitrator")

    def arbitrate(self, shortlist: list[ScoredCandidate]) -> ArbitrationOutcome:
        """Ask the model to select headlines from the shortlist.

        Args:
            shortlist: Candidates in the order their indices refer to.

        Returns:
            ArbitrationOutcome; ``ok`` is False when the caller must fall
            back.
        """
        if not shortlist:
            return ArbitrationOutcome.failed(ArbitrationFailure.EMPTY_SHORTLIST)

        self._log.info("arbitration_started", shortlist_size=len(shortlist))

        try:
            raw_response = self._client.generate_content(
                prompt=build_user_prompt(shortlist, self._max_headlines),
                system_instruction=build_system_instruction(
                    len(shortlist), self._max_headlines
                ),
            )
        except LlmTimeoutError as exc:
            return self._fail(ArbitrationFailure.TIMEOUT, str(exc))
        except LlmApiError as exc:
            return self._fail(ArbitrationFailure.API_ERROR, str(exc))

        try:
            envelope = self.parse_response(raw_response)
        except LlmProcessingError as exc:
            reason = (
                ArbitrationFailure.SCHEMA_ERROR
                if isinstance(exc.__cause__, ValidationError)
                else ArbitrationFailure.PARSE_ERROR
            )
            self._log.debug("arbitration_raw_response", raw=raw_response[:500])
            return self._fail(reason, str(exc))

        headlines, dropped = self.map_selections(envelope, shortlist)

        if not headlines:
            return self._fail(
                ArbitrationFailure.NO_VALID_SELECTIONS,
                f"{dropped} selections dropped",
                dropped_selections=dropped,
            )

        self._log.info(
            "arbitration_complete",
            selected=len(headlines),
            dropped_selections=dropped,
        )
        return ArbitrationOutcome.success(
            headlines,
            reasoning=envelope.reasoning or None,
            dropped_selections=dropped,
        )

    @staticmethod
    def parse_response(raw_response: str) -> ArbitrationEnvelope:
        """Parse and validate the top-level response object.

        Args:
            raw_response: Raw text returned by the model.

        Returns:
            Validated envelope.

        Raises:
            LlmProcessingError: If no JSON object can be parsed or the
                object lacks a ``headlines`` list.
        """
        parsed = parse_json_object(raw_response)
        if parsed is None:
            msg = "Response is not a parseable JSON object"
            raise LlmProcessingError(msg)

        try:
            return ArbitrationEnvelope.model_validate(parsed)
        except ValidationError as exc:
            msg = f"Response does not match the selection schema: {exc.error_count()} errors"
            raise LlmProcessingError(msg) from exc

    def map_selections(
        self,
        envelope: ArbitrationEnvelope,
        shortlist: list[ScoredCandidate],
    ) -> tuple[list[FinalHeadline], int]:
        """Validate selections and map them onto shortlist entries.

        Selections that fail the schema, cite an index outside
        ``[0, len(shortlist))``, or cite an index already used are
        dropped with a warning. Accepted selections beyond the headline
        cap are dropped too.

        Args:
            envelope: Validated response envelope.
            shortlist: Shortlist the indices refer to.

        Returns:
            Tuple of (headlines, number of dropped selections).
        """
        headlines: list[FinalHeadline] = []
        used: set[int] = set()
        dropped = 0

        for position, raw_selection in enumerate(envelope.headlines):
            try:
                selection = ModelSelection.model_validate(raw_selection)
            except ValidationError as exc:
                self._log.warning(
                    "selection_schema_invalid",
                    position=position,
                    errors=exc.error_count(),
                )
                dropped += 1
                continue

            idx = selection.article_index
            if not 0 <= idx < len(shortlist):
                self._log.warning(
                    "selection_index_out_of_range",
                    article_index=idx,
                    shortlist_size=len(shortlist),
                )
                dropped += 1
                continue

            if idx in used:
                self._log.warning("selection_index_duplicate", article_index=idx)
                dropped += 1
                continue

            if len(headlines) >= self._max_headlines:
                self._log.warning("selection_over_cap", article_index=idx)
                dropped += 1
                continue

            used.add(idx)
            headlines.append(self._to_headline(selection, shortlist[idx]))

        return headlines, dropped

    @staticmethod
    def _to_headline(
        selection: ModelSelection, candidate: ScoredCandidate
    ) -> FinalHeadline:
        return FinalHeadline(
            title=selection.title or candidate.title,
            source=selection.source or candidate.source_label,
            url=selection.url or candidate.url,
            published_at=selection.published_at or candidate.published_at,
            why_it_matters=selection.why_it_matters or DEFAULT_RATIONALE,
            confidence=(
                selection.confidence
                if selection.confidence is not None
                else DEFAULT_CONFIDENCE
            ),
            article_index=selection.article_index,
        )

    def _fail(
        self,
        failure: ArbitrationFailure,
        detail: str,
        dropped_selections: int = 0,
    ) -> ArbitrationOutcome:
        self._log.warning(
            "arbitration_failed",
            reason=failure.value,
            detail=detail,
            dropped_selections=dropped_selections,
        )
        return ArbitrationOutcome.failed(
            failure, detail=detail, dropped_selections=dropped_selections
        )
