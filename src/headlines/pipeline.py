"""Headline selection pipeline: score, dedupe, shortlist, arbitrate."""

import time
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime

import structlog

from src.arbiter.arbitrator import HeadlineArbitrator
from src.arbiter.fallback import fallback_selection
from src.arbiter.models import ArbitrationFailure, ArbitrationOutcome, FinalHeadline
from src.config.schemas.headlines import HeadlinesConfig
from src.headlines.metrics import HeadlinesMetrics
from src.headlines.models import PipelineMetadata, PipelineResult, PipelineStatus
from src.headlines.state_machine import PipelineStateMachine
from src.ranker.dedup import deduplicate_candidates
from src.ranker.diversity import select_diverse, top_k
from src.ranker.models import Candidate, ScoredCandidate
from src.ranker.scorer import CandidateScorer, ScorerConfig


logger = structlog.get_logger()

DEFAULT_DEADLINE_SECONDS = 45.0


class HeadlinePipeline:
    """Runs one selection over a candidate pool.

    Flow:
        CANDIDATES_READY -> SCORED -> DEDUPED -> SHORTLISTED
            -> ARBITRATED | FALLBACK_SELECTED

    The shortlist is the top ``shortlist_size`` deduplicated candidates,
    reordered so each topic bucket's best entry comes first. The model
    picks from the whole shortlist; the fallback takes its head, which is
    the diverse top-N.

    The run has a total deadline. Arbitration runs on a worker thread and
    the pipeline stops waiting for it once the deadline passes, falling
    back to the deterministic selection instead. The abandoned worker is
    not interrupted: it keeps running until its HTTP request returns or
    times out, and interpreter exit waits for it. The client factory caps
    the request timeout at the deadline to bound that wait.
    """

    def __init__(
        self,
        config: HeadlinesConfig | None = None,
        arbitrator: HeadlineArbitrator | None = None,
        metrics: HeadlinesMetrics | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Headlines configuration.
            arbitrator: Model arbitrator, or None to always use the fallback.
            metrics: Optional metrics instance.
        """
        self._config = config or HeadlinesConfig()
        self._arbitrator = arbitrator
        self._metrics = metrics or HeadlinesMetrics.get_instance()

    @property
    def config(self) -> HeadlinesConfig:
        """Headlines configuration in use."""
        return self._config

    def run(
        self,
        candidates: list[Candidate],
        *,
        run_id: str = "pipeline",
        now: datetime | None = None,
        deadline_seconds: float = DEFAULT_DEADLINE_SECONDS,
    ) -> PipelineResult:
        """Select final headlines from a candidate pool.

        Args:
            candidates: Candidate pool.
            run_id: Run identifier for logging.
            now: Reference time for recency scoring.
            deadline_seconds: Total time budget for the run.

        Returns:
            ``ok`` result with up to ``max_headlines`` headlines, or
            ``no_data`` for an empty pool.
        """
        log = logger.bind(component="pipeline", run_id=run_id)
        deadline_at = time.monotonic() + deadline_seconds
        selection = self._config.selection

        if not candidates:
            log.info("pipeline_no_candidates")
            return PipelineResult.no_data("No recent market news available")

        self._metrics.record_pipeline_run()
        state = PipelineStateMachine(run_id)
        log.info("pipeline_started", candidates_in=len(candidates))

        start_score = time.perf_counter()
        scorer = CandidateScorer(
            run_id=run_id,
            config=ScorerConfig(headlines_config=self._config, now=now),
        )
        scored = scorer.score_candidates(candidates)
        self._metrics.record_scoring_duration(
            (time.perf_counter() - start_score) * 1000
        )
        state.to_scored()

        deduped = deduplicate_candidates(
            scored, threshold=self._config.dedupe.similarity_threshold
        )
        state.to_deduped()

        shortlist = select_diverse(
            top_k(deduped, selection.shortlist_size),
            limit=selection.shortlist_size,
        )
        state.to_shortlisted()

        log.info(
            "shortlist_built",
            deduplicated=len(deduped),
            shortlist_size=len(shortlist),
            top_score=shortlist[0].score if shortlist else None,
        )

        start_arbitration = time.perf_counter()
        outcome = self._arbitrate(shortlist, deadline_at - time.monotonic(), log)
        self._metrics.record_arbitration_duration(
            (time.perf_counter() - start_arbitration) * 1000
        )

        if outcome.ok:
            headlines: list[FinalHeadline] = list(outcome.headlines)
            state.to_arbitrated()
        else:
            headlines = fallback_selection(shortlist, limit=selection.max_headlines)
            state.to_fallback_selected()
            log.info(
                "fallback_used",
                reason=outcome.failure.value if outcome.failure else None,
            )

        headlines = headlines[: selection.max_headlines]
        self._metrics.record_arbitration(
            used_fallback=not outcome.ok,
            dropped=outcome.dropped_selections,
        )

        metadata = PipelineMetadata(
            candidates_reviewed=len(candidates),
            deduplicated=len(deduped),
            top_scored=len(shortlist),
            final_selected=len(headlines),
            fallback_used=not outcome.ok,
            fallback_reason=(
                outcome.failure.value if outcome.failure is not None else None
            ),
            reasoning=outcome.reasoning,
            generated_at=datetime.now(UTC),
        )

        log.info(
            "pipeline_complete",
            final_selected=len(headlines),
            fallback_used=metadata.fallback_used,
            state=state.state.value,
        )

        return PipelineResult(
            status=PipelineStatus.OK,
            headlines=headlines,
            metadata=metadata,
        )

    def _arbitrate(
        self,
        shortlist: list[ScoredCandidate],
        remaining_seconds: float,
        log: structlog.stdlib.BoundLogger,
    ) -> ArbitrationOutcome:
        """Run the arbitrator within the remaining time budget."""
        if self._arbitrator is None:
            return ArbitrationOutcome.failed(
                ArbitrationFailure.API_ERROR, detail="no model client configured"
            )

        if remaining_seconds <= 0:
            log.warning("pipeline_deadline_exceeded", stage="before_arbitration")
            return ArbitrationOutcome.failed(ArbitrationFailure.TIMEOUT)

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="arbiter")
        future = executor.submit(self._arbitrator.arbitrate, shortlist)
        try:
            return future.result(timeout=remaining_seconds)
        except TimeoutError:
            future.cancel()
            log.warning(
                "pipeline_deadline_exceeded",
                stage="arbitration",
                budget_seconds=round(remaining_seconds, 3),
            )
            return ArbitrationOutcome.failed(ArbitrationFailure.TIMEOUT)
        except Exception as exc:  # noqa: BLE001
            log.warning("arbitration_unexpected_error", exc_info=True)
            return ArbitrationOutcome.failed(
                ArbitrationFailure.UNEXPECTED_ERROR, detail=str(exc)
            )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
