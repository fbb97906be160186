"""Request-facing headlines service with a single-flight result cache."""

import uuid
from datetime import timedelta
from threading import Lock

import structlog

from src.arbiter.arbitrator import HeadlineArbitrator
from src.config.schemas.headlines import HeadlinesConfig
from src.features.llm.factory import create_llm_client_from_settings
from src.headlines.cache import ResultCache
from src.headlines.errors import CandidateSourceError
from src.headlines.metrics import HeadlinesMetrics
from src.headlines.models import CacheEntry, PipelineResult, PipelineStatus
from src.headlines.pipeline import DEFAULT_DEADLINE_SECONDS, HeadlinePipeline
from src.headlines.source import CandidateSource
from src.observability.logging import bind_run_context, clear_run_context
from src.settings import AppSettings


logger = structlog.get_logger()


class HeadlinesService:
    """Serves market headlines, recomputing at most once per window.

    A fresh cache entry is returned directly. When the cache is stale,
    one caller holds the refresh lock and runs the pipeline while the
    others wait on the lock and then re-check the cache, so concurrent
    requests during a refresh share one pipeline run (single flight).
    Only successful runs, including fallback runs, update the cache.
    """

    def __init__(
        self,
        source: CandidateSource,
        pipeline: HeadlinePipeline,
        cache: ResultCache,
        deadline_seconds: float = DEFAULT_DEADLINE_SECONDS,
        metrics: HeadlinesMetrics | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            source: Candidate source.
            pipeline: Selection pipeline.
            cache: Result cache owned by this service.
            deadline_seconds: Time budget for each pipeline run.
            metrics: Optional metrics instance.
        """
        self._source = source
        self._pipeline = pipeline
        self._cache = cache
        self._deadline_seconds = deadline_seconds
        self._metrics = metrics or HeadlinesMetrics.get_instance()
        self._refresh_lock = Lock()
        self._log = logger.bind(component="service")

    @property
    def cache(self) -> ResultCache:
        """The service's result cache."""
        return self._cache

    def get_headlines(self) -> PipelineResult:
        """Return current headlines, from cache when fresh.

        Returns:
            Cached or newly computed result, or ``no_data``.
        """
        entry = self._cache.get()
        if entry is not None:
            return self._from_cache(entry)

        with self._refresh_lock:
            entry = self._cache.get()
            if entry is not None:
                return self._from_cache(entry)
            return self._refresh()

    def _from_cache(self, entry: CacheEntry) -> PipelineResult:
        age = self._cache.age_seconds(entry)
        self._metrics.record_cache_hit()
        self._log.info("headlines_cache_hit", cache_age_seconds=round(age, 3))
        return PipelineResult(
            status=PipelineStatus.OK,
            headlines=list(entry.headlines),
            metadata=entry.metadata.model_copy(
                update={"cached": True, "cache_age_seconds": age}
            ),
        )

    def _refresh(self) -> PipelineResult:
        run_id = uuid.uuid4().hex[:12]
        bind_run_context(run_id)
        try:
            try:
                candidates = self._source.fetch_candidates()
            except CandidateSourceError as exc:
                self._log.error("candidate_source_failed", error=str(exc))
                self._metrics.record_no_data()
                return PipelineResult.no_data(f"Candidate source unavailable: {exc}")

            result = self._pipeline.run(
                candidates,
                run_id=run_id,
                now=self._cache.now(),
                deadline_seconds=self._deadline_seconds,
            )

            if result.ok and result.headlines:
                self._cache.store(result.headlines, result.metadata)
            else:
                self._metrics.record_no_data()
                self._log.info("headlines_no_data", message=result.message)

            return result
        finally:
            clear_run_context()


def create_headlines_service(
    source: CandidateSource,
    config: HeadlinesConfig,
    settings: AppSettings,
    *,
    use_llm: bool = True,
) -> HeadlinesService:
    """Wire a service from configuration and settings.

    Args:
        source: Candidate source.
        config: Validated headlines configuration.
        settings: Application settings.
        use_llm: Set False to skip the model and always use the fallback.

    Returns:
        Ready-to-use HeadlinesService with its own cache.
    """
    client = create_llm_client_from_settings(settings) if use_llm else None
    arbitrator = (
        HeadlineArbitrator(client, max_headlines=config.selection.max_headlines)
        if client is not None
        else None
    )
    cache = ResultCache(freshness=timedelta(minutes=config.cache.freshness_minutes))
    return HeadlinesService(
        source=source,
        pipeline=HeadlinePipeline(config=config, arbitrator=arbitrator),
        cache=cache,
        deadline_seconds=settings.pipeline_deadline_seconds,
    )
