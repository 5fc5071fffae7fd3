"""
Pipeline coordinator.

Runs one day through Story, Extract, Format, optional self-reflection,
optional multi-agent verification, Validate, the confidence filter and
persistence, and drives a background loop over the most recent days.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from datetime import date, timedelta

from shared.agents import (
    CriticAgent,
    ExtractorAgent,
    FormatterAgent,
    MultiAgentVerifier,
    StoryAgent,
    ValidatorAgent,
)
from shared.config.logging import bind_stage, get_logger, pipeline_context
from shared.deduplication import EmbeddingDeduplicator
from shared.exceptions import DuplicateContentError
from shared.filtering import CURRENT_EXTRACTION_VERSION, SmartFilter
from shared.llm import LLMClient
from shared.observability.metrics import pipeline_days_total, pipeline_running
from shared.persistence import ExtractionStore, RawItemSource
from shared.schemas.messages import DailyMessageBatch
from shared.schemas.pipeline import (
    Confidence,
    FormattedEvent,
    FormattedTask,
    PipelineResult,
    PipelineStats,
    RejectedItem,
    StageTimings,
)
from workers.pipeline.batch import BatchBuilder
from workers.pipeline.config import PipelineSettings, get_pipeline_settings
from workers.pipeline.persistence import ResultPersister

logger = get_logger(__name__)

LOW_CONFIDENCE_TASK_REASON = "Low confidence task without due date"


def filter_by_confidence(
    events: list[FormattedEvent],
    tasks: list[FormattedTask],
) -> tuple[list[FormattedEvent], list[FormattedTask], list[RejectedItem]]:
    """
    Apply the final confidence filter.

    All events are kept (low-confidence ones are logged). Tasks with low
    confidence and no due date are rejected.

    Args:
        events: Validated events
        tasks: Validated tasks

    Returns:
        Tuple of (kept events, kept tasks, rejected tasks)
    """
    for event in events:
        if event.confidence is Confidence.LOW:
            logger.debug("low_confidence_event_kept", title=event.title)

    kept_tasks: list[FormattedTask] = []
    rejected: list[RejectedItem] = []
    for task in tasks:
        if task.confidence is Confidence.LOW and task.due_date is None:
            rejected.append(RejectedItem(title=task.title, reason=LOW_CONFIDENCE_TASK_REASON))
        else:
            kept_tasks.append(task)

    return list(events), kept_tasks, rejected


def elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class PipelineCoordinator:
    """
    Orchestrates the extraction pipeline for calendar days.

    Stages for one day run strictly in order. The background loop processes
    days sequentially; stats can be read at any time through get_stats().
    """

    def __init__(
        self,
        client: LLMClient,
        source: RawItemSource,
        store: ExtractionStore,
        settings: PipelineSettings | None = None,
        deduplicator: EmbeddingDeduplicator | None = None,
        smart_filter: SmartFilter | None = None,
        extraction_version: str = CURRENT_EXTRACTION_VERSION,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize coordinator.

        Args:
            client: Unified LLM client shared by all agents
            source: Raw-item store the batches are built from
            store: Extraction store results are persisted to
            settings: Pipeline settings (uses defaults if not provided)
            deduplicator: Narrative deduplicator (built from settings if not provided)
            smart_filter: Pre-filter (built when enabled and not provided)
            extraction_version: Version stamped on processed raw items
            sleep: Async sleep used by the background loop
            today: Returns the current local date
        """
        self.settings = settings or get_pipeline_settings()
        self.client = client
        self.source = source
        self.store = store
        self.extraction_version = extraction_version
        self._sleep = sleep
        self._today = today

        self.deduplicator = deduplicator or EmbeddingDeduplicator(
            window_seconds=self.settings.dedup_window_seconds,
            similarity_threshold=self.settings.dedup_similarity_threshold,
        )
        if smart_filter is None and self.settings.enable_pre_filter:
            smart_filter = SmartFilter()
        self.batch_builder = BatchBuilder(
            source,
            smart_filter=smart_filter if self.settings.enable_pre_filter else None,
            fetch_limit=self.settings.fetch_limit,
        )
        self.persister = ResultPersister(store)

        # Agents
        self.story_agent = StoryAgent(
            client,
            self.deduplicator,
            compression_message_threshold=self.settings.compression_message_threshold,
        )
        self.extractor_agent = ExtractorAgent(client)
        self.formatter_agent = FormatterAgent(client)
        self.validator_agent = ValidatorAgent(client)
        self.critic_agent = CriticAgent(client)
        self.verifier = MultiAgentVerifier(client)

        # State
        self._is_running = False
        self._task: asyncio.Task | None = None
        self.processed_days: set[str] = set()
        # One day runs at a time, whether from the loop or an on-demand request
        self._day_lock = asyncio.Lock()

        # Stats
        self._days_processed = 0
        self._events_created = 0
        self._tasks_created = 0
        self._reflection_retries = 0
        self._items_disputed = 0

    @property
    def is_running(self) -> bool:
        """Check if the background loop is running."""
        return self._is_running

    def start(self) -> None:
        """Start the background loop; a second call is a no-op."""
        if self._is_running:
            return
        self._is_running = True
        pipeline_running.set(1)
        logger.info("pipeline_started", interval_seconds=self.settings.loop_interval_seconds)
        self._task = asyncio.create_task(self._run_loop())

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish."""
        self._is_running = False
        pipeline_running.set(0)
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("pipeline_stopped")

    def get_stats(self) -> PipelineStats:
        """
        Snapshot of coordinator and model-layer counters.

        Returns:
            PipelineStats
        """
        llm_stats = self.client.get_stats()
        return PipelineStats(
            is_running=self._is_running,
            days_processed=self._days_processed,
            events_created=self._events_created,
            tasks_created=self._tasks_created,
            reflection_retries=self._reflection_retries,
            items_disputed=self._items_disputed,
            cache_hit_rate=llm_stats.hit_rate,
            total_api_calls=llm_stats.total,
            cache_hits=llm_stats.cache_hits + llm_stats.semantic_hits,
        )

    async def process_day(self, day: date) -> PipelineResult:
        """
        Run the pipeline for one day.

        Calls are serialized: a second call waits for the running one, then
        sees its content as processed.

        Args:
            day: Local day to process

        Returns:
            PipelineResult (empty when the day has no messages)

        Raises:
            DuplicateContentError: If the day's content was recently processed
            ModelAccessError: If a model call fails
            PersistenceError: If the store fails
        """
        async with self._day_lock:
            with pipeline_context(day=day.isoformat(), stage="batch"):
                return await self._process_day(day)

    async def _process_day(self, day: date) -> PipelineResult:
        batch, items = await self.batch_builder.build(day)
        if batch.is_empty:
            self._days_processed += 1
            pipeline_days_total.labels(outcome="empty").inc()
            return PipelineResult.empty(day)

        result = await self._process_batch(batch)

        if items:
            await self.source.mark_extracted([item.id for item in items], self.extraction_version)
            self.batch_builder.remember(items)
        self._days_processed += 1
        pipeline_days_total.labels(outcome="processed").inc()
        return result

    async def _process_batch(self, batch: DailyMessageBatch) -> PipelineResult:
        day = batch.date
        total_start = time.perf_counter()
        timings = StageTimings()

        # 1. Story
        bind_stage("story")
        started = time.perf_counter()
        story = await self.story_agent.summarize(batch)
        timings.story_ms = elapsed_ms(started)

        # 2. Extract
        bind_stage("extract")
        started = time.perf_counter()
        items = await self.extractor_agent.extract(story)
        timings.extract_ms = elapsed_ms(started)

        if not items:
            logger.info("no_items_extracted", date=day.isoformat())
            timings.total_ms = elapsed_ms(total_start)
            return PipelineResult(date=day, story=story.narrative, stats=timings)

        # 3. Format
        bind_stage("format")
        started = time.perf_counter()
        events, tasks = await self.formatter_agent.format(items, day)
        timings.format_ms = elapsed_ms(started)

        # 4. Self-reflection
        if self.settings.enable_self_reflection and (events or tasks):
            bind_stage("reflect")
            started = time.perf_counter()
            review = await self.critic_agent.review(story, items, events, tasks)
            if (
                review.should_retry
                and review.quality_score < self.settings.min_quality_score
                and self.settings.max_reflection_retries > 0
            ):
                self._reflection_retries += 1
                feedback = self.critic_agent.generate_feedback(review)
                items = await self.extractor_agent.extract(story, feedback=feedback)
                events, tasks = await self.formatter_agent.format(items, day)
                logger.info(
                    "reextracted_after_feedback",
                    date=day.isoformat(),
                    score=review.quality_score,
                    events=len(events),
                    tasks=len(tasks),
                )
            timings.extract_ms += elapsed_ms(started)

        # 5. Multi-agent verification
        if self.settings.enable_multi_agent_verification and (events or tasks):
            bind_stage("verify")
            started = time.perf_counter()
            verification = await self.verifier.cross_verify(events, tasks, story.narrative, day)
            self._items_disputed += len(verification.disputed_items)
            if verification.consensus_score >= self.settings.consensus_threshold:
                events = verification.agreed_events
                tasks = verification.agreed_tasks
            else:
                logger.info(
                    "verification_below_consensus",
                    date=day.isoformat(),
                    consensus=verification.consensus_score,
                    threshold=self.settings.consensus_threshold,
                )
            timings.verify_ms = elapsed_ms(started)

        # 6. Validate
        bind_stage("validate")
        started = time.perf_counter()
        validated = await self.validator_agent.validate(events, tasks, day)
        timings.validate_ms = elapsed_ms(started)

        # 7. Confidence filter
        final_events, final_tasks, low_confidence = filter_by_confidence(
            validated.events, validated.tasks
        )

        # 8. Persist
        bind_stage("persist")
        outcome = await self.persister.persist(final_events, final_tasks, day)
        self._events_created += outcome.events_inserted
        self._tasks_created += outcome.tasks_inserted

        timings.total_ms = elapsed_ms(total_start)
        return PipelineResult(
            date=day,
            events=final_events,
            tasks=final_tasks,
            story=story.narrative,
            rejected_items=[*validated.rejected, *low_confidence],
            stats=timings,
        )

    async def process_recent_days(self) -> None:
        """
        Process today and the preceding days once.

        Days other than today that were already processed are skipped.
        Failures are logged per day and never abort the scan.
        """
        today = self._today()
        for days_ago in range(self.settings.lookback_days):
            if not self._is_running:
                break

            day = today - timedelta(days=days_ago)
            key = day.isoformat()
            if days_ago > 0 and key in self.processed_days:
                continue

            try:
                result = await self.process_day(day)
            except DuplicateContentError:
                pipeline_days_total.labels(outcome="duplicate").inc()
                logger.debug("day_skipped_duplicate", day=key)
                continue
            except Exception as e:
                pipeline_days_total.labels(outcome="failed").inc()
                logger.error("day_failed", day=key, error=str(e), exc_info=True)
            else:
                if result.events or result.tasks:
                    logger.info(
                        "day_processed",
                        day=key,
                        events=len(result.events),
                        tasks=len(result.tasks),
                        rejected=len(result.rejected_items),
                    )
                self.processed_days.add(key)

            await self._sleep(self.settings.day_delay_seconds)

    async def _run_loop(self) -> None:
        while self._is_running:
            await self.process_recent_days()
            await self._sleep(self.settings.loop_interval_seconds)
