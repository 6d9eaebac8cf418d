# healthmate_sleep/core/services/sleep_service.py
import logging
from datetime import date, datetime
from typing import List, Optional, Tuple, Union

from healthmate_sleep.core.analysis.chart_data import build_chart_data
from healthmate_sleep.core.analysis.sleep_stats import compute_stats
from healthmate_sleep.core.models.data_models import SleepGoals, SleepGoalsUpdate, SleepSession
from healthmate_sleep.core.models.output_models import ChartBucket, ChartPeriod, SleepInsight, SleepStats
from healthmate_sleep.core.recommendation.insight_generator import generate_insights
from healthmate_sleep.core.repositories.sleep_repository import (
    SleepRepository,
    remove_session,
    replace_session,
    upsert_session,
)
from healthmate_sleep.core.scoring.sleep_calculator import SleepCalculator, create_stage_estimator

logger = logging.getLogger(__name__)


class SleepService:
    """
    Coordinates logging, storage and analysis of sleep sessions.

    The service keeps an immutable snapshot of the stored sessions. It is
    replaced only after the repository acknowledges a write, and every chart,
    statistic and insight is recomputed from it on request.
    """

    def __init__(
        self,
        repository: SleepRepository,
        calculator: Optional[SleepCalculator] = None,
        circular_clock: bool = False,
    ):
        self.repository = repository
        self.calculator = calculator or SleepCalculator()
        self.circular_clock = circular_clock
        self.sessions: Tuple[SleepSession, ...] = ()
        self.goals: SleepGoals = SleepGoals()

    @classmethod
    def from_config(cls, config) -> 'SleepService':
        estimator = create_stage_estimator(
            config.get('stage_simulation.strategy', 'deterministic'),
            config.get('stage_simulation.seed'),
        )
        return cls(
            repository=SleepRepository.from_config(config),
            calculator=SleepCalculator(estimator),
            circular_clock=bool(config.get('analysis.circular_clock_average', False)),
        )

    async def refresh(self) -> None:
        """Reload sessions and goals from the repository"""
        sessions = await self.repository.load()
        goals = await self.repository.load_goals()

        self.sessions = tuple(sessions)
        self.goals = goals or SleepGoals()
        logger.debug(f"Loaded {len(self.sessions)} sleep sessions")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def log_sleep(
        self,
        session_date: Union[date, str],
        bedtime: str,
        wake_time: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> SleepSession:
        """
        Calculate and store the session for a night.

        A session already filed under the same date is replaced and keeps its id.

        Raises:
            FormatError: If a clock string is malformed
            InvalidSessionError: If the duration is outside (0, 24h]
            RepositoryError: If the session could not be stored; the snapshot is unchanged
        """
        session = self.calculator.create_session(session_date, bedtime, wake_time, notes=notes, now=now)

        existing = next((s for s in self.sessions if s.date == session.date), None)
        if existing is not None:
            session = session.model_copy(update={'id': existing.id, 'created_at': existing.created_at})

        await self.repository.upsert(session)
        self.sessions = tuple(upsert_session(self.sessions, session, self.repository.max_sessions))
        return session

    async def update_session(self, session: SleepSession) -> SleepSession:
        """Replace a stored session by id. Another session on its date is dropped."""
        updated = await self.repository.update_session(session)
        self.sessions = tuple(replace_session(self.sessions, updated, self.repository.max_sessions))
        return updated

    async def delete_session(self, session_id: str) -> bool:
        deleted = await self.repository.delete_by_id(session_id)
        if deleted:
            self.sessions = tuple(remove_session(self.sessions, session_id))
        return deleted

    async def update_goals(self, update: SleepGoalsUpdate) -> SleepGoals:
        """
        Apply a partial goals update.

        The target duration is derived again from the resulting schedule.
        """
        values = self.goals.model_dump(exclude={'duration'})
        values.update(update.model_dump(exclude_none=True))
        goals = SleepGoals(**values)

        await self.repository.save_goals(goals)
        self.goals = goals
        return goals

    async def import_data(self, json_data: str) -> int:
        """Restore a backup and reload the snapshot. Returns the session count."""
        await self.repository.import_data(json_data)
        await self.refresh()
        return len(self.sessions)

    async def export_data(self) -> str:
        return await self.repository.export_data()

    async def clear_all(self) -> None:
        await self.repository.clear_all()
        self.sessions = ()
        self.goals = SleepGoals()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def chart_data(self, period: Union[ChartPeriod, str], now: Optional[datetime] = None) -> List[ChartBucket]:
        return build_chart_data(period, self.sessions, now)

    def stats(self, now: Optional[datetime] = None) -> SleepStats:
        return compute_stats(self.sessions, self.goals, now, circular_clock=self.circular_clock)

    def insights(self, now: Optional[datetime] = None) -> List[SleepInsight]:
        return generate_insights(self.sessions, self.goals, now)

    def analyze(self, period: Union[ChartPeriod, str] = ChartPeriod.WEEK, now: Optional[datetime] = None) -> dict:
        """Analyze the current snapshot for a chart period"""
        if not self.sessions:
            return {
                "status": "empty",
                "message": "No sleep sessions logged yet",
                "session_count": 0,
                "goals": self.goals,
                "chart": build_chart_data(period, self.sessions, now),
                "stats": self.stats(now),
                "insights": [],
            }

        return {
            "status": "success",
            "message": f"Analyzed {len(self.sessions)} sleep sessions",
            "session_count": len(self.sessions),
            "goals": self.goals,
            "chart": self.chart_data(period, now),
            "stats": self.stats(now),
            "insights": self.insights(now),
        }
