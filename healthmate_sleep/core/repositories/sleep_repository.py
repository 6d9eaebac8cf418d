# healthmate_sleep/core/repositories/sleep_repository.py
import asyncio
import json
import logging
import os
from datetime import date, datetime
from typing import List, Optional, Sequence

import pandas as pd

from healthmate_sleep.core.exceptions import NotFoundError, RepositoryError
from healthmate_sleep.core.models.data_models import SleepGoals, SleepSession
from healthmate_sleep.utils.constants import default_values
from healthmate_sleep.utils.data_validation import RecordValidator

logger = logging.getLogger(__name__)

EXPORT_VERSION = '1.0'
SESSION_FIELDS = list(SleepSession.model_fields)


def sort_sessions(sessions: Sequence[SleepSession]) -> List[SleepSession]:
    """Most recent date first"""
    return sorted(sessions, key=lambda s: s.date, reverse=True)


def upsert_session(
    sessions: Sequence[SleepSession],
    session: SleepSession,
    max_sessions: int = default_values['max_sessions'],
) -> List[SleepSession]:
    """
    Return a new collection with the session inserted.

    Any record sharing the session's date is replaced, and only the
    max_sessions most recent dates are kept.
    """
    remaining = [s for s in sessions if s.date != session.date]
    return sort_sessions([session] + remaining)[:max_sessions]


def remove_session(sessions: Sequence[SleepSession], session_id: str) -> List[SleepSession]:
    """Return a new collection without the session with the given id"""
    return [s for s in sessions if s.id != session_id]


def replace_session(
    sessions: Sequence[SleepSession],
    session: SleepSession,
    max_sessions: int = default_values['max_sessions'],
) -> List[SleepSession]:
    """
    Return a new collection with the session sharing this id swapped in.

    A different session already filed under the new date is dropped.
    """
    return upsert_session(remove_session(sessions, session.id), session, max_sessions)


class SleepRepository:
    """
    File-backed store for sleep sessions and goals.

    Sessions live in a CSV file, goals in a JSON document. Reads and writes
    run in a worker thread; writes are serialized and replace files
    atomically, so a failed write leaves the previous state on disk.
    """

    def __init__(
        self,
        data_dir: str = 'data/sleep',
        sessions_file: str = 'sleep_sessions.csv',
        goals_file: str = 'sleep_goals.json',
        max_sessions: int = default_values['max_sessions'],
    ):
        self.data_dir = data_dir
        self.sessions_path = os.path.join(data_dir, sessions_file)
        self.goals_path = os.path.join(data_dir, goals_file)
        self.max_sessions = max_sessions
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config) -> 'SleepRepository':
        """Build a repository from a ConfigManager"""
        return cls(
            data_dir=config.get('storage.data_dir', 'data/sleep'),
            sessions_file=config.get('storage.sessions_file', 'sleep_sessions.csv'),
            goals_file=config.get('storage.goals_file', 'sleep_goals.json'),
            max_sessions=config.get('storage.max_sessions', default_values['max_sessions']),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def load(self) -> List[SleepSession]:
        """Load all valid sessions, most recent date first"""
        return await asyncio.to_thread(self._read_sessions)

    async def load_goals(self) -> Optional[SleepGoals]:
        """Load saved goals, or None when none have been saved"""
        return await asyncio.to_thread(self._read_goals)

    async def get_sessions_in_range(self, start_date: date, end_date: date) -> List[SleepSession]:
        """Sessions dated within [start_date, end_date]"""
        sessions = await self.load()
        return [s for s in sessions if start_date <= s.date <= end_date]

    async def export_data(self) -> str:
        """Serialize sessions and goals into a JSON backup document"""
        sessions = await self.load()
        goals = await self.load_goals()

        export = {
            'sessions': [s.model_dump(mode='json', by_alias=True) for s in sessions],
            'goals': goals.model_dump(mode='json', by_alias=True) if goals else None,
            'exportDate': datetime.now().isoformat(),
            'version': EXPORT_VERSION,
        }
        return json.dumps(export, indent=2)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def upsert(self, session: SleepSession) -> List[SleepSession]:
        """
        Insert a session, replacing any existing session on the same date.

        Returns:
            The stored collection after the write, most recent first

        Raises:
            RepositoryError: If the store cannot be read or written
        """
        async with self._write_lock:
            sessions = await self.load()
            updated = upsert_session(sessions, session, self.max_sessions)
            await asyncio.to_thread(self._write_sessions, updated)

        replaced = any(s.date == session.date for s in sessions)
        evicted = len(sessions) + (0 if replaced else 1) - len(updated)
        logger.info(f"Saved sleep session {session.id} for {session.date}")
        if evicted > 0:
            logger.info(f"Evicted {evicted} session(s) beyond the {self.max_sessions} session limit")
        return updated

    async def update_session(self, session: SleepSession) -> SleepSession:
        """
        Replace the stored session with the same id and refresh updated_at.

        Raises:
            NotFoundError: If no stored session has this id
            RepositoryError: If the store cannot be read or written
        """
        async with self._write_lock:
            sessions = await self.load()
            if not any(s.id == session.id for s in sessions):
                raise NotFoundError(f"Sleep session {session.id} not found")

            updated_session = session.model_copy(update={'updated_at': datetime.now()})
            updated = replace_session(sessions, updated_session, self.max_sessions)
            await asyncio.to_thread(self._write_sessions, updated)

        logger.info(f"Updated sleep session {session.id}")
        return updated_session

    async def delete_by_id(self, session_id: str) -> bool:
        """Delete a session by id. Returns False when it did not exist."""
        async with self._write_lock:
            sessions = await self.load()
            remaining = remove_session(sessions, session_id)
            if len(remaining) == len(sessions):
                return False
            await asyncio.to_thread(self._write_sessions, remaining)

        logger.info(f"Deleted sleep session {session_id}")
        return True

    async def save_goals(self, goals: SleepGoals) -> SleepGoals:
        async with self._write_lock:
            await asyncio.to_thread(self._write_goals, goals)
        logger.info("Saved sleep goals")
        return goals

    async def import_data(self, json_data: str) -> List[SleepSession]:
        """
        Restore sessions and goals from a JSON backup document.

        Invalid session entries are skipped; the remaining ones replace the
        stored sessions, one per date.

        Raises:
            RepositoryError: If the document cannot be parsed or written
        """
        try:
            data = json.loads(json_data)
        except (TypeError, ValueError) as e:
            raise RepositoryError(f"Failed to import sleep data: {e}") from e

        if not isinstance(data, dict):
            raise RepositoryError("Failed to import sleep data: expected a JSON object")

        sessions = None
        if isinstance(data.get('sessions'), list):
            valid, _ = RecordValidator.filter_records(data['sessions'], SleepSession, source='import')
            # Later entries win when a backup repeats a date
            sessions = []
            for session in valid:
                sessions = upsert_session(sessions, session, self.max_sessions)

        goals = None
        if data.get('goals'):
            goals_list, skipped = RecordValidator.filter_records([data['goals']], SleepGoals, source='import goals')
            if skipped:
                raise RepositoryError(f"Failed to import sleep data: invalid goals ({skipped[0][1]})")
            goals = goals_list[0]

        async with self._write_lock:
            if sessions is not None:
                await asyncio.to_thread(self._write_sessions, sessions)
            if goals is not None:
                await asyncio.to_thread(self._write_goals, goals)

        logger.info(f"Imported {len(sessions or [])} sleep session(s)")
        return sessions if sessions is not None else await self.load()

    async def clear_all(self) -> None:
        """Remove all stored sessions and goals"""
        async with self._write_lock:
            await asyncio.to_thread(self._remove_files)
        logger.info("Cleared all sleep data")

    # ------------------------------------------------------------------
    # File access (runs in worker threads)
    # ------------------------------------------------------------------

    def _read_sessions(self) -> List[SleepSession]:
        if not os.path.exists(self.sessions_path):
            return []

        try:
            sleep_df = pd.read_csv(self.sessions_path, dtype=str, keep_default_na=False)
        except pd.errors.EmptyDataError:
            return []
        except (OSError, ValueError) as e:
            raise RepositoryError(f"Failed to load sleep sessions: {e}") from e

        sessions, _ = RecordValidator.filter_dataframe(sleep_df, SleepSession, source=self.sessions_path)
        return sort_sessions(sessions)

    def _read_goals(self) -> Optional[SleepGoals]:
        if not os.path.exists(self.goals_path):
            return None

        try:
            with open(self.goals_path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise RepositoryError(f"Failed to load sleep goals: {e}") from e

        goals, _ = RecordValidator.filter_records([data], SleepGoals, source=self.goals_path)
        return goals[0] if goals else None

    def _write_sessions(self, sessions: Sequence[SleepSession]) -> None:
        rows = [s.model_dump(mode='json') for s in sessions]
        sleep_df = pd.DataFrame(rows, columns=SESSION_FIELDS)
        try:
            self._atomic_write(self.sessions_path, lambda path: sleep_df.to_csv(path, index=False))
        except (OSError, ValueError) as e:
            raise RepositoryError(f"Failed to save sleep sessions: {e}") from e

    def _write_goals(self, goals: SleepGoals) -> None:
        def dump(path):
            with open(path, 'w') as f:
                json.dump(goals.model_dump(mode='json', by_alias=True), f, indent=2)

        try:
            self._atomic_write(self.goals_path, dump)
        except (OSError, ValueError) as e:
            raise RepositoryError(f"Failed to save sleep goals: {e}") from e

    def _atomic_write(self, path: str, writer) -> None:
        os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
        tmp_path = f"{path}.tmp"
        try:
            writer(tmp_path)
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _remove_files(self) -> None:
        for path in (self.sessions_path, self.goals_path):
            try:
                if os.path.exists(path):
                    os.remove(path)
            except OSError as e:
                raise RepositoryError(f"Failed to clear sleep data: {e}") from e
