"""
YAML persistence for tournaments.

One file per tournament under the data directory:

    data/
        .lock
        spring-cup.yaml
        office-pong.yaml

Every read-modify-write goes through `transaction()`, which holds the
directory's file lock for the whole cycle.
"""
import logging
import os
from contextlib import contextmanager
from typing import List

import yaml
from filelock import FileLock

from .errors import BracketError, SnapshotError, TournamentNotFound
from .tournament import Tournament

logger = logging.getLogger(__name__)


class TournamentStore:
    def __init__(self, data_dir: str, lock_timeout: float = 10):
        self.data_dir = data_dir
        os.makedirs(self.data_dir, exist_ok=True)
        self.lock = FileLock(os.path.join(self.data_dir, '.lock'), timeout=lock_timeout)

    def _path(self, slug: str) -> str:
        return os.path.join(self.data_dir, f'{slug}.yaml')

    def exists(self, slug: str) -> bool:
        return os.path.exists(self._path(slug))

    def _read(self, slug: str) -> Tournament:
        path = self._path(slug)
        if not os.path.exists(path):
            raise TournamentNotFound(f"Tournament {slug} not found", slug=slug)
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        if not data:
            raise SnapshotError(f"Tournament file {path} is empty")
        try:
            return Tournament.from_dict(data)
        except (KeyError, TypeError) as e:
            raise SnapshotError(f"Tournament file {path} is malformed: {e}")

    def _write(self, tournament: Tournament):
        with open(self._path(tournament.slug), 'w', encoding='utf-8') as f:
            yaml.dump(tournament.to_dict(), f, default_flow_style=False, sort_keys=False)

    def load(self, slug: str) -> Tournament:
        with self.lock:
            return self._read(slug)

    def save(self, tournament: Tournament):
        with self.lock:
            self._write(tournament)

    @contextmanager
    def transaction(self, slug: str):
        """Load a tournament, hand it out, and save it back if no error was raised."""
        with self.lock:
            tournament = self._read(slug)
            yield tournament
            self._write(tournament)

    def create(self, title, description=None, max_players=8) -> Tournament:
        """Create and persist a tournament with a slug unique in this store."""
        tournament = Tournament(title, description, max_players)
        with self.lock:
            base = tournament.slug
            suffix = 2
            while self.exists(tournament.slug):
                tournament.slug = f'{base}-{suffix}'
                suffix += 1
            self._write(tournament)
        logger.info("Created tournament %s", tournament.slug)
        return tournament

    def delete(self, slug: str):
        with self.lock:
            path = self._path(slug)
            if not os.path.exists(path):
                raise TournamentNotFound(f"Tournament {slug} not found", slug=slug)
            os.remove(path)

    def list(self) -> List[Tournament]:
        """All readable tournaments, newest first. Unreadable files are skipped."""
        tournaments = []
        with self.lock:
            for name in sorted(os.listdir(self.data_dir)):
                if not name.endswith('.yaml'):
                    continue
                slug = name[:-len('.yaml')]
                try:
                    tournaments.append(self._read(slug))
                except (yaml.YAMLError, BracketError) as e:
                    logger.warning(f'Failed to parse {name}: {e}')
        tournaments.sort(key=lambda t: t.created_at, reverse=True)
        return tournaments
