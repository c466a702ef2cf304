"""
Seen-state persistence for the Carousell Watch system.

The seen set holds one ``alert-id::url`` key per listing that has already
been notified. It is loaded once before the alert loop and written back once
after it.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Set, Union

from ..utils.error_handling import StateError

logger = logging.getLogger(__name__)


class SeenStateStore:
    """Loads and saves the seen set as a sorted JSON array."""

    def __init__(self, state_path: Union[str, Path] = "seen.json"):
        """
        Initialize the store.

        Args:
            state_path: Path of the JSON state file
        """
        self.state_path = Path(state_path)

    def load(self) -> Set[str]:
        """
        Load the seen set.

        Returns:
            The persisted keys, or an empty set when no state file exists

        Raises:
            StateError: If the file exists but is not a JSON array of strings
        """
        if not self.state_path.exists():
            logger.info(f"No seen state at {self.state_path}; starting empty")
            return set()

        try:
            with open(self.state_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StateError(f"Could not read seen state from {self.state_path}: {e}") from e

        if not isinstance(data, list) or not all(isinstance(key, str) for key in data):
            raise StateError(f"Seen state in {self.state_path} must be a JSON array of strings")

        seen = set(data)
        logger.debug(f"Loaded {len(seen)} seen keys from {self.state_path}")
        return seen

    @staticmethod
    def has(seen: Set[str], key: str) -> bool:
        return key in seen

    @staticmethod
    def add(seen: Set[str], key: str) -> Set[str]:
        seen.add(key)
        return seen

    def save(self, seen: Iterable[str]) -> None:
        """
        Persist the seen set, fully replacing the previous file.

        The keys are written sorted. The file is written next to the target
        and renamed over it so a crash never leaves a truncated state file.
        """
        keys = sorted(set(seen))
        try:
            self.state_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.state_path.name}.", suffix=".tmp", dir=str(self.state_path.parent)
            )
        except OSError as e:
            raise StateError(f"Could not save seen state to {self.state_path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(keys, f, ensure_ascii=False)
            os.replace(tmp_path, self.state_path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StateError(f"Could not save seen state to {self.state_path}: {e}") from e

        logger.debug(f"Saved {len(keys)} seen keys to {self.state_path}")
