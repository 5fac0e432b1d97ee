"""
Tiny persistent key-value store for player preferences.

Values are kept as strings, the way a browser's localStorage would keep
them: the best score as a stringified number, the contrast flag as
"true"/"false".
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "herbie-best-score"
HIGH_CONTRAST_KEY = "herbie-high-contrast"


class PreferenceStore:
    """JSON file of string keys to string values."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._values: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed preferences {self.path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._values, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not save preferences to {self.path}: {e}")

    # =========================================================================
    # TYPED ACCESSORS
    # =========================================================================

    def load_best_score(self) -> float:
        stored = self.get(BEST_SCORE_KEY)
        if stored is None:
            return 0.0
        try:
            return float(stored)
        except ValueError:
            return 0.0

    def save_best_score(self, score: float) -> bool:
        """
        Store score if it beats the current best.
        Returns True on a new record.
        """
        if score > self.load_best_score():
            self.set(BEST_SCORE_KEY, str(score))
            return True
        return False

    def load_high_contrast(self, default: bool = False) -> bool:
        stored = self.get(HIGH_CONTRAST_KEY)
        if stored is None:
            return default
        return stored == "true"

    def save_high_contrast(self, enabled: bool) -> None:
        self.set(HIGH_CONTRAST_KEY, "true" if enabled else "false")
