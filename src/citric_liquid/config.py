"""
Game configuration.

Rule tuning lives in a GameConfig. It can be persisted as JSON next to
the caller's data; missing keys fall back to the defaults below.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


# Stars / wins needed to clear norma level N (the key is the current level)
DEFAULT_STARS_NORMA: dict[int, int] = {1: 10, 2: 30, 3: 70, 4: 120, 5: 200}
DEFAULT_WINS_NORMA: dict[int, int] = {1: 2, 2: 5, 3: 9, 4: 14, 5: 20}

DEFAULT_FINAL_NORMA_LEVEL = 6
DEFAULT_RECOVERY_COUNTER = 6
DEFAULT_BONUS_NORMA_CAP = 3


class GameConfig(BaseModel):
    """Rule tuning for one game."""
    dice_sides: int = Field(default=6, ge=1)
    seed: int | None = None
    final_norma_level: int = Field(default=DEFAULT_FINAL_NORMA_LEVEL, ge=2)
    stars_norma: dict[int, int] = Field(default_factory=lambda: dict(DEFAULT_STARS_NORMA))
    wins_norma: dict[int, int] = Field(default_factory=lambda: dict(DEFAULT_WINS_NORMA))
    recovery_counter: int = Field(default=DEFAULT_RECOVERY_COUNTER, ge=1)
    chapter_star_bonus: bool = True
    bonus_norma_cap: int = Field(default=DEFAULT_BONUS_NORMA_CAP, ge=1)

    @field_validator("stars_norma", "wins_norma")
    @classmethod
    def _check_table(cls, table: dict[int, int]) -> dict[int, int]:
        if not table:
            raise ValueError("Norma threshold table cannot be empty")
        for level, threshold in table.items():
            if level < 1 or threshold < 0:
                raise ValueError(f"Invalid norma entry {level}: {threshold}")
        return table


def get_config_path(data_dir: Path | str = ".") -> Path:
    """Get path to config file."""
    return Path(data_dir) / "citric_liquid.json"


def load_config(path: Path | str | None = None) -> GameConfig:
    """Load config from file, or return defaults if not found."""
    path = Path(path) if path is not None else get_config_path()

    if not path.exists():
        return GameConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            saved = json.load(f)
        # Merge with defaults to handle missing keys
        return GameConfig.model_validate(saved)
    except (json.JSONDecodeError, OSError, ValidationError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return GameConfig()


def save_config(config: GameConfig, path: Path | str | None = None) -> bool:
    """Save config to file. Returns True on success."""
    path = Path(path) if path is not None else get_config_path()

    # Ensure directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(config.model_dump_json(indent=2))
        return True
    except OSError:
        return False
