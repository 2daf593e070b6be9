"""Project paths and environment configuration."""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ROOT_ENV = "SHARESLIDES_ROOT"

# Layout relative to the project root
DECKS_SUBDIR = Path("src") / "content" / "decks"
LEGACY_STATS_FILE = Path("src") / "content" / "legacy-stats.json"
PUBLIC_DECKS_SUBDIR = Path("public") / "decks"
EXPORT_JSON_FILE = Path("data") / "slideshare-export.json"
EXPORT_CSV_FILE = Path("data") / "slideshare-export.csv"


def load_env(root: Optional[Path] = None) -> Optional[Path]:
    """Load a .env file from the current directory or the project root.

    Returns:
        Path of the loaded file, or None if none was found
    """
    candidates = [Path.cwd() / ".env"]
    if root is not None:
        candidates.append(Path(root) / ".env")

    for env_path in candidates:
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment from {env_path}")
            return env_path
    return None


def _env_path(name: str, root: Path, default: Path) -> Path:
    value = os.environ.get(name)
    if not value:
        return root / default
    path = Path(value)
    return path if path.is_absolute() else root / path


@dataclass(frozen=True)
class Settings:
    """Resolved filesystem locations for one project checkout."""

    root: Path
    decks_dir: Path
    legacy_stats_path: Path
    public_decks_dir: Path
    export_json_path: Path
    export_csv_path: Path

    @classmethod
    def from_env(cls, root: Optional[Path] = None) -> "Settings":
        """Build settings from --root, SHARESLIDES_ROOT or the working directory.

        Individual paths can be overridden with SHARESLIDES_DECKS_DIR,
        SHARESLIDES_LEGACY_STATS, SHARESLIDES_PUBLIC_DECKS_DIR,
        SHARESLIDES_EXPORT_JSON and SHARESLIDES_EXPORT_CSV.
        """
        load_env(root)

        if root is None:
            root = Path(os.environ.get(ROOT_ENV) or Path.cwd())
        root = Path(root).resolve()

        return cls(
            root=root,
            decks_dir=_env_path("SHARESLIDES_DECKS_DIR", root, DECKS_SUBDIR),
            legacy_stats_path=_env_path("SHARESLIDES_LEGACY_STATS", root, LEGACY_STATS_FILE),
            public_decks_dir=_env_path("SHARESLIDES_PUBLIC_DECKS_DIR", root, PUBLIC_DECKS_SUBDIR),
            export_json_path=_env_path("SHARESLIDES_EXPORT_JSON", root, EXPORT_JSON_FILE),
            export_csv_path=_env_path("SHARESLIDES_EXPORT_CSV", root, EXPORT_CSV_FILE),
        )
