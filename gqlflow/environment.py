"""Environment overrides loaded from a KEY=VALUE file."""

import logging
from pathlib import Path
from typing import Dict


logger = logging.getLogger(__name__)


def parse_env(content: str) -> Dict[str, str]:
    """
    Parse line-oriented KEY=VALUE text.

    Blank lines and lines starting with '#' are ignored, the first '=' is
    the split point, both sides are trimmed. Lines without a key are skipped.
    """
    env = {}
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith('#'):
            continue
        key, sep, value = stripped.partition('=')
        key = key.strip()
        if not sep or not key:
            continue
        env[key] = value.strip()
    return env


class EnvironmentLoader:
    """Reads environment overrides for a storage root."""

    def __init__(self, env_file: Path):
        self.env_file = Path(env_file)

    def load(self) -> Dict[str, str]:
        """Return overrides; a missing file yields an empty mapping."""
        if not self.env_file.exists():
            return {}
        env = parse_env(self.env_file.read_text())
        logger.debug(f"Loaded {len(env)} override(s) from {self.env_file}")
        return env
