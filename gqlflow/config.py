"""Storage root configuration.

All paths used by the stores hang off a single root directory so several
engines (or tests) can run against isolated roots side by side.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


DEFAULT_DIR_NAME = ".gqlflow"
HOME_ENV_VAR = "GQLFLOW_HOME"
TIMEOUT_ENV_VAR = "GQLFLOW_TIMEOUT"


@dataclass
class GqlflowConfig:
    """Resolved configuration for one engine instance.

    Attributes:
        root: Storage root directory
        timeout: Optional transport timeout in seconds (None = transport default)
    """
    root: Path
    timeout: Optional[float] = None

    def __post_init__(self):
        self.root = Path(self.root)

    @property
    def sets_dir(self) -> Path:
        return self.root / "sets"

    @property
    def state_file(self) -> Path:
        return self.root / "state.json"

    @property
    def env_file(self) -> Path:
        return self.root / ".env"

    @classmethod
    def resolve(
        cls,
        root: Optional[Union[str, Path]] = None,
        timeout: Optional[float] = None,
        workspace: Optional[Path] = None,
    ) -> "GqlflowConfig":
        """
        Build configuration from explicit values, environment, then defaults.

        Args:
            root: Explicit storage root (wins over GQLFLOW_HOME)
            timeout: Explicit timeout in seconds (wins over GQLFLOW_TIMEOUT)
            workspace: Directory holding the default root (default: cwd)

        Returns:
            Resolved GqlflowConfig

        Raises:
            ValueError: If GQLFLOW_TIMEOUT is not a number
        """
        if root is None:
            root = os.environ.get(HOME_ENV_VAR) or None
        if root is None:
            root = (workspace or Path.cwd()) / DEFAULT_DIR_NAME

        if timeout is None and os.environ.get(TIMEOUT_ENV_VAR):
            raw = os.environ[TIMEOUT_ENV_VAR]
            try:
                timeout = float(raw)
            except ValueError:
                raise ValueError(f"{TIMEOUT_ENV_VAR} must be a number, got '{raw}'")

        return cls(root=Path(root), timeout=timeout)
