"""Runtime settings read from the environment.

The CLI takes no flags beyond the source path, so anything else that varies
between runs comes from ``CSVGEN_*`` environment variables.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


ENV_TEMPLATE_FILE = 'CSVGEN_TEMPLATE_FILE'
ENV_LOG_LEVEL = 'CSVGEN_LOG_LEVEL'
ENV_LOG_FILE = 'CSVGEN_LOG_FILE'
ENV_SEED = 'CSVGEN_SEED'


@dataclass(frozen=True)
class Settings:
    """Settings for one run of the generator.

    Attributes:
        template_file: JSON document holding saved templates.
        log_level: Root logging level name.
        log_file: Optional log file path.
        seed: Random seed for reproducible output (None = unseeded).
    """

    template_file: str = 'config.json'
    log_level: str = 'WARNING'
    log_file: Optional[str] = None
    seed: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """Build settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            Settings with defaults for unset variables.

        Raises:
            ValueError: If CSVGEN_SEED is set but not an integer.
        """
        if environ is None:
            environ = os.environ

        seed_text = environ.get(ENV_SEED, '').strip()
        seed = None
        if seed_text:
            try:
                seed = int(seed_text)
            except ValueError:
                raise ValueError(f"{ENV_SEED} must be an integer, got {seed_text!r}") from None

        return cls(
            template_file=environ.get(ENV_TEMPLATE_FILE) or cls.template_file,
            log_level=(environ.get(ENV_LOG_LEVEL) or cls.log_level).upper(),
            log_file=environ.get(ENV_LOG_FILE) or None,
            seed=seed,
        )
