"""Runtime settings read from environment variables."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .aggregation import DEFAULT_TRAILING_MONTHS, MAX_TRAILING_MONTHS
from .formatters import DEFAULT_LOCALE, LOCALES

log = logging.getLogger(__name__)


@dataclass
class Settings:
    data_dir: Path
    locale: str = DEFAULT_LOCALE
    trailing_months: int = DEFAULT_TRAILING_MONTHS
    secret_key: str = "dev-secret-key-change-in-prod"
    app_name: str = "Fleet Ledger"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from FLEET_* variables.

        FLEET_DATA_DIR        directory of account YAML files (default ./accounts)
        FLEET_LOCALE          currency locale, en-US or pt-BR
        FLEET_TRAILING_MONTHS months in the dashboard trend (default 6)
        FLEET_APP_NAME        name printed on reports
        SECRET_KEY            Flask session key
        """
        env = os.environ if environ is None else environ

        locale = env.get("FLEET_LOCALE", DEFAULT_LOCALE)
        if locale not in LOCALES:
            log.warning("Unknown FLEET_LOCALE %r, using %s", locale, DEFAULT_LOCALE)
            locale = DEFAULT_LOCALE

        trailing = DEFAULT_TRAILING_MONTHS
        raw_trailing = env.get("FLEET_TRAILING_MONTHS")
        if raw_trailing:
            try:
                trailing = int(raw_trailing)
            except ValueError:
                log.warning(
                    "Invalid FLEET_TRAILING_MONTHS %r, using %d",
                    raw_trailing,
                    DEFAULT_TRAILING_MONTHS,
                )
            else:
                if trailing < 1:
                    log.warning("FLEET_TRAILING_MONTHS must be positive, using %d",
                                DEFAULT_TRAILING_MONTHS)
                    trailing = DEFAULT_TRAILING_MONTHS
                elif trailing > MAX_TRAILING_MONTHS:
                    log.warning("FLEET_TRAILING_MONTHS capped at %d", MAX_TRAILING_MONTHS)
                    trailing = MAX_TRAILING_MONTHS

        return cls(
            data_dir=Path(env.get("FLEET_DATA_DIR", "accounts")),
            locale=locale,
            trailing_months=trailing,
            secret_key=env.get("SECRET_KEY", cls.secret_key),
            app_name=env.get("FLEET_APP_NAME", cls.app_name),
        )
