"""Engine configuration objects and helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Numeric policy shared by the simulation engine."""

    horizon_cap_months: int = 1200
    epsilon: float = 0.01
    min_payment_rate: float = 0.01
    min_payment_floor: float = 500.0
    reducing_balance_threshold: float = 10.0
    default_strategy: str = "Snowball"
    default_interest_method: str = "reducing_balance"

    def __post_init__(self) -> None:
        if self.horizon_cap_months < 1:
            raise ValueError("horizon_cap_months must be at least 1")
        if self.epsilon <= 0:
            raise ValueError("epsilon must be positive")
        if self.min_payment_rate < 0 or self.min_payment_floor < 0:
            raise ValueError("minimum payment policy cannot be negative")
        if self.reducing_balance_threshold < 0:
            raise ValueError("reducing_balance_threshold cannot be negative")


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DebtSage"
    LOG_FILENAME = "debtsage.log"
    ENV_PREFIX = "DEBTSAGE_"

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("DEBTSAGE_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.HORIZON_CAP_MONTHS = _env_int("DEBTSAGE_HORIZON_CAP_MONTHS", 1200)
        self.EPSILON = _env_float("DEBTSAGE_EPSILON", 0.01)
        self.MIN_PAYMENT_RATE = _env_float("DEBTSAGE_MIN_PAYMENT_RATE", 0.01)
        self.MIN_PAYMENT_FLOOR = _env_float("DEBTSAGE_MIN_PAYMENT_FLOOR", 500.0)
        self.REDUCING_BALANCE_THRESHOLD = _env_float(
            "DEBTSAGE_REDUCING_BALANCE_THRESHOLD", 10.0
        )
        self.DEFAULT_STRATEGY = os.getenv("DEBTSAGE_DEFAULT_STRATEGY", "Snowball")
        self.DEFAULT_INTEREST_METHOD = os.getenv(
            "DEBTSAGE_DEFAULT_INTEREST_METHOD", "reducing_balance"
        )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where log files live."""

        data_root = os.getenv("DEBTSAGE_DATA_DIR", "instance")
        return Path(data_root).expanduser().resolve()

    def engine_config(self) -> EngineConfig:
        """Expose the numeric policy for the simulation engine."""

        return EngineConfig(
            horizon_cap_months=self.HORIZON_CAP_MONTHS,
            epsilon=self.EPSILON,
            min_payment_rate=self.MIN_PAYMENT_RATE,
            min_payment_floor=self.MIN_PAYMENT_FLOOR,
            reducing_balance_threshold=self.REDUCING_BALANCE_THRESHOLD,
            default_strategy=self.DEFAULT_STRATEGY,
            default_interest_method=self.DEFAULT_INTEREST_METHOD,
        )


class DevConfig(BaseConfig):
    """Development configuration."""

    DEBUG = True
    TESTING = False


@lru_cache(maxsize=1)
def default_engine_config() -> EngineConfig:
    """Return the process-wide engine policy read from the environment."""

    return BaseConfig().engine_config()
