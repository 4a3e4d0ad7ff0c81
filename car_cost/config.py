import logging
from pathlib import Path

from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    DB_PATH: str = str(Path.home() / ".car_cost" / "car_costs.db")
    LOG_LEVEL: str = "WARNING"

    model_config = {"env_prefix": "CAR_COST_", "env_file": ".env", "env_file_encoding": "utf-8",
                    "extra": "ignore"}


config = AppConfig()


def configure_logging(level: str = None):
    logging.basicConfig(
        level=(level or config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%H:%M:%S",
    )
