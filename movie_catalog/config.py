from pathlib import Path
from pydantic_settings import BaseSettings

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "movies.db"


class Settings(BaseSettings):
    database_url: str = f"sqlite:///{DEFAULT_DB_PATH}"
    log_level: str = "INFO"
    lock_attribute: str = "rating"
    lock_thresholds: list[float] = [2.0, 5.0]
    lock_status_code: int = 423
    seed_demo_data: bool = False

    model_config = {"env_prefix": "MOVIE_CATALOG_"}


settings = Settings()
