from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    db_path: Path = Path(__file__).resolve().parent.parent / "movies.db"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]
    title_case_sensitive: bool = True

    model_config = {"env_prefix": "MOVIE_API_"}


settings = Settings()
