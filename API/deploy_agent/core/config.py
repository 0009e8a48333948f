from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict

class Settings(BaseSettings):
    PROJECTS_ROOT_PATH: Path = Field(
        default=Path("projects"),
        description="Directory holding one subdirectory per compose project"
    )

    DESCRIPTOR_FILENAMES: List[str] = Field(
        default=["docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml"],
        description="Recognized descriptor filenames, highest priority first"
    )

    PROJECT_LABEL: str = "com.docker.compose.project"
    SERVICE_LABEL: str = "com.docker.compose.service"

    COMPOSE_COMMAND: str = Field(
        default="docker compose",
        description="Executable (and subcommand) used to materialize missing containers"
    )

    COMPOSE_TIMEOUT_S: float = 300.0  # upper bound for `up -d`

    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 5000

    model_config = ConfigDict(
        env_file=".env"
    )
