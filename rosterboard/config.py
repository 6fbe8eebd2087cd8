"""Roster board configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class BoardSettings(BaseSettings):
    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///rosterboard.db"
    echo_sql: bool = False
    app_title: str = "Roster Board"

    # Planning Center Services API
    pc_api_base: str = "https://api.planningcenteronline.com/services/v2"
    pc_people_api_base: str = "https://api.planningcenteronline.com/people/v2"
    pc_oauth_authorize_url: str = "https://api.planningcenteronline.com/oauth/authorize"
    pc_oauth_token_url: str = "https://api.planningcenteronline.com/oauth/token"
    pc_oauth_redirect_uri: str = "http://localhost:8000/api/oauth/planning-center/callback"
    pc_oauth_scopes: str = "services people"
    pc_timeout_seconds: float = 30.0
    pc_per_page: int = 100

    # Static basic-auth fallback (personal access token app id / secret).
    # Settings stored in the database take precedence.
    pc_app_id: str | None = None
    pc_secret: str | None = None

    folder_max_depth: int = 32
    display_people_limit: int = 200
    default_timezone: str = "America/New_York"
    photo_dir: str = "data/photos"

    model_config = {"env_prefix": "BOARD_", "env_file": ".env", "extra": "ignore"}

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parent

    @property
    def project_dir(self) -> Path:
        return self.base_dir.parent

    @property
    def photos_path(self) -> Path:
        path = Path(self.photo_dir)
        if not path.is_absolute():
            path = self.project_dir / path
        return path

    @property
    def pc_basic_auth_configured(self) -> bool:
        return bool(self.pc_app_id and self.pc_secret)

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}


settings = BoardSettings()
