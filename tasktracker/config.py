"""Task Tracker — configuration loaded from the environment / .env file."""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv


@dataclass
class Settings:
    secret_key: str
    token_expiry_seconds: int = 3600
    bcrypt_rounds: int = 10
    database_url: str = "sqlite:///tasks.db"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    port: int = 3001

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        load_dotenv(env_file or os.path.join(os.path.dirname(__file__), "..", ".env"))

        secret_key = os.getenv("SECRET_KEY")
        if not secret_key:
            raise RuntimeError("SECRET_KEY environment variable is not set. Add it to your .env file.")

        origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
        return cls(
            secret_key=secret_key,
            token_expiry_seconds=int(os.getenv("TOKEN_EXPIRY_SECONDS", "3600")),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "10")),
            database_url=os.getenv("DATABASE_URL", "sqlite:///tasks.db"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            port=int(os.getenv("PORT", "3001")),
        )
