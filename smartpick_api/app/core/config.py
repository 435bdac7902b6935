"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  A ``.env`` file in the working directory is
loaded first (via ``python-dotenv``) so local deployments can keep
database and Firebase credentials out of the shell profile.  Defaults
are provided for all fields.
"""

import os
from dataclasses import dataclass
from typing import List
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "SmartPick API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # Full MongoDB connection string.  When empty, the URI is assembled
    # from DB_USER / DB_PASS and the Atlas cluster host below.
    mongodb_uri: str = os.getenv("MONGODB_URI", "")
    db_user: str = os.getenv("DB_USER", "")
    db_pass: str = os.getenv("DB_PASS", "")
    db_cluster_host: str = os.getenv("DB_CLUSTER_HOST", "cluster0.mongodb.net")
    database_name: str = os.getenv("DATABASE_NAME", "smartPickDB")

    # Service account JSON document for the Firebase Admin SDK.  If
    # empty, application default credentials are used instead.
    firebase_service_account: str = os.getenv("FIREBASE_SERVICE_ACCOUNT", "")

    # Comma‑separated list of allowed CORS origins ("*" allows any).
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # When false, ``PATCH /queries/{id}/recommend`` requires a verified
    # identity like the other mutating endpoints.
    allow_anonymous_recommend: bool = os.getenv(
        "ALLOW_ANONYMOUS_RECOMMEND", "true"
    ).lower() in {"1", "true", "yes"}

    def resolve_mongodb_uri(self) -> str:
        """Return the connection string used by the record store.

        An explicit ``MONGODB_URI`` wins.  Otherwise, if database
        credentials are configured, an Atlas SRV URI is built with the
        credentials URL‑escaped.  As a last resort a local server is
        assumed.
        """
        if self.mongodb_uri:
            return self.mongodb_uri
        if self.db_user and self.db_pass:
            return (
                f"mongodb+srv://{quote_plus(self.db_user)}:{quote_plus(self.db_pass)}"
                f"@{self.db_cluster_host}/?retryWrites=true&w=majority&appName=Cluster0"
            )
        return "mongodb://localhost:27017"

    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables
# should be set before importing this module.
settings = Settings()
