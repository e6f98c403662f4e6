import os
from pathlib import Path
from dotenv import load_dotenv

root_env = Path(__file__).resolve().parents[1] / ".env"
if root_env.exists():
    load_dotenv(root_env)


def _env_list(name: str, default: str = "") -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _env_pairs(name: str) -> dict[str, str]:
    """Parse ``Old label=New label;Other=Canonical`` style overrides."""
    pairs: dict[str, str] = {}
    for chunk in os.getenv(name, "").split(";"):
        if "=" not in chunk:
            continue
        legacy, canonical = chunk.split("=", 1)
        if legacy.strip() and canonical.strip():
            pairs[legacy.strip()] = canonical.strip()
    return pairs


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    SERVER = os.getenv("DB_SERVER", "")
    DATABASE = os.getenv("DB_NAME", "RequestTracker")
    DRIVER = os.getenv("ODBC_DRIVER", "ODBC+Driver+17+for+SQL+Server")
    TRUSTED = os.getenv("DB_TRUSTED", "yes")
    # Falls back to a local SQLite file unless a SQL Server host is configured.
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        f"mssql+pyodbc://{SERVER}/{DATABASE}?trusted_connection={TRUSTED}&driver={DRIVER}" if SERVER else "sqlite:///request_tracker.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Microsoft Graph settings
    TENANT_ID = os.getenv("TENANT_ID")
    CLIENT_ID = os.getenv("CLIENT_ID")
    CLIENT_SECRET = os.getenv("CLIENT_SECRET")
    AAD_ENDPOINT = os.getenv("AAD_ENDPOINT", "https://login.microsoftonline.com")
    GRAPH_ENDPOINT = os.getenv("GRAPH_ENDPOINT", "https://graph.microsoft.com")
    FROM_EMAIL = os.getenv("FROM", "requests@dublincleaners.com")  # service mailbox
    MAIL_ENABLED = os.getenv("MAIL_ENABLED", "true").lower() == "true"
    GRAPH_TIMEOUT_SECONDS = int(os.getenv("GRAPH_TIMEOUT_SECONDS", "20"))

    # -------------------------------------------
    #            Tracker Parameters
    # -------------------------------------------
    CANONICAL_LOCATIONS = _env_list("CANONICAL_LOCATIONS", "Plant,Short N.,Frantz Rd.,Morse Rd.")
    # Extra legacy labels on top of the built-in table, e.g. "Old Plant=Plant;Hilliard Rd=Plant"
    LEGACY_LOCATION_LABELS = _env_pairs("LEGACY_LOCATION_LABELS")
    APPROVER_EMAILS = _env_list("APPROVER_EMAILS")
    DASHBOARD_TOP_N = int(os.getenv("DASHBOARD_TOP_N", "5"))


class DevelopmentConfig(Config):
    DEBUG = True
    MAIL_ENABLED = os.getenv("MAIL_ENABLED", "false").lower() == "true"


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    MAIL_ENABLED = False
    APPROVER_EMAILS = ("manager@example.com",)


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
