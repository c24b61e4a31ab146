import os

from dotenv import load_dotenv

load_dotenv()


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./wastecollect.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), default=["*"])

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

GRAPHHOPPER_API_KEY = os.getenv("GRAPHHOPPER_API_KEY", "")
GRAPHHOPPER_OPTIMIZATION_URL = os.getenv(
    "GRAPHHOPPER_OPTIMIZATION_URL",
    "https://graphhopper.com/api/1/vrp",
)
ROUTE_OPTIMIZER_TIMEOUT_SECONDS = float(os.getenv("ROUTE_OPTIMIZER_TIMEOUT_SECONDS", "30"))

ROUTE_STRATEGY_OPTIMIZER = "optimizer"
ROUTE_STRATEGY_ALPHABETICAL = "alphabetical"
ROUTE_STRATEGIES = {ROUTE_STRATEGY_OPTIMIZER, ROUTE_STRATEGY_ALPHABETICAL}

ROUTE_STRATEGY = os.getenv(
    "ROUTE_STRATEGY",
    ROUTE_STRATEGY_OPTIMIZER if GRAPHHOPPER_API_KEY else ROUTE_STRATEGY_ALPHABETICAL,
).strip().lower()
ROUTE_DEPOT_ADDRESS = os.getenv("ROUTE_DEPOT_ADDRESS", "1 Main St, Anytown")

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if ROUTE_STRATEGY not in ROUTE_STRATEGIES:
        raise RuntimeError(
            f"ROUTE_STRATEGY must be one of {sorted(ROUTE_STRATEGIES)}, got {ROUTE_STRATEGY!r}."
        )
    if ROUTE_STRATEGY == ROUTE_STRATEGY_OPTIMIZER and not GRAPHHOPPER_API_KEY:
        raise RuntimeError("GRAPHHOPPER_API_KEY must be set when ROUTE_STRATEGY is 'optimizer'.")
