import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_PORT = 5000
DEFAULT_TX_TIMEOUT_SECONDS = 120
DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30

REQUIRED_VARS = ("RPC_URL", "PRIVATE_KEY", "CONTRACT_ADDRESS")


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    private_key: str
    contract_address: str
    port: int = DEFAULT_PORT
    environment: str = "development"
    tx_timeout_seconds: int = DEFAULT_TX_TIMEOUT_SECONDS
    abi_path: str | None = None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@dataclass(frozen=True)
class ClientSettings:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "ClientSettings":
        load_dotenv()
        return cls(api_url=os.getenv("API_URL") or DEFAULT_API_URL)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build the server settings from the environment (and a .env file).

    Called once at startup. Raises ConfigError listing every required
    variable that is missing.
    """
    load_dotenv()

    missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    return Settings(
        rpc_url=os.environ["RPC_URL"],
        private_key=os.environ["PRIVATE_KEY"],
        contract_address=os.environ["CONTRACT_ADDRESS"],
        port=_int_env("PORT", DEFAULT_PORT),
        environment=os.getenv("APP_ENV", "development").strip().lower(),
        tx_timeout_seconds=_int_env("TX_TIMEOUT_SECONDS", DEFAULT_TX_TIMEOUT_SECONDS),
        abi_path=os.getenv("CONTRACT_ABI_PATH") or None,
    )
