import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="FLEETDESK_", extra="ignore")

    db_url: str = "mysql+pymysql://fleetdesk:fleetdesk@db:3306/fleetdesk"

    host: str = "0.0.0.0"
    port: int = 8000

    log_level: str = "INFO"
    log_json: bool = False

    # Empty token disables the bearer check (local development only).
    api_token: str = ""

    timezone: str = "Asia/Riyadh"
    currency: str = "SAR"

    receipt_company_name: str = "FleetDesk Transport"
    supplier_placeholder: str = "Supplier"

    def auth_enabled(self) -> bool:
        if not self.api_token:
            logger.debug("FLEETDESK_API_TOKEN is not set; API requests are not authenticated")
            return False
        return True


settings = Settings()
