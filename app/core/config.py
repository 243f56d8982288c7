from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    env: str = Field(default="dev", alias="ENV")
    database_url: str = Field(default="mysql+asyncmy://root:@localhost:3306/api_banguat_tipocambio", alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, alias="DB_CONNECTION_LIMIT")
    db_pool_timeout_seconds: int = Field(default=60, alias="DB_ACQUIRE_TIMEOUT_SECONDS")
    db_connect_attempts: int = Field(default=30, alias="DB_CONNECT_ATTEMPTS")
    db_connect_delay_seconds: int = Field(default=2, alias="DB_CONNECT_DELAY_SECONDS")
    soap_url: str = Field(default="https://www.banguat.gob.gt/variables/ws/tipocambio.asmx", alias="SOAP_API_URL")
    soap_namespace: str = Field(default="http://www.banguat.gob.gt/variables/ws/", alias="SOAP_NAMESPACE")
    soap_method: str = Field(default="TipoCambioDia", alias="SOAP_METHOD")
    soap_timeout_seconds: float = Field(default=30.0, alias="SOAP_TIMEOUT_SECONDS")
    soap_probe_timeout_seconds: float = Field(default=10.0, alias="SOAP_PROBE_TIMEOUT_SECONDS")
    cors_origins: str = Field(default="http://localhost:4321", alias="CORS_ORIGINS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def soap_action(self) -> str:
        return f"{self.soap_namespace}{self.soap_method}"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

settings = Settings()
