from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    app_name: str = "Contactbook"
    app_version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # Database
    database_url: str = "postgresql+asyncpg://contactbook:contactbook@db:5432/contactbook"
    auto_create_tables: bool = False

    # CORS
    backend_cors_origins: list[str] = ["http://localhost", "http://localhost:5173"]

    # Client
    api_base_url: str = "http://localhost:3001/api/contacts"

    model_config = {"env_file": ".env", "case_sensitive": False}


settings = Settings()
