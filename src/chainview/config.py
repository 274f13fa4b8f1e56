from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    etherscan_api_key: str = ""
    arbiscan_api_key: str = ""
    taostats_api_key: str = ""
    relay_url: str = "http://localhost:8000/relay"  # empty = call upstream APIs directly
    relay_extra_hosts: list[str] = []
    http_timeout: float = 30.0
    http_rate_per_second: float = 5.0
    rate_limit_retries: int = 3
    page_size: int = 100
    export_max_pages: int = 20
    log_level: str = "INFO"
    debug: bool = True

    class Config:
        env_file = ".env"
        env_prefix = "CHAINVIEW_"


settings = Settings()
