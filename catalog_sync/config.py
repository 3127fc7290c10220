from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog_sync.entities import Side


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8")

    logfile: str
    metakocka_base_url: str = "https://main.metakocka.si/rest/eshop/v1/json/"
    request_timeout: float = 30.0
    products_page_size: int = 100

    system_a_name: str = "System A"
    system_a_secret_key: str
    system_a_company_id: str
    system_a_warehouse_id: str | None = None
    system_b_name: str = "System B"
    system_b_secret_key: str
    system_b_company_id: str
    system_b_warehouse_ids: list[str] = []

    authoritative_system: Side = Side.A
    strict_sequence_matching: bool = True
    legacy_purchasing_carry_through: bool = False
    delta_directory: str = "delta"

    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    report_email_from: str | None = None
    report_email_to: str | None = None


settings = Settings()
