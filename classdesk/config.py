from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    app_name: str = 'School Dashboard'
    app_env: str = 'local'
    app_timezone: str = 'UTC'
    database_url: str = 'sqlite:///./classdesk.db'
    storage_backend: str = 'sql'
    seed_on_empty: bool = True
    default_payment_period: int = 8
    default_monthly_fee: float = 8000.0
    default_lesson_block_amount: float = 4000.0
    month_label_locale: str = 'en'
    recent_notices_limit: int = 50
    db_slow_query_ms: int = 100
    metrics_slow_ms: int = 200


settings = Settings()
