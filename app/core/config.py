from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    magic_link_expire_minutes: int = 15

    app_url: str = "http://localhost:3000"
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    db_echo: bool = False

    # Stripe
    stripe_secret_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None
    stripe_price_amount: int = 999
    stripe_currency: str = "usd"

    # OpenAI
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"

    # Resend (magic link emails)
    resend_api_key: Optional[str] = None
    resend_from_email: Optional[str] = None

    # Лимиты запросов: количество на окно в секундах
    share_rate_limit: int = 60
    share_rate_window_seconds: int = 60
    claim_email_rate_limit: int = 5
    claim_email_rate_window_seconds: int = 60
    ai_rate_limit: int = 10
    export_rate_limit: int = 10
    user_rate_window_seconds: int = 60

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
