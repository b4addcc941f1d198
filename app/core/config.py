from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: str | None = None
    OPENAI_BASE_URL: str | None = None

    OPENAI_MODEL_REPLY: str = "gpt-4o-mini"
    OPENAI_MODEL_NAME_CHECK: str = "gpt-4o-mini"
    OPENAI_MODEL_TRANSCRIBE: str = "whisper-1"

    OPENAI_TEMPERATURE_REPLY: float = 0.7
    OPENAI_TEMPERATURE_NAME_CHECK: float = 0.0
    LLM_TIMEOUT_SECONDS: float = 15.0

    WHATSAPP_VERIFY_TOKEN: str = ""
    WHATSAPP_APP_SECRET: str | None = None
    WHATSAPP_TOKEN: str | None = None
    WHATSAPP_PHONE_NUMBER_ID: str | None = None
    WHATSAPP_GRAPH_API_VERSION: str = "v21.0"

    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_KEY: str | None = None
    SUPABASE_BOOKINGS_TABLE: str = "bookings"

    HTTP_TIMEOUT_SECONDS: float = 10.0

    CLINIC_NAME: str = "Smiles Clinic"
    CLINIC_LOCATION_LINK: str = "https://www.google.com/maps?q=32.0290684,35.863774&z=17&hl=en"
    CLINIC_TIMEZONE: str = "Asia/Amman"

    SESSION_IDLE_TIMEOUT_SECONDS: float = 24 * 60 * 60

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    AUTO_REPLY_ENABLED: bool = False


settings = Settings()
