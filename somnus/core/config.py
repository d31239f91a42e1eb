from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"

    # Which SleepReport producer /v1/analysis uses by default: "local" or "gemini"
    ANALYSIS_PROVIDER: str = "local"
    # On a remote failure, answer with the local engine instead of a 503
    ANALYSIS_FALLBACK_TO_LOCAL: bool = True

    # Remote analysis (Google Gemini via google-genai); empty base uses the SDK default
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-3-flash-preview"
    GEMINI_API_BASE: str = ""
    GEMINI_TIMEOUT_SECONDS: float = 30.0

    @property
    def remote_configured(self) -> bool:
        return bool(self.GEMINI_API_KEY)


settings = Settings()
