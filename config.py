from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Mendefinisikan env variables yang dibutuhkan dan Pydantic otomatis memuat nilai dari file .env
    Semua API key opsional, ketiadaan key baru dilaporkan saat client dibuat.
    """
    # Environment variables
    GROQ_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None

    # Konfigurasi provider LLM (OpenAI-compatible)
    LLM_PROVIDER: str = "groq"
    LLM_MODEL: Optional[str] = None
    LLM_BASE_URL: Optional[str] = None
    LLM_FORCE_TOOL_CALL: bool = True

    # Batasi waktu untuk analisis
    LLM_TIMEOUT_SECONDS: int = 300 # 5 menit

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file = ".env", env_file_encoding="utf-8", extra="ignore")

    def api_key_for(self, provider: str) -> Optional[str]:
        """Ambil API key sesuai provider yang dipilih."""
        return {"groq": self.GROQ_API_KEY, "openai": self.OPENAI_API_KEY}.get(provider)

settings = Settings()
