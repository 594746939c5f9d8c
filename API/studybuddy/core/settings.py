from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "dev"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    llm_provider: str = "openai"
    llm_model: str = "gpt-3.5-turbo"
    llm_timeout_seconds: float = 60.0
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "qwen2.5:3b"

    image_provider: str = "openai"
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"
    image_timeout_seconds: float = 120.0

    # Client side (CLI dashboard).
    api_base_url: str = "http://localhost:8000"
    client_data_dir: str = "data/client"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
