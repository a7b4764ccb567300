from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", protected_namespaces=())

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"

    ocr_enabled: bool = True
    ocr_min_text_chars: int = 50
    ocr_render_scale: float = 2.0
    ocr_languages: str = "eng"
    ocr_image_max_dim: int = 1600
    tesseract_cmd: str = ""

    form_checkbox_checked_label: str = "Yes"
    form_checkbox_unchecked_label: str = "No"
    form_multi_value_separator: str = ", "

    chunk_size: int = 6000
    chunk_overlap: int = 500

    scan_concurrency: int = 3
    scan_known_values_window: int = 50
    scan_strict_placeholder_filter: bool = False
    scan_sequential_context: bool = False
    scan_system_prompt_path: str = ""

    model_provider: str = "ollama"
    model_temperature: float = 0.1
    model_num_ctx: int = 32768
    model_num_predict: int = 4096

    ollama_base_url: str = "http://localhost:11434"
    ollama_model_name: str = "gpt-oss:20b"
    ollama_timeout_seconds: int = 120

    openai_compatible_base_url: str = ""
    openai_compatible_api_key: str = ""
    openai_compatible_model_name: str = ""
    openai_compatible_timeout_seconds: int = 120
