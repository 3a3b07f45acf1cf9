from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Line windows
    DATE_SCAN_LINES: int = 10
    MERCHANT_SCAN_LINES: int = 5
    MERCHANT_MIN_LENGTH: int = 3
    MERCHANT_MAX_LENGTH: int = 50

    # Amount selection
    MIN_FALLBACK_AMOUNT: float = 1.0  # Filters item counts and codes

    # Category classification
    HISTORY_SIMILARITY_THRESHOLD: float = 0.7
    SEMANTIC_SIMILARITY_THRESHOLD: float = 0.5
    BRAND_CONFIDENCE: float = 0.9

    # Batch import
    BATCH_MAX_WORKERS: int = 4

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
