from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

_BUNDLED_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "card_templates"


class Settings(BaseSettings):
    card_templates_dir: str = str(_BUNDLED_TEMPLATES_DIR)
    allowed_origins: str = "http://localhost:3000"
    template_reload_interval: int = 30  # seconds, 0 to disable
    log_level: str = "INFO"
    rate_limit_enabled: bool = True
    valuation_rate_limit: str = "120/minute"

    # Breakeven analysis
    breakeven_chart_steps: int = Field(default=20, ge=1)
    breakeven_chart_min_max_spend_cents: int = 2_000_000  # $20,000
    default_target_rate_threshold: float = 5.0  # percent

    model_config = {"env_prefix": "", "case_sensitive": False}


settings = Settings()

# Magnitudes below this are treated as zero by the breakeven solver
BREAKEVEN_EPSILON = 1e-9
