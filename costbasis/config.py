"""
Configuration for the cost basis engine.

Tax-rule constants live at module level; runtime options are read from the
environment (optionally via a .env file at the repository root).
"""
import os
from pathlib import Path
from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

# Share counts and dollar amounts below this are treated as zero.
SHARE_TOLERANCE = 0.001

# Quicken reports stock splits as 10 times the split ratio.
SPLIT_RATIO_SCALE = 10

# Holding periods longer than this many months are long-term.
LONG_TERM_MONTHS = 12

# Statutory wash-sale window, in calendar days either side of the sale.
WASH_SALE_WINDOW_DAYS = 30

LOT_DISPLAY_WIDTH = 78


class Config:
    """Application configuration."""
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    SHOW_LOTS: bool = os.getenv("COSTBASIS_SHOW_LOTS", "false").lower() == "true"
    EXPORT_FORMATS: str = os.getenv("COSTBASIS_EXPORT_FORMATS", "csv")

    @classmethod
    def get_export_formats(cls) -> list[str]:
        """Export formats as a list, e.g. "csv,parquet" -> ["csv", "parquet"]."""
        return [fmt.strip().lower() for fmt in cls.EXPORT_FORMATS.split(",") if fmt.strip()]
