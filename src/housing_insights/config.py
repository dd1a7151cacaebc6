"""Runtime configuration via environment variables."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent

# Seed dataset
BUNDLED_DATA_PATH = PACKAGE_DIR / "data" / "listings.csv"
DATA_PATH = Path(os.getenv("HOUSING_DATA_PATH", str(BUNDLED_DATA_PATH)))

# Reports
OUTPUT_DIR = Path(os.getenv("HOUSING_OUTPUT_DIR", "outputs"))
TOP_N_COUNTIES = int(os.getenv("HOUSING_TOP_N_COUNTIES", "5"))
CURRENCY = os.getenv("HOUSING_CURRENCY", "KES")

# Logging
LOG_LEVEL = os.getenv("HOUSING_LOG_LEVEL", "INFO").upper()
