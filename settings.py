from __future__ import annotations
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

APP_NAME = os.getenv("APP_NAME", "Astro Tables: daily aspects and positions")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

DATA_DIR = Path(os.getenv("ASTRO_DATA_DIR", "./data"))
OUTPUT_DIR = Path(os.getenv("ASTRO_OUTPUT_DIR", str(DATA_DIR)))
LOG_LEVEL = os.getenv("ASTRO_LOG_LEVEL", "info").lower()  # "debug" | "info" | "warning"
ASPECT_SET = os.getenv("ASTRO_ASPECT_SET", "pablo_cerda")
