"""
This module contains the configuration defaults for the plantctl launcher.
It defines paths, external command locations, process monitor parameters and
logging settings. Values can be overridden from the environment or a .env file.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=True)

#* --- Core Paths ---
BASE_DIR = pathlib.Path(os.getenv("PLANTCTL_BASE_DIR", os.getcwd())).resolve()  # Application Root
ASSETS_DIR_NAME = "assets"
PUBLIC_DIR_NAME = "public"

#* --- Application ---
APP_FILE = os.getenv("PLANTCTL_APP_FILE", "app.js")
PROCESS_TITLE = os.getenv("PLANTCTL_PROCESS_TITLE", "plantctl - Launcher")

#* --- External Executables ---
NODE_EXECUTABLE = os.getenv("NODE_EXECUTABLE", "node")
LESSC_EXECUTABLE = os.getenv("LESSC_EXECUTABLE", "lessc")
UGLIFYJS_EXECUTABLE = os.getenv("UGLIFYJS_EXECUTABLE", "uglifyjs")
COPY_EXECUTABLE = os.getenv("COPY_EXECUTABLE", "cat")
FOREVER_EXECUTABLE = os.getenv("FOREVER_EXECUTABLE", "forever")

#* --- Process Monitor (forever) Settings ---
FOREVER_MIN_UPTIME_MS = int(os.getenv("FOREVER_MIN_UPTIME_MS", "5000"))
FOREVER_SPIN_SLEEP_MS = int(os.getenv("FOREVER_SPIN_SLEEP_MS", "2000"))
GRACEFUL_SHUTDOWN_TIMEOUT = int(os.getenv("GRACEFUL_SHUTDOWN_TIMEOUT", "10"))  # seconds before force-killing

#* --- Asset Pipeline Settings ---
ASSET_CATEGORIES = ("stylesheets", "javascripts", "images")
IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "gif", "svg", "ico")
MANIFEST_FILE_NAME = "defaults"
MERGE_BUNDLE_NAME = os.getenv("MERGE_BUNDLE_NAME", "all")
WATCHDOG_DEBOUNCE_SECONDS = float(os.getenv("WATCHDOG_DEBOUNCE_SECONDS", "1.0"))

#* --- Logging ---
LOG_SUFFIXES = ("run", "out", "err", "for")
RUN_LOG_TAIL_LINES = int(os.getenv("RUN_LOG_TAIL_LINES", "20"))
