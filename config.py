import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Storage settings
    data_file: str = os.getenv("LIBRARY_DATA_FILE", "books.csv")

    # CLI settings
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain")
    log_level: str = os.getenv("LIBRARY_LOG_LEVEL", "WARNING")

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Management System")


settings = Settings()
