"""Storage locations and limits for the local key/value store."""

import os
from pathlib import Path

DATA_DIR: Path = Path(os.getenv("QUIZWHIZ_DATA_DIR", str(Path.home() / ".quizwhiz")))
STORAGE_QUOTA_BYTES: int = int(os.getenv("QUIZWHIZ_STORAGE_QUOTA_BYTES", str(5 * 1024 * 1024)))

QUIZZES_KEY: str = "quizwhiz_quizzes"
USERS_KEY: str = "quizwhiz_users"
CURRENT_USER_KEY: str = "quizwhiz_current_user"
