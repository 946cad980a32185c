"""Network configuration constants for the share server."""

import os

DEFAULT_HOST: str = os.getenv("QUIZWHIZ_HOST", "127.0.0.1")
DEFAULT_PORT: int = int(os.getenv("QUIZWHIZ_PORT", "8000"))
