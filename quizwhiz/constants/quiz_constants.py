"""Quiz-related constants shared across UI and core layers."""

DEFAULT_TIME_LIMIT_SECONDS: int = 20
MIN_TIME_LIMIT_SECONDS: int = 5
MAX_TIME_LIMIT_SECONDS: int = 600
START_COUNTDOWN_SECONDS: int = 3
AUTO_ADVANCE_DELAY_MS: int = 600
TICK_INTERVAL_MS: int = 1000
TIME_LIMIT_TICKING_WINDOW_SECONDS: int = 5

TIMEOUT_ANSWER: int = -1
DEFAULT_OPTION_COUNT: int = 4
TRUE_FALSE_OPTIONS: tuple[str, str] = ("True", "False")
GENERATED_OPTION_PLACEHOLDER: str = "-"

DEFAULT_THEME: str = "classic"
IMPORTED_TITLE_SUFFIX: str = " (Imported)"
QUIZ_FILE_EXTENSION: str = ".qzx"
EXPORT_FOLDER_NAME: str = "quizwhiz_backup"

# Royalty-free tracks offered in the creator; stored on the quiz as a URL.
MUSIC_TRACKS: tuple[tuple[str, str], ...] = (
    ("No Music", ""),
    ("Chill Lo-Fi", "https://cdn.pixabay.com/download/audio/2022/05/27/audio_1808fbf07a.mp3?filename=lofi-study-112762.mp3"),
    ("Upbeat Pop", "https://cdn.pixabay.com/download/audio/2022/01/18/audio_d0a13f69d2.mp3?filename=upbeat-1-29008.mp3"),
    ("Clockwork Tension", "https://cdn.pixabay.com/download/audio/2022/03/24/audio_0782fa9838.mp3?filename=clockwork-104975.mp3"),
    ("Epic Battle", "https://cdn.pixabay.com/download/audio/2022/10/25/audio_5502c40c81.mp3?filename=action-rock-124971.mp3"),
)
