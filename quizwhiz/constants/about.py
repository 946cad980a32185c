"""Static metadata describing QuizWhiz."""

APP_NAME = "QuizWhiz"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizWhiz is a desktop quiz maker built with Qt and FastAPI. "
    "Create multiple-choice, true/false, text and ordering questions, play them against the clock, "
    "study with flashcards and collect achievements along the way."
)

HELP_TEXT = (
    "Create a quiz from the library with 'New Quiz', or generate one with AI when a GITHUB_TOKEN is set.\n\n"
    "Question types:\n"
    "  Multiple choice: mark the correct option.\n"
    "  True / False: mark True or False.\n"
    "  Text answer: type the exact answer; matching ignores case and surrounding spaces.\n"
    "  Ordering: list the items in the CORRECT order. Players see them shuffled.\n\n"
    "Add an explanation to tell players why an answer is correct. It appears after they answer.\n\n"
    "Quizzes can be exported as .qzx files and imported again on any machine."
)
