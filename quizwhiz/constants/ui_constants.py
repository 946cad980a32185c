"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "QuizWhiz"
PLACEHOLDER_QUESTION: str = "Enter your question text (supports Markdown + LaTeX)."
PLACEHOLDER_EXPLANATION: str = "Optional: explain why the answer is correct."

MODE_BUTTON_LIBRARY: str = "My Quizzes"
MODE_BUTTON_CREATE: str = "New Quiz"
MODE_BUTTON_PROGRESS: str = "Progress"
MODE_BUTTON_LOG_OUT: str = "Log Out"

LOGIN_BUTTON: str = "Log In"
SIGN_UP_BUTTON: str = "Create Account"
FORGOT_PASSWORD_BUTTON: str = "Forgot password?"

LIBRARY_PLAY_BUTTON: str = "Play"
LIBRARY_STUDY_BUTTON: str = "Study"
LIBRARY_EDIT_BUTTON: str = "Edit"
LIBRARY_DELETE_BUTTON: str = "Delete"
LIBRARY_EXPORT_BUTTON: str = "Export .qzx"
LIBRARY_EXPORT_ALL_BUTTON: str = "Export All"
LIBRARY_IMPORT_BUTTON: str = "Import .qzx"
LIBRARY_GENERATE_BUTTON: str = "Generate with AI"
LIBRARY_GENERATE_IMAGE_BUTTON: str = "Quiz from Image"
COMMUNITY_IMPORT_BUTTON: str = "Add to My Quizzes"
COMMUNITY_SEARCH_PLACEHOLDER: str = "Search by title or author"

CREATOR_ADD_BUTTON: str = "Add Question"
CREATOR_DELETE_BUTTON: str = "Delete Question"
CREATOR_PREV_BUTTON: str = "Previous"
CREATOR_NEXT_BUTTON: str = "Next"
CREATOR_SAVE_BUTTON: str = "Save Quiz"
CREATOR_CANCEL_BUTTON: str = "Close"
CREATOR_MOVE_UP_BUTTON: str = "Move Up"
CREATOR_MOVE_DOWN_BUTTON: str = "Move Down"

PLAYER_SUBMIT_ORDER_BUTTON: str = "Submit Order"
PLAYER_SUBMIT_TEXT_BUTTON: str = "Submit"
PLAYER_CONTINUE_BUTTON: str = "Continue"
PLAYER_EXIT_BUTTON: str = "Exit Quiz"

STUDY_FLIP_BUTTON: str = "Flip"
STUDY_PREV_BUTTON: str = "Previous"
STUDY_NEXT_BUTTON: str = "Next"
STUDY_SHUFFLE_BUTTON: str = "Shuffle"

PROGRESS_FOCUS_BUTTON: str = "Start Focus Session"

IMPORT_DIALOG_TITLE: str = "Select quiz file"
IMPORT_FILE_FILTER: str = "QuizWhiz files (*.qzx);;All files (*.*)"
EXPORT_DIALOG_TITLE: str = "Save quiz to file"
EXPORT_FILE_FILTER: str = "QuizWhiz files (*.qzx)"
EXPORT_ALL_DIALOG_TITLE: str = "Save backup archive"
EXPORT_ALL_FILE_FILTER: str = "Zip archives (*.zip)"
IMAGE_DIALOG_TITLE: str = "Select image"
IMAGE_FILE_FILTER: str = "Images (*.png *.jpg *.jpeg *.gif *.webp)"

OPTION_MARKERS: tuple[str, ...] = ("▲", "◆", "●", "■")

NO_QUIZ_SELECTED_MESSAGE: str = "Please select a quiz first."
STORAGE_FULL_MESSAGE: str = (
    "Your local storage is full. Delete some quizzes or clear your history to keep saving."
)
