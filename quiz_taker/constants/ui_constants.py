"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "QuizTaker"

BUTTON_PREV: str = "Previous"
BUTTON_NEXT: str = "Next"
BUTTON_FINISH: str = "Finish"
BUTTON_REVIEW: str = "Review Answers"
BUTTON_RESTART: str = "Start Over"
BUTTON_ABOUT: str = "About"
BUTTON_HELP: str = "Help"

PROGRESS_TEMPLATE: str = "Question {current} of {total}"
TIME_UP_MESSAGE: str = "Time is up. Your answers have been submitted."
RESTART_CONFIRM_MESSAGE: str = "Starting over discards your saved progress. Continue?"
PASSED_LABEL: str = "Passed"
FAILED_LABEL: str = "Not passed"
