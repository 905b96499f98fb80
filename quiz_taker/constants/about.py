"""Static metadata describing QuizTaker."""

APP_NAME = "QuizTaker"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizTaker runs a single timed multiple-choice quiz, remembers your progress "
    "between restarts and shows a pass/fail summary with per-topic statistics."
)

HELP_TEXT = (
    "Pick an answer for each question and move on with Next. The quiz finishes when "
    "you press Finish on the last question or when the timer runs out.\n\n"
    "Quiz files can be JSON or plain text. The text format looks like this:\n\n"
    "TITLE: Radians\nTIMELIMIT: 120\nPASS: 0.7\n\n"
    "ID: q1\nTOPIC: Angles\nQ: What is $30^\\circ$ in radians?\n"
    "A: $\\frac{\\pi}{2}$\nB: $\\frac{\\pi}{6}$\nC: $\\frac{\\pi}{3}$\nCORRECT: B"
)
