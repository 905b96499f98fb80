"""Qt main window for taking a quiz."""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QButtonGroup,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QRadioButton,
    QVBoxLayout,
    QWidget,
)

from quiz_taker.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from quiz_taker.constants.ui_constants import (
    BUTTON_ABOUT,
    BUTTON_FINISH,
    BUTTON_HELP,
    BUTTON_NEXT,
    BUTTON_PREV,
    BUTTON_RESTART,
    BUTTON_REVIEW,
    RESTART_CONFIRM_MESSAGE,
    TIME_UP_MESSAGE,
    WINDOW_TITLE,
)
from quiz_taker.core.result_report import (
    build_review_items,
    format_clock,
    progress_text,
    render_review_html,
    render_summary_html,
)
from quiz_taker.core.services.quiz_session import QuizSession
from quiz_taker.styling import Styles
from quiz_taker.ui.dialog_helpers import confirm_restart, show_error, show_info
from quiz_taker.ui.question_renderer import render_question_document, render_review_document

logger = logging.getLogger(__name__)


class QuizWindow(QMainWindow):
    """Renders session state and forwards user actions to the session."""

    def __init__(self, session: QuizSession, font_size: int = 14) -> None:
        super().__init__()
        self.session = session
        self._font_size = font_size
        # Key of the document currently loaded in the web view, to avoid reloading every tick.
        self._displayed_document: tuple[object, ...] | None = None
        self._time_up_announced = session.is_finished

        self.setWindowTitle(f"{WINDOW_TITLE} - {session.definition.title}")
        self._build_ui()
        self.setStyleSheet(Styles.get_main_window_style())
        self.session.add_listener(lambda _: self.refresh())
        self.refresh()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout()
        central_widget.setLayout(layout)

        header_row = QHBoxLayout()
        self.title_label = QLabel(self.session.definition.title, self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        header_row.addWidget(self.title_label)
        header_row.addStretch()
        self.timer_label = QLabel("00:00", self)
        self.timer_label.setStyleSheet(Styles.get_timer_label_style())
        header_row.addWidget(self.timer_label)
        layout.addLayout(header_row)

        self.progress_label = QLabel("", self)
        self.progress_label.setStyleSheet(Styles.get_secondary_label_style())
        layout.addWidget(self.progress_label)

        self.document_view = QWebEngineView(self)
        self.document_view.setMinimumHeight(180)
        layout.addWidget(self.document_view, stretch=1)

        self.options_group = QGroupBox(self)
        self.options_layout = QVBoxLayout()
        self.options_group.setLayout(self.options_layout)
        self.option_buttons = QButtonGroup(self)
        self.option_buttons.setExclusive(True)
        self.option_buttons.idClicked.connect(self._handle_option_clicked)
        layout.addWidget(self.options_group)

        nav_row = QHBoxLayout()
        self.prev_button = QPushButton(BUTTON_PREV, self)
        self.prev_button.clicked.connect(self._handle_prev)
        nav_row.addWidget(self.prev_button)
        self.next_button = QPushButton(BUTTON_NEXT, self)
        self.next_button.clicked.connect(self._handle_next)
        nav_row.addWidget(self.next_button)
        self.finish_button = QPushButton(BUTTON_FINISH, self)
        self.finish_button.clicked.connect(self._handle_finish)
        self.finish_button.setStyleSheet(Styles.get_primary_button_style())
        nav_row.addWidget(self.finish_button)
        nav_row.addStretch()
        self.review_button = QPushButton(BUTTON_REVIEW, self)
        self.review_button.clicked.connect(self._handle_review)
        nav_row.addWidget(self.review_button)
        self.restart_button = QPushButton(BUTTON_RESTART, self)
        self.restart_button.clicked.connect(self._handle_restart)
        nav_row.addWidget(self.restart_button)
        self.about_button = QPushButton(BUTTON_ABOUT, self)
        self.about_button.clicked.connect(self._handle_about)
        nav_row.addWidget(self.about_button)
        self.help_button = QPushButton(BUTTON_HELP, self)
        self.help_button.clicked.connect(self._handle_help)
        nav_row.addWidget(self.help_button)
        layout.addLayout(nav_row)

    # --- Rendering ---

    def refresh(self) -> None:
        with self.session.locked() as engine:
            question = engine.current_question
            selected_index = engine.get_selected_index()
            is_finished = engine.is_finished
            remaining_sec = engine.remaining_sec
            review_mode = self.session.review_mode
            navigation = self.session.navigation_state()
            progress = progress_text(engine.current_index, engine.length)
            summary_html = review_html = None
            if is_finished and engine.summary is not None:
                summary_html = render_summary_html(engine.summary, engine.questions)
                if review_mode:
                    review_html = render_review_html(build_review_items(engine))

        self.timer_label.setText(format_clock(remaining_sec))
        self.progress_label.setText(progress)
        self.prev_button.setEnabled(navigation.can_prev)
        self.next_button.setEnabled(navigation.can_next)
        self.finish_button.setEnabled(navigation.can_finish)
        self.review_button.setVisible(is_finished and not review_mode)

        if is_finished:
            self.options_group.setVisible(False)
            self._show_document(
                ("result", review_mode),
                lambda: render_review_document(summary_html or "", review_html, self._font_size),
            )
            if remaining_sec == 0 and not self._time_up_announced:
                self._time_up_announced = True
                show_info(self, WINDOW_TITLE, TIME_UP_MESSAGE)
            return

        self._time_up_announced = False
        self.options_group.setVisible(True)
        if self._show_document(
            ("question", question.id),
            lambda: render_question_document(question.text, self._font_size),
        ):
            self._rebuild_options(question.options)
        for button in self.option_buttons.buttons():
            button.setChecked(self.option_buttons.id(button) == selected_index)

    def _show_document(self, key: tuple[object, ...], build_html) -> bool:
        if key == self._displayed_document:
            return False
        self._displayed_document = key
        self.document_view.setHtml(build_html())
        return True

    def _rebuild_options(self, options: tuple[str, ...]) -> None:
        for button in self.option_buttons.buttons():
            self.option_buttons.removeButton(button)
            self.options_layout.removeWidget(button)
            button.deleteLater()
        for index, option_text in enumerate(options):
            button = QRadioButton(f"{chr(ord('A') + index)}. {option_text}", self.options_group)
            button.setFocusPolicy(Qt.StrongFocus)
            self.option_buttons.addButton(button, index)
            self.options_layout.addWidget(button)

    # --- Actions ---

    def _handle_option_clicked(self, option_index: int) -> None:
        result = self.session.select(option_index)
        if not result.ok:
            self.refresh()

    def _handle_prev(self) -> None:
        self.session.prev()

    def _handle_next(self) -> None:
        self.session.next()

    def _handle_finish(self) -> None:
        self.session.finish()

    def _handle_review(self) -> None:
        result = self.session.enter_review()
        if not result.ok:
            show_error(self, WINDOW_TITLE, result.message or "")

    def _handle_restart(self) -> None:
        if not confirm_restart(self, RESTART_CONFIRM_MESSAGE):
            return
        self._displayed_document = None
        self.session.restart()

    def _handle_about(self) -> None:
        details = f"{APP_NAME} v{APP_VERSION}\nLicense: {APP_LICENSE}\n\n{APP_ABOUT_TEXT}"
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)

    def closeEvent(self, event: QCloseEvent) -> None:
        logger.info("Window closed; stopping the countdown")
        self.session.stop()
        super().closeEvent(event)
