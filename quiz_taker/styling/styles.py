"""Centralized styles for the Qt window and the embedded question view."""

from .color_palette import ColorPalette, Theme

class Styles:
    """Helper class to generate stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
            }}
            QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:disabled {{
                color: {ColorPalette.BUTTON_DISABLED_TEXT.get(theme)};
            }}
            QRadioButton {{
                background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)};
                border-radius: 4px;
                padding: 8px;
            }}
            QGroupBox {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 6px;
                margin-top: 6px;
                padding-top: 10px;
            }}
        """

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_timer_label_style(theme: Theme = Theme.LIGHT) -> str:
        return f"font-size: 16pt; font-weight: bold; color: {ColorPalette.TIMER.get(theme)};"

    @staticmethod
    def get_secondary_label_style(theme: Theme = Theme.LIGHT) -> str:
        return f"color: {ColorPalette.TEXT_SECONDARY.get(theme)};"

    @staticmethod
    def get_primary_button_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QPushButton {{
                background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
                border: none;
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:disabled {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {ColorPalette.BUTTON_DISABLED_TEXT.get(theme)};
            }}
        """

    @staticmethod
    def get_review_css(theme: Theme = Theme.LIGHT) -> str:
        """CSS shared by the result summary and review mode documents."""
        return f"""
      .passed {{ color: {ColorPalette.CORRECT.get(theme)}; font-weight: bold; }}
      .failed {{ color: {ColorPalette.INCORRECT.get(theme)}; font-weight: bold; }}
      .review-card {{ background: {ColorPalette.BACKGROUND_SECONDARY.get(theme)}; border-radius: 6px; padding: 0.5rem 1rem; margin-bottom: 0.75rem; }}
      .review-title {{ color: {ColorPalette.TEXT_SECONDARY.get(theme)}; }}
      .review-options {{ padding: 0; }}
      .option {{ list-style: none; padding: 0.3rem 0.5rem; margin: 0.2rem 0; border-radius: 4px; }}
      .option.correct {{ outline: 2px solid {ColorPalette.CORRECT.get(theme)}; }}
      .option.incorrect {{ outline: 2px solid {ColorPalette.INCORRECT.get(theme)}; }}
        """
