from quiz_taker.styling import ColorPalette, Styles, Theme


def test_theme_colors_follow_theme():
    assert ColorPalette.CORRECT.get(Theme.LIGHT) == "#107C10"
    assert ColorPalette.CORRECT.get(Theme.DARK) == "#6FCF6F"


def test_review_css_uses_answer_state_colors():
    css = Styles.get_review_css(Theme.DARK)

    assert ColorPalette.CORRECT.dark in css
    assert ColorPalette.INCORRECT.dark in css
    assert ".option.correct" in css


def test_primary_button_style():
    style = Styles.get_primary_button_style()

    assert ColorPalette.BUTTON_PRIMARY_BG.light in style
    assert "QPushButton:disabled" in style
