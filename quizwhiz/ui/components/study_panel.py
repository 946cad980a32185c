"""Component for studying a quiz as flashcards."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from quizwhiz.constants.ui_constants import (
    CREATOR_CANCEL_BUTTON,
    STUDY_FLIP_BUTTON,
    STUDY_NEXT_BUTTON,
    STUDY_PREV_BUTTON,
    STUDY_SHUFFLE_BUTTON,
)
from quizwhiz.core.services.flashcard_deck import FlashcardDeck
from quizwhiz.styling.styles import Styles
from quizwhiz.ui.question_renderer import render_flashcard_side


class StudyPanel(QWidget):
    """Shows one card at a time; flipping reveals the answer and explanation."""

    def __init__(self, on_close: Callable[[], None], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.on_close = on_close
        self._deck: FlashcardDeck | None = None
        self._game_font_size: int = 14
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.title_label = QLabel("", self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        header_row.addWidget(self.title_label)
        header_row.addStretch()
        self.position_label = QLabel("", self)
        header_row.addWidget(self.position_label)
        layout.addLayout(header_row)

        self.side_label = QLabel("", self)
        self.side_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.side_label)

        self.card_view = QWebEngineView(self)
        layout.addWidget(self.card_view, stretch=1)

        button_row = QHBoxLayout()
        self.prev_button = QPushButton(STUDY_PREV_BUTTON, self)
        self.prev_button.clicked.connect(self._handle_previous)
        button_row.addWidget(self.prev_button)

        self.flip_button = QPushButton(STUDY_FLIP_BUTTON, self)
        self.flip_button.clicked.connect(self._handle_flip)
        button_row.addWidget(self.flip_button)

        self.next_button = QPushButton(STUDY_NEXT_BUTTON, self)
        self.next_button.clicked.connect(self._handle_next)
        button_row.addWidget(self.next_button)

        button_row.addStretch()

        self.shuffle_button = QPushButton(STUDY_SHUFFLE_BUTTON, self)
        self.shuffle_button.clicked.connect(self._handle_shuffle)
        button_row.addWidget(self.shuffle_button)

        self.close_button = QPushButton(CREATOR_CANCEL_BUTTON, self)
        self.close_button.clicked.connect(lambda: self.on_close())
        button_row.addWidget(self.close_button)
        layout.addLayout(button_row)

    def load_deck(self, deck: FlashcardDeck) -> None:
        self._deck = deck
        self.title_label.setText(deck.quiz.title)
        self._show_card()

    def _show_card(self) -> None:
        if self._deck is None:
            return
        card = self._deck.current
        self.position_label.setText(f"Card {self._deck.position + 1} of {self._deck.size}")
        if self._deck.is_flipped:
            self.side_label.setText("Answer")
            html = render_flashcard_side(card.back, [card.explanation], font_size=self._game_font_size + 6)
        else:
            self.side_label.setText("Question")
            html = render_flashcard_side(card.front, font_size=self._game_font_size + 6, image_url=card.image_ref)
        self.card_view.setHtml(html)

    def _handle_flip(self) -> None:
        if self._deck is not None:
            self._deck.flip()
            self._show_card()

    def _handle_next(self) -> None:
        if self._deck is not None:
            self._deck.next()
            self._show_card()

    def _handle_previous(self) -> None:
        if self._deck is not None:
            self._deck.previous()
            self._show_card()

    def _handle_shuffle(self) -> None:
        if self._deck is not None:
            self._deck.shuffle()
            self._show_card()

    def set_game_font_size(self, size: int) -> None:
        self._game_font_size = size
        self._show_card()
