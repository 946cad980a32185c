"""Tests for study flashcards and the community catalog."""

import json
import random

import pytest

from conftest import make_quiz
from quizwhiz.core.community_catalog import CommunityCatalog
from quizwhiz.core.services.flashcard_deck import FlashcardDeck


class TestFlashcardDeck:
    def test_cards_show_correct_answers(self, sample_quiz):
        deck = FlashcardDeck(sample_quiz)
        backs = [card.back for card in deck.cards()]
        assert backs == ["Paris", "True", "Rome", "Moon → Earth → Sun"]

    def test_navigation_wraps_and_unflips(self, sample_quiz):
        deck = FlashcardDeck(sample_quiz)
        assert deck.flip() is True
        deck.previous()
        assert deck.position == 3
        assert not deck.is_flipped
        deck.next()
        assert deck.position == 0

    def test_shuffle_keeps_cards(self, sample_quiz):
        deck = FlashcardDeck(sample_quiz)
        deck.next()
        deck.shuffle(random.Random(3))
        assert deck.position == 0
        assert sorted(card.front for card in deck.cards()) == sorted(q.text for q in sample_quiz.questions)

    def test_empty_quiz(self):
        with pytest.raises(ValueError):
            FlashcardDeck(make_quiz())


class TestCommunityCatalog:
    def test_bundled_catalog_loads(self):
        catalog = CommunityCatalog.from_default_file()
        featured = catalog.list_featured()
        assert featured
        plays = [entry.plays for entry in featured]
        assert plays == sorted(plays, reverse=True)
        assert catalog.find("9901").author == "ScienceGeek"

    def test_search_matches_title_and_author(self):
        catalog = CommunityCatalog.from_default_file()
        assert [entry.quiz.id for entry in catalog.search("space")] == ["9901"]
        assert [entry.quiz.id for entry in catalog.search("sciencegeek")] == ["9901"]
        assert catalog.search("  ") == catalog.list_featured()

    def test_missing_file_gives_empty_catalog(self, tmp_path):
        assert CommunityCatalog.from_file(tmp_path / "nope.json").list_featured() == []

    def test_malformed_entries_are_skipped(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(
            json.dumps(
                [
                    {"id": "1", "title": "No author", "questions": []},
                    {
                        "id": "2",
                        "title": "Ok",
                        "author": "me",
                        "plays": 3,
                        "questions": [{"type": "true-false", "question": "Q", "correctAnswer": 0}],
                    },
                ]
            ),
            encoding="utf-8",
        )
        catalog = CommunityCatalog.from_file(path)
        assert [entry.quiz.id for entry in catalog.list_featured()] == ["2"]
