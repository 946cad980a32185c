"""Tests for .qzx files and zip backups."""

from datetime import date
import json
import zipfile

import pytest

from conftest import make_quiz
from quizwhiz.core.quiz_exporter import (
    backup_filename,
    export_quizzes_to_zip,
    quiz_filename,
    sanitize_filename,
    save_quiz_to_file,
)
from quizwhiz.core.quiz_importer import QuizImportError, load_quiz_from_file, parse_quiz_document


class TestExport:
    def test_filenames(self, sample_quiz):
        assert sanitize_filename("My Quiz: Part 2!") == "my_quiz__part_2_"
        assert quiz_filename(sample_quiz) == "capitals.qzx"
        assert backup_filename(date(2024, 5, 31)) == "quizwhiz_export_2024-05-31.zip"

    def test_save_and_load_file(self, tmp_path, sample_quiz):
        path = tmp_path / "capitals.qzx"
        save_quiz_to_file(path, sample_quiz)
        assert json.loads(path.read_text(encoding="utf-8"))["title"] == "Capitals"
        assert load_quiz_from_file(path).quiz == sample_quiz

    def test_empty_quiz_not_exported(self, tmp_path):
        with pytest.raises(ValueError):
            save_quiz_to_file(tmp_path / "empty.qzx", make_quiz(title="Empty"))

    def test_zip_backup_keeps_duplicate_titles(self, tmp_path, france_question):
        quizzes = [
            make_quiz(france_question, quiz_id="a", title="Geo"),
            make_quiz(france_question, quiz_id="b", title="geo"),
            make_quiz(france_question, quiz_id="c", title="History"),
        ]
        members = export_quizzes_to_zip(tmp_path / "backup.zip", quizzes)
        assert members == [
            "quizwhiz_backup/geo.qzx",
            "quizwhiz_backup/geo_2.qzx",
            "quizwhiz_backup/history.qzx",
        ]
        with zipfile.ZipFile(tmp_path / "backup.zip") as archive:
            assert sorted(archive.namelist()) == sorted(members)
            assert json.loads(archive.read("quizwhiz_backup/geo_2.qzx"))["id"] == "b"

    def test_zip_requires_quizzes(self, tmp_path):
        with pytest.raises(ValueError):
            export_quizzes_to_zip(tmp_path / "backup.zip", [])


class TestImport:
    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "quiz.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(QuizImportError, match="valid .qzx file"):
            load_quiz_from_file(path)

    def test_corrupted_file(self):
        with pytest.raises(QuizImportError, match="corrupted"):
            parse_quiz_document("{oops")

    def test_missing_title(self):
        with pytest.raises(QuizImportError, match="title"):
            parse_quiz_document(json.dumps({"id": "1", "questions": []}))

    def test_invalid_question(self):
        document = {
            "id": "1",
            "title": "Broken",
            "questions": [{"type": "multiple-choice", "question": "", "options": ["a", "b"], "correctAnswer": 0}],
        }
        with pytest.raises(QuizImportError, match="Add question text"):
            parse_quiz_document(json.dumps(document))
