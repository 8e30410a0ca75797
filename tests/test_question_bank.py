import json

import pytest

from personalization.question_bank import QuestionBankParser


def test_parse_csv_normalizes_columns(tmp_path):
    path = tmp_path / "questions.csv"
    path.write_text(
        " ID ,Category,Question\n"
        "001,finance,What is EBITDA?\n"
        ",finance,Missing id\n"
        "002,,What is a KPI?\n",
        encoding="utf-8",
    )

    questions = QuestionBankParser.auto_parse(str(path))

    assert [q["id"] for q in questions] == ["001", "002"]
    assert questions[0]["category"] == "finance"
    assert questions[0]["question"] == "What is EBITDA?"
    assert questions[1]["category"] == ""


def test_parse_json(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps([
        {"id": "q1", "category": "strategy", "difficulty": "hard"},
        {"id": "q2", "category": "marketing", "difficulty": "easy"},
    ]), encoding="utf-8")

    questions = QuestionBankParser.auto_parse(str(path))

    assert [(q["id"], q["category"]) for q in questions] == [("q1", "strategy"), ("q2", "marketing")]


def test_missing_id_column(tmp_path):
    path = tmp_path / "questions.csv"
    path.write_text("category,question\nfinance,What?\n", encoding="utf-8")

    with pytest.raises(ValueError, match="'id' column"):
        QuestionBankParser.auto_parse(str(path))


def test_unsupported_format(tmp_path):
    with pytest.raises(ValueError, match="Unsupported file format"):
        QuestionBankParser.auto_parse(str(tmp_path / "questions.pdf"))
