import pandas as pd
from typing import List, Dict, Any
from pathlib import Path


class QuestionBankParser:
    """
    Load available quiz questions from tabular files.
    Every question needs an "id"; "category" is used for filtering.
    """

    @staticmethod
    def _normalize(df: pd.DataFrame) -> List[Dict[str, Any]]:
        # Normalize column names
        df.columns = df.columns.astype(str).str.strip().str.lower()

        if "id" not in df.columns:
            raise ValueError("Question bank needs an 'id' column")

        df = df.dropna(subset=["id"])
        df = df.astype(object).where(pd.notna(df), None)

        questions = []
        for row in df.to_dict(orient="records"):
            question_id = str(row["id"]).strip()
            if not question_id:
                continue
            row["id"] = question_id
            row["category"] = str(row["category"]).strip() if row.get("category") is not None else ""
            questions.append(row)

        return questions

    @staticmethod
    def parse_csv(file_path: str) -> List[Dict[str, Any]]:
        """Parse CSV question bank. Expected columns: id, category, ..."""
        return QuestionBankParser._normalize(pd.read_csv(file_path, dtype=str))

    @staticmethod
    def parse_excel(file_path: str) -> List[Dict[str, Any]]:
        """Parse Excel question bank. Expected columns: id, category, ..."""
        return QuestionBankParser._normalize(pd.read_excel(file_path, dtype=str))

    @staticmethod
    def parse_json(file_path: str) -> List[Dict[str, Any]]:
        """Parse a JSON array of question objects"""
        return QuestionBankParser._normalize(pd.read_json(file_path, orient="records", dtype={"id": str}))

    @staticmethod
    def auto_parse(file_path: str) -> List[Dict[str, Any]]:
        """
        Automatically detect file type and parse accordingly.
        Supports: CSV, Excel (xlsx, xls), JSON
        """
        file_ext = Path(file_path).suffix.lower()

        if file_ext == ".csv":
            return QuestionBankParser.parse_csv(file_path)
        elif file_ext in [".xlsx", ".xls"]:
            return QuestionBankParser.parse_excel(file_path)
        elif file_ext == ".json":
            return QuestionBankParser.parse_json(file_path)
        else:
            raise ValueError(f"Unsupported file format: {file_ext}. Use .csv, .xlsx or .json")
