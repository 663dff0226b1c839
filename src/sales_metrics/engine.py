# engine.py
"""
SalesMetricsEngine: binds a SalesRecord frame and settings, answers catalog questions.
The engine holds no mutable state; every call recomputes from the bound frame.
"""

import logging
from typing import Dict, Iterable, Optional

import pandas as pd

from sales_metrics.catalog import QUESTIONS
from sales_metrics.errors import InvalidParameterError
from sales_metrics.utils.constants import REQUIRED_COLUMNS
from sales_metrics.utils.io_utils import load_settings
from sales_metrics.utils.schema import require_columns

logger = logging.getLogger(__name__)

_BY_NAME = {q["name"]: qid for qid, q in QUESTIONS.items()}


def resolve_question(question: str) -> str:
    """Accept a question id ("Q12", "q12") or name ("top_stores_per_department")."""
    key = str(question).strip()
    if key.upper() in QUESTIONS:
        return key.upper()
    if key in _BY_NAME:
        return _BY_NAME[key]
    raise InvalidParameterError(f"Unknown question '{question}'. Known ids: {list(QUESTIONS)}.")


class SalesMetricsEngine:
    def __init__(self, records: pd.DataFrame, settings: Optional[dict] = None):
        require_columns(records, REQUIRED_COLUMNS, "SalesMetricsEngine")
        self._records = records
        self.settings = settings if settings is not None else load_settings()

    @property
    def records(self) -> pd.DataFrame:
        return self._records

    @staticmethod
    def questions() -> pd.DataFrame:
        return pd.DataFrame([
            {"id": qid, "name": q["name"], "family": q["family"], "business_question": q["business_question"]}
            for qid, q in QUESTIONS.items()
        ])

    def ask(self, question: str) -> pd.DataFrame:
        qid = resolve_question(question)
        result = QUESTIONS[qid]["func"](self._records, self.settings)
        logger.debug("%s (%s) -> %d row(s)", qid, QUESTIONS[qid]["name"], len(result))
        return result

    def run(self, questions: Optional[Iterable[str]] = None) -> Dict[str, pd.DataFrame]:
        """Answer each question (all by default); results keyed by question id, in catalog order."""
        ids = [resolve_question(q) for q in questions] if questions is not None else list(QUESTIONS)
        return {qid: self.ask(qid) for qid in ids}
