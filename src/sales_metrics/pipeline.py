# pipeline.py
"""
Batch runner for the question catalog.

Loads the dataset (CSV path or settings.dataset_path), answers the requested
questions and optionally writes one CSV per question for plotting/BI tools:
    <out_dir>/<id>_<name>.csv
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Iterable, Optional

import pandas as pd

from sales_metrics.catalog import QUESTIONS
from sales_metrics.data_loader import load_data
from sales_metrics.engine import SalesMetricsEngine
from sales_metrics.utils.io_utils import load_settings

logger = logging.getLogger(__name__)


def export_results(results: Dict[str, pd.DataFrame], out_dir: str) -> Dict[str, str]:
    os.makedirs(out_dir, exist_ok=True)
    paths = {}
    for qid, frame in results.items():
        path = os.path.join(out_dir, f"{qid}_{QUESTIONS[qid]['name']}.csv")
        frame.to_csv(path, index=False)
        paths[qid] = path
    logger.info("Exported %d result file(s) to %s", len(paths), out_dir)
    return paths


def run_catalog(
    data_path: Optional[str] = None,
    questions: Optional[Iterable[str]] = None,
    settings_path: Optional[str] = None,
    out_dir: Optional[str] = None,
    records: Optional[pd.DataFrame] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Answer catalog questions over one dataset.
    `records` skips loading (e.g. a frame from load_from_database); otherwise `data_path`
    or settings.dataset_path is read with load_data().
    """
    settings = load_settings(settings_path)
    if records is None:
        records = load_data(data_path or settings.get("dataset_path"))

    engine = SalesMetricsEngine(records, settings)
    results = engine.run(questions)
    for qid, frame in results.items():
        logger.info("%-4s %-32s %d row(s)", qid, QUESTIONS[qid]["name"], len(frame))

    if out_dir:
        export_results(results, out_dir)
    return results
