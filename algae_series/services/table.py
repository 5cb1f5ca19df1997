from __future__ import annotations

import pandas as pd

from ..models.dataset import Dataset
from .dates import canonical_date

"""Tabular hand-off for the presentation layer."""


def records_to_frame(dataset: Dataset) -> pd.DataFrame:
    """Return the dataset as a DataFrame with the date column made canonical.

    Date cells that cannot be coerced keep their original value so the table
    still shows what the workbook contains.
    """
    date_label = dataset.roles.date
    rows = []
    for record in dataset.records:
        row = []
        for col in dataset.columns:
            value = record[col]
            if col == date_label:
                value = canonical_date(value) or value
            row.append(value)
        rows.append(row)
    # object dtype keeps None and mixed cells as-is (no string/float inference)
    return pd.DataFrame(rows, columns=list(dataset.columns), dtype=object)
