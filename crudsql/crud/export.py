"""CSV rendering of listing rows."""

from typing import Any, Dict, List

import pandas as pd


def rows_to_csv(rows: List[Dict[str, Any]], header: Dict[str, str]) -> str:
    """CSV text with columns ordered and titled by ``header``; other columns dropped."""
    df = pd.DataFrame(rows) if rows else pd.DataFrame(columns=list(header.keys()))
    columns = [column for column in header if column in df.columns]
    df = df[columns].rename(columns=header)
    return df.to_csv(index=False)
