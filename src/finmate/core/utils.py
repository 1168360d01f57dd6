# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import io

import pandas as pd
from fastapi.responses import StreamingResponse


def canon(s: str) -> str:
    """Canonicalise keys for comparisons (trim + upper)."""
    return (s or "").strip().upper()


def df_to_csv_stream(df: pd.DataFrame, filename: str = "export.csv") -> StreamingResponse:
    """Stream a dataframe as CSV without writing to disk."""
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    buf.seek(0)
    return StreamingResponse(
        iter([buf.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
