import sys
from typing import Iterable, List, Optional

import pandas as pd

from .consumer import ChunkResult
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


def write_results(results: Iterable[ChunkResult], out_path: str = "-",
                  header: Optional[List[str]] = None) -> int:
    """
    Write result tables to a tab-separated file in the order they arrive.
    The header is written once; if no table arrives, `header` is written on
    its own. "-" writes to stdout. Returns the number of rows.
    """
    n_rows = 0
    header_written = False
    handle = sys.stdout if out_path == "-" else open(out_path, "w", newline="")
    try:
        for result in results:
            if not result.data and header_written:
                continue
            result.to_frame().to_csv(handle, sep="\t", index=False, header=not header_written)
            header_written = True
            n_rows += len(result)
        if not header_written and header is not None:
            pd.DataFrame(columns=header).to_csv(handle, sep="\t", index=False)
    finally:
        if handle is not sys.stdout:
            handle.close()
    if out_path != "-":
        logger.info(f"{n_rows:,} windows written to {out_path}")
    return n_rows
