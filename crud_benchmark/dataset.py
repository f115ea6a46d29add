"""
Dataset loader for the CRUD benchmark.

Reads the near-earth-object CSV into an ordered tuple of immutable records.
There is no skip-bad-row policy: a missing or undecodable file, a row with the
wrong number of fields, or any row that fails coercion aborts the load with a
`DatasetError`.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import List, Tuple, Union

from pydantic import ValidationError

from crud_benchmark.domain.models import Record
from crud_benchmark.errors import DatasetError
from crud_benchmark.utils.logging import get_logger

log = get_logger(__name__)


def load_records(path: Union[str, Path]) -> Tuple[Record, ...]:
    """
    Load every data row of a comma-delimited file with a header row.

    Parameters
    ----------
    path : str | Path
        Location of the CSV file.

    Returns
    -------
    tuple[Record, ...]
        Records in file order.

    Raises
    ------
    DatasetError
        If the file cannot be opened, has no header, or a row is malformed.
    """
    csv_path = Path(path)
    records: List[Record] = []
    try:
        with csv_path.open("r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            if not reader.fieldnames:
                raise DatasetError(f"Dataset {csv_path} has no header row")
            for row in reader:
                if None in row:
                    raise DatasetError(
                        f"Dataset {csv_path} line {reader.line_num}: "
                        f"expected {len(reader.fieldnames)} fields, got more"
                    )
                try:
                    records.append(Record.model_validate(row))
                except ValidationError as exc:
                    raise DatasetError(
                        f"Dataset {csv_path} line {reader.line_num}: "
                        f"{exc.error_count()} invalid field(s): {exc}"
                    ) from exc
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise DatasetError(f"Cannot read dataset {csv_path}: {exc}") from exc

    log.info("Dataset loaded", extra={"path": str(csv_path), "records": len(records)})
    return tuple(records)


__all__ = ["load_records"]
