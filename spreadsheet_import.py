import io
import os
import math
import time
import uuid
import logging
import numpy as np
import pandas as pd
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel

from config import (
    ALLOWED_EXTENSIONS,
    EXPECTED_COLUMNS,
    SHEET_ROW_BASE,
    ERRORS_COLUMN,
    ERROR_SEPARATOR,
    VALID_SHEET_NAME,
    FAILED_SHEET_NAME,
)
from row_validation import SheetRow, Summary, ValidationVerdict, partition_rows
from utils.result import Result

logger = logging.getLogger(__name__)


class LogContext:
    """Context manager that logs the start, duration and failure of an import stage"""
    def __init__(self, operation_name: str, **kwargs):
        self.operation_name = operation_name
        self.start_time = None
        self.request_id = kwargs.pop('request_id', str(uuid.uuid4())[:8])
        self.extra = kwargs

    def __enter__(self):
        self.start_time = time.time()
        logger.info(f"Starting {self.operation_name}", extra={"request_id": self.request_id, **self.extra})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        if exc_type:
            logger.error(
                f"Failed {self.operation_name} in {duration:.2f}s: {str(exc_val)}",
                extra={"request_id": self.request_id, "duration": duration, **self.extra},
                exc_info=(exc_type, exc_val, exc_tb)
            )
        else:
            logger.info(
                f"Completed {self.operation_name} in {duration:.2f}s",
                extra={"request_id": self.request_id, "duration": duration, **self.extra}
            )


class ImportResult(BaseModel):
    """
    Everything derived from one uploaded spreadsheet.

    Attributes:
        file_name: Name of the uploaded file
        columns: Header row of the first sheet, in sheet order
        summary: Row counts
        valid_rows: Verdicts of rows that passed, in sheet order
        invalid_rows: Verdicts of rows that failed, in sheet order
    """
    file_name: str
    columns: List[str]
    summary: Summary
    valid_rows: List[ValidationVerdict]
    invalid_rows: List[ValidationVerdict]


def _normalize_cell(value: Any) -> Any:
    """Turn a pandas cell into a plain Python value; blanks become None."""
    if value is None:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return int(value)
        return value
    if pd.isna(value):
        return None
    return value


def read_rows(content: bytes) -> Tuple[List[str], List[SheetRow]]:
    """
    Parse the first sheet of a spreadsheet into rows keyed by the header row.

    The header is the first row holding any non-blank cell, so blank rows
    above it are ignored. Rows whose cells are all blank are skipped, but
    they still count towards the sheet position of the rows after them.

    Args:
        content: Raw bytes of an .xlsx or .xls file

    Returns:
        Tuple of (header columns, rows in sheet order)

    Raises:
        Whatever the spreadsheet engine raises for unreadable content.
    """
    # Only truly empty cells are blanks; strings like "NA" or "None" stay text
    df = pd.read_excel(
        io.BytesIO(content),
        sheet_name=0,
        header=None,
        dtype=object,
        keep_default_na=False,
        na_values=[""],
    )
    df = df.dropna(how="all")
    if df.empty:
        return [], []

    header_label = df.index[0]
    columns = _header_names(df.loc[header_label].tolist())
    body = df.drop(index=header_label)

    rows = []
    for label, record in body.iterrows():
        values = {col: _normalize_cell(cell) for col, cell in zip(columns, record.tolist())}
        rows.append(SheetRow(row_index=int(label) + SHEET_ROW_BASE, values=values))

    return columns, rows


def _header_names(cells: List[Any]) -> List[str]:
    """
    Name the columns from the header cells.

    Blank header cells become "Unnamed: <position>" and repeated names get a
    ".<n>" suffix, the way pandas names them.
    """
    columns = []
    seen: Dict[str, int] = {}
    for position, cell in enumerate(cells):
        value = _normalize_cell(cell)
        name = f"Unnamed: {position}" if value is None else str(value)
        count = seen.get(name, 0)
        seen[name] = count + 1
        columns.append(name if count == 0 else f"{name}.{count}")
    return columns


def build_workbook(records: List[Dict[str, Any]], columns: List[str], sheet_name: str) -> bytes:
    """
    Write records into a single-sheet .xlsx workbook.

    Args:
        records: Rows to write, as column name to value mappings
        columns: Column order of the sheet; keys outside it are dropped
        sheet_name: Title of the sheet

    Returns:
        The workbook as bytes
    """
    df = pd.DataFrame(records, columns=columns, dtype=object)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()


def export_valid_rows(result: ImportResult) -> bytes:
    records = [verdict.row for verdict in result.valid_rows]
    return build_workbook(records, result.columns, VALID_SHEET_NAME)


def export_failed_rows(result: ImportResult) -> bytes:
    """Export invalid rows with their messages joined into a trailing Errors column."""
    columns = [col for col in result.columns if col != ERRORS_COLUMN] + [ERRORS_COLUMN]
    records = [
        {**verdict.row, ERRORS_COLUMN: ERROR_SEPARATOR.join(verdict.errors)}
        for verdict in result.invalid_rows
    ]
    return build_workbook(records, columns, FAILED_SHEET_NAME)


class ImportProcessor:
    """
    Runs an uploaded spreadsheet through the import pipeline.

    This class contains methods to:
    - Check the upload's file type and that it is not empty
    - Read the first sheet into rows
    - Validate and partition the rows
    """

    @staticmethod
    def process_upload(file_name: Optional[str], content: bytes) -> Result[ImportResult]:
        """
        Validate every row of an uploaded spreadsheet.

        Args:
            file_name: Name the client gave the upload
            content: Raw bytes of the upload

        Returns:
            Result[ImportResult]: the partitioned rows, or the reason the file was rejected
        """
        log_context = {
            "request_id": str(uuid.uuid4())[:8],
            "file_name": file_name,
            "size_bytes": len(content),
        }

        logger.info("Processing uploaded spreadsheet", extra=log_context)

        try:
            upload_result = ImportProcessor._validate_upload(file_name, content)
            if not upload_result.is_success():
                logger.warning(f"Upload rejected: {upload_result.error}", extra=log_context)
                return upload_result

            with LogContext("spreadsheet parsing", **log_context):
                read_result = ImportProcessor._read_sheet(content)

            if not read_result.is_success():
                logger.warning(f"Spreadsheet parsing failed: {read_result.error}", extra=log_context)
                return read_result

            columns, rows = read_result.data
            log_context["row_count"] = len(rows)
            ImportProcessor._check_columns(columns)

            with LogContext("row validation", **log_context):
                valid, invalid, summary = partition_rows(rows)

            logger.info(
                f"Validated {summary.total} rows: {summary.valid_count} valid, {summary.invalid_count} invalid",
                extra=log_context
            )

            return Result.ok(ImportResult(
                file_name=file_name,
                columns=columns,
                summary=summary,
                valid_rows=valid,
                invalid_rows=invalid,
            ))

        except Exception as e:
            logger.exception("Unexpected error during import", extra={**log_context, "error": str(e)})
            return Result.server_error(f"Processing error: {str(e)}")

    @staticmethod
    def _validate_upload(file_name: Optional[str], content: bytes) -> Result[bool]:
        if not file_name:
            return Result.invalid_input("No file provided")

        extension = os.path.splitext(file_name)[1].lower()
        if extension not in ALLOWED_EXTENSIONS:
            return Result.unsupported_file(
                f"Unsupported file type '{extension or file_name}'. Allowed: {', '.join(ALLOWED_EXTENSIONS)}"
            )

        if not content:
            return Result.invalid_input("Uploaded file is empty")

        return Result.ok(True)

    @staticmethod
    def _read_sheet(content: bytes) -> Result[Tuple[List[str], List[SheetRow]]]:
        """
        Read the first sheet, turning codec errors into a failed Result.

        Args:
            content: Raw bytes of the upload

        Returns:
            Result containing (columns, rows) or the reason the file could not be read
        """
        try:
            start_time = time.time()
            columns, rows = read_rows(content)
            logger.info(
                "Successfully read spreadsheet",
                extra={
                    "row_count": len(rows),
                    "column_count": len(columns),
                    "read_time_seconds": f"{time.time() - start_time:.2f}"
                }
            )
            return Result.ok((columns, rows))
        except Exception as e:
            logger.error(
                "Failed to read spreadsheet",
                extra={"error": str(e), "error_type": type(e).__name__}
            )
            return Result.invalid_input(f"Failed to read spreadsheet: {str(e)}")

    @staticmethod
    def _check_columns(columns: List[str]) -> None:
        missing_cols = [col for col in EXPECTED_COLUMNS if col not in columns]
        if missing_cols:
            logger.warning(
                f"Spreadsheet is missing columns: {', '.join(missing_cols)}",
                extra={"available_columns": columns, "missing_columns": missing_cols}
            )
