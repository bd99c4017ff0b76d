from fastapi import FastAPI, File, UploadFile
import os
import logging
from datetime import datetime
from typing import Callable
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.concurrency import run_in_threadpool

from config import (
    LOG_DIR,
    LOG_FORMAT,
    VALID_FILE_NAME,
    FAILED_FILE_NAME,
    XLSX_MEDIA_TYPE,
)
from spreadsheet_import import (
    ImportProcessor,
    ImportResult,
    export_valid_rows,
    export_failed_rows,
)
from utils.result import Result


# Create logs directory if it doesn't exist
os.makedirs(LOG_DIR, exist_ok=True)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT
)
logger = logging.getLogger(__name__)

# Add file handler to write logs to file
log_file_path = os.path.join(LOG_DIR, f"app_{datetime.now().strftime('%Y%m%d')}.log")
file_handler = logging.FileHandler(log_file_path)
file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
logging.getLogger().addHandler(file_handler)


# Initialize FastAPI app with metadata
app = FastAPI(
    title="Contact Sheet Importer API",
    description="API for validating contact spreadsheets and downloading valid and failed rows",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Result of the latest successful upload; replaced on every upload
app.state.current_import = None


def get_current_import() -> Result[ImportResult]:
    """
    Fetch the result of the latest successful upload.

    Returns:
        Result[ImportResult]: the current import, or 404 if nothing was uploaded yet
    """
    current = app.state.current_import
    if current is None:
        logger.warning("No spreadsheet has been uploaded yet")
        return Result.not_found("No spreadsheet has been uploaded yet")
    return Result.ok(current)


def error_response(result: Result) -> JSONResponse:
    return JSONResponse(status_code=result.status_code.value, content=result.to_dict())


def build_download(
    exporter: Callable[[ImportResult], bytes],
    file_name: str,
    row_count: int,
    current: ImportResult,
):
    """
    Render the current import with the given exporter as an .xlsx attachment.

    Args:
        exporter: Function turning the import into workbook bytes
        file_name: File name offered to the client
        row_count: Number of rows the workbook would hold
        current: The import to export

    Returns:
        Response with the workbook, or a JSONResponse error
    """
    if row_count == 0:
        logger.warning(f"Nothing to export for {file_name}")
        return error_response(Result.not_found(f"No rows to export for {file_name}"))

    try:
        content = exporter(current)
    except Exception as e:
        logger.exception(f"Error building {file_name}: {str(e)}")
        return error_response(Result.server_error(f"Error building {file_name}: {str(e)}"))

    logger.info(f"Serving {file_name} with {row_count} rows")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'}
    )


# API Endpoints
@app.post(
    "/upload/",
    tags=["Spreadsheet Import"],
    response_model=ImportResult
)
async def upload_spreadsheet(file: UploadFile = File(...)):
    """
    Upload a spreadsheet and validate every row of its first sheet.

    Each row is checked for a non-blank Name, a well-formed Email, a numeric
    Phone of at least 10 characters and a Gender of M or F. A successful
    upload replaces the previous one.

    Returns:
        ImportResult: columns, summary counts, and the valid and invalid rows
    """
    content = await file.read()
    logger.info(f"Received upload {file.filename} ({len(content)} bytes)")

    # Parsing and validation are blocking pandas work
    result = await run_in_threadpool(ImportProcessor.process_upload, file.filename, content)

    if not result.is_success():
        return error_response(result)

    app.state.current_import = result.data
    return result.data


@app.get(
    "/results/",
    tags=["Spreadsheet Import"],
    response_model=ImportResult
)
async def get_results():
    """
    Return the validation results of the latest upload.
    """
    current = get_current_import()
    if not current.is_success():
        return error_response(current)
    return current.data


@app.get(
    "/download/valid/",
    tags=["Downloads"]
)
def download_valid_rows():
    """
    Download the rows that passed validation as valid_rows.xlsx.

    The workbook holds the original columns only.
    """
    current = get_current_import()
    if not current.is_success():
        return error_response(current)

    return build_download(
        export_valid_rows, VALID_FILE_NAME, current.data.summary.valid_count, current.data
    )


@app.get(
    "/download/failed/",
    tags=["Downloads"]
)
def download_failed_rows():
    """
    Download the rows that failed validation as failed_rows.xlsx.

    The workbook holds the original columns plus an Errors column with the
    row's messages joined by "; ".
    """
    current = get_current_import()
    if not current.is_success():
        return error_response(current)

    return build_download(
        export_failed_rows, FAILED_FILE_NAME, current.data.summary.invalid_count, current.data
    )


# Run the application if executed directly
if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Contact Sheet Importer API in development mode.")
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
