"""
Application Configuration

Fixed settings for the contact sheet importer. The import schema is not
configurable, so everything lives here as plain module constants.
"""
import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Logging
LOG_DIR = os.path.join(BASE_DIR, "logs")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Accepted upload containers
ALLOWED_EXTENSIONS = (".xlsx", ".xls")

# Schema columns, as they appear in the header row
NAME_COLUMN = "Name"
EMAIL_COLUMN = "Email"
PHONE_COLUMN = "Phone"
GENDER_COLUMN = "Gender"
EXPECTED_COLUMNS = [NAME_COLUMN, EMAIL_COLUMN, PHONE_COLUMN, GENDER_COLUMN]

# Sheet rows are numbered from 1, pandas row labels from 0
SHEET_ROW_BASE = 1

MIN_PHONE_LENGTH = 10

# Export settings
ERRORS_COLUMN = "Errors"
ERROR_SEPARATOR = "; "
VALID_SHEET_NAME = "Valid Rows"
FAILED_SHEET_NAME = "Failed Rows"
VALID_FILE_NAME = "valid_rows.xlsx"
FAILED_FILE_NAME = "failed_rows.xlsx"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
