"""
Contact Sheet Importer

Upload a contact spreadsheet, validate each row's Name, Email, Phone and
Gender, and download the valid and failed rows as separate workbooks.

Key modules:
- main.py: FastAPI application with upload, results and download endpoints
- row_validation.py: Field rules, row verdicts and partitioning
- spreadsheet_import.py: Reading, exporting and the import pipeline
- config.py: Fixed schema, export and logging settings
- utils/result.py: Result pattern implementation for error handling
"""
