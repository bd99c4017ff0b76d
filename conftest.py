"""
Pytest configuration file.

Puts the repository root on the Python path so the flat modules
(main, config, row_validation, spreadsheet_import, utils) import the same
way under pytest as they do when the app is started directly.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))
