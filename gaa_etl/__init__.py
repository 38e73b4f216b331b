"""
GAA Match Statistics ETL

Validates match and player statistics workbooks and loads them into PostgreSQL.

Modules:
- extract: Workbook reading with pandas
- validators: Six-layer validation pipeline
- transform: Typed match records
- resolver: Find-or-create reference data
- load: Atomic match-unit loading
- run_etl: Pipeline orchestration
"""

__version__ = "1.0.0"
__author__ = "Data Engineering Team"
