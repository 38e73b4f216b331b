"""PostgreSQL access for the statistics ETL."""
