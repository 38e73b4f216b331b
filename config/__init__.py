"""Configuration for the statistics ETL."""
