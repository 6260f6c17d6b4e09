"""Configuration, database, logging and exceptions."""
