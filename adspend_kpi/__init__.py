"""Ad spend ingestion and CAC/ROAS period comparison."""

__version__ = "0.1.0"
