"""Analysis core (ingest / analyze / export) and batch-run services."""
