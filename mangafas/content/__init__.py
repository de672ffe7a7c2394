"""Content submission, review and publication into the catalog."""
