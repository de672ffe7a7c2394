"""A reader's own shelf: favorite titles and reading history."""
