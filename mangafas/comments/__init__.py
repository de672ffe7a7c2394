"""Comments, reply threads, votes, moderation and the report queue."""
