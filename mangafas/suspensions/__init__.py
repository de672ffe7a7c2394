"""Site bans and comment bans with lazy expiry."""
