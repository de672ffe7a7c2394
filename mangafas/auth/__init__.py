"""Identity layer: roles, the permission matrix and user accounts."""
