"""Per-user notification inboxes.

Every state transition that concerns a user ends up here:

- Rank changes and account events
- Site bans and comment bans, issued or lifted
- Submission review outcomes
- Comment moderation and new reports
"""
