"""DB repositories: sync module functions that open their own session and return detached rows.

Import the modules directly (``from relief_hub.db.repositories import camp_repo``).
"""
