"""Exit codes shared by CLI commands."""

SUCCESS = 0
NOT_FOUND = 1
STORE_ERROR = 2
