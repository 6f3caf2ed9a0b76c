"""Exit codes shared by CLI commands."""

SUCCESS_EXIT_CODE = 0
VALIDATION_EXIT_CODE = 2
NO_DATA_EXIT_CODE = 3
SYSTEM_EXIT_CODE = 4

__all__ = ["NO_DATA_EXIT_CODE", "SUCCESS_EXIT_CODE", "SYSTEM_EXIT_CODE", "VALIDATION_EXIT_CODE"]
