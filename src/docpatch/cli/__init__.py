from .app import main
from .rich_display import (
    configure_logging,
    console,
    print_document_panel,
    print_error_panel,
    print_result_panel,
    print_start_panel,
)

__all__ = [
    "main",
    "configure_logging",
    "console",
    "print_document_panel",
    "print_error_panel",
    "print_result_panel",
    "print_start_panel",
]
