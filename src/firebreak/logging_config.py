import logging

from rich.logging import RichHandler


def configure(level: str = "INFO") -> None:
    """Route firebreak log records through a rich console handler."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_time=False, show_path=False)],
        force=True,
    )
