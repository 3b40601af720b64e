"""
Progress tracking and summary utilities for sync operations.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import colorlog
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

ACTION_LABELS = {
    "generated": "📝 Generated",
    "fetched": "⬇️ Fetched",
    "created": "📝 Created",
    "updated": "🔄 Updated",
    "deleted": "🗑️ Deleted",
    "failed": "❌ Failed",
}


@dataclass
class OperationResult:
    """Represents the result of a single post operation."""
    title: str
    action: str  # 'generated', 'fetched', 'created', 'updated', 'deleted', 'failed'
    success: bool
    error_message: Optional[str] = None
    post_id: Optional[str] = None
    path: Optional[str] = None


@dataclass
class ProgressTracker:
    """Tracks progress and results of sync operations."""

    console: Console = field(default_factory=Console)
    results: List[OperationResult] = field(default_factory=list)

    def setup_colored_logging(self, level: str = "INFO") -> None:
        """Setup colorlog for colored console output."""
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s: %(message)s",
            datefmt=None,
            reset=True,
            log_colors={
                'DEBUG': 'cyan',
                'INFO': 'green',
                'WARNING': 'yellow',
                'ERROR': 'red',
                'CRITICAL': 'red,bg_white',
            },
            style='%'
        )

        logger = logging.getLogger()

        # Remove existing handlers to avoid duplicates
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        handler = colorlog.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    def add_result(self, result: OperationResult) -> None:
        """Add an operation result to tracking."""
        self.results.append(result)

    def create_progress_context(self):
        """Create a rich progress context manager."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
            transient=True
        )

    def get_action_summary(self) -> Dict[str, int]:
        """Count results by action; failures are counted under 'failed'."""
        summary: Dict[str, int] = {}
        for result in self.results:
            action = result.action if result.success else "failed"
            summary[action] = summary.get(action, 0) + 1
        return summary

    def print_summary(self) -> None:
        """Print a table of every recorded operation and the final status."""
        if not self.results:
            self.console.print("[yellow]No operations were performed.[/yellow]")
            return

        table = Table(title="📊 Operation Summary", show_header=True, header_style="bold magenta")
        table.add_column("Post", style="white", no_wrap=False, max_width=40)
        table.add_column("Action", style="cyan", no_wrap=True)
        table.add_column("Details", style="dim", no_wrap=False, max_width=60)

        for result in self.results:
            action = result.action if result.success else "failed"
            if result.success:
                details = result.path or result.post_id or "-"
            else:
                details = result.error_message or "Unknown error"
            table.add_row(result.title, ACTION_LABELS.get(action, action.title()), details)

        self.console.print(table)

        failed = [r for r in self.results if not r.success]
        if failed:
            status_color = "red"
            status_text = f"❌ Completed with {len(failed)} failures"
        else:
            status_color = "green"
            status_text = "✅ All operations completed successfully"

        self.console.print(
            Panel(
                f"[{status_color}]{status_text}[/{status_color}]",
                title="Final Status",
                border_style=status_color
            )
        )
