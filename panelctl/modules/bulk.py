"""
Sequential bulk runner for per-server daemon actions.

Servers are processed one at a time in the order given. A failing server is
reported and skipped; it never stops the rest of the batch.
"""
import logging
from typing import Any, Callable, Optional, Protocol, Sequence, Tuple

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from .daemon import ActionResult
from .models import ActionFailed, BatchReport, Target
from .selector import TargetRepository, select_targets

logger = logging.getLogger(__name__)

FAILURE_TEMPLATE = 'Failed to reinstall server "{name}" (id: {id}) on node "{node}": {message}'
CONFIRM_PROMPT = "Are you sure you want to reinstall the requested servers?"


class ActionClient(Protocol):
    def reinstall(self, target: Target) -> ActionResult:
        ...


class Reporter(Protocol):
    def start(self, total: int) -> None:
        ...

    def failure(self, target: Target, message: str) -> None:
        ...

    def advance(self, current: int, total: int) -> None:
        ...

    def finish(self, report: BatchReport) -> None:
        ...


class Confirmation(Protocol):
    def confirm(self, prompt: str) -> bool:
        ...


def format_failure(target: Target, failure: ActionFailed) -> str:
    return FAILURE_TEMPLATE.format(
        name=target.name,
        id=target.id,
        node=target.node.name,
        message=failure.detail,
    )


class NullReporter:
    """Reporter that discards everything."""

    def start(self, total: int) -> None:
        pass

    def failure(self, target: Target, message: str) -> None:
        pass

    def advance(self, current: int, total: int) -> None:
        pass

    def finish(self, report: BatchReport) -> None:
        pass


class ConsoleReporter:
    """Progress bar with failures printed above it as they happen."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._progress: Optional[Progress] = None
        self._task = None

    def start(self, total: int) -> None:
        self._progress = Progress(
            TextColumn("[bold blue]Reinstalling"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=False,
        )
        self._progress.start()
        self._task = self._progress.add_task("reinstall", total=total)

    def failure(self, target: Target, message: str) -> None:
        self.console.print(f"❌ [red]{escape(message)}[/red]", highlight=False, soft_wrap=True)

    def advance(self, current: int, total: int) -> None:
        if self._progress is not None:
            self._progress.update(self._task, completed=current)

    def finish(self, report: BatchReport) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
        self.console.print("")
        if report.failed:
            self.console.print(
                f"⚠️  Reinstalled {report.succeeded}/{report.attempted} servers, "
                f"{report.failed} failed"
            )
        else:
            self.console.print(f"✅ [green]Reinstalled {report.succeeded}/{report.attempted} servers[/green]")


class PromptConfirmation:
    """Ask the operator before doing anything."""

    def __init__(self, prompt_fn: Optional[Callable[..., bool]] = None):
        self.prompt_fn = prompt_fn or typer.confirm

    def confirm(self, prompt: str) -> bool:
        return bool(self.prompt_fn(prompt, default=False))


class AssumeYes:
    """Confirmation that was already given (``--yes`` or an API request)."""

    def confirm(self, prompt: str) -> bool:
        logger.debug(f"Confirmation assumed: {prompt}")
        return True


class BulkRunner:
    """Run a daemon action over a fixed list of servers."""

    def __init__(self, client: ActionClient, reporter: Optional[Reporter] = None):
        self.client = client
        self.reporter = reporter or NullReporter()

    def run(self, targets: Sequence[Target]) -> BatchReport:
        """Reinstall every target in order and return the batch report."""
        targets = tuple(targets)
        total = len(targets)
        report = BatchReport()

        logger.info(f"Reinstalling {total} server(s)")
        self.reporter.start(total)

        for index, target in enumerate(targets, start=1):
            result = self.client.reinstall(target)
            report.attempted += 1

            if isinstance(result, ActionFailed):
                message = format_failure(target, result)
                logger.debug(message)
                report.failures.append((target, message))
                self.reporter.failure(target, message)
            else:
                report.succeeded += 1
                logger.debug(f"Server {target.id} ({target.name}) reinstall requested")

            self.reporter.advance(index, total)

        self.reporter.finish(report)
        logger.info(
            f"Reinstall finished: {report.succeeded} succeeded, {report.failed} failed"
        )
        return report


class ReinstallCommand:
    """Selector, confirmation gate and bulk runner wired together."""

    def __init__(
        self,
        repository: TargetRepository,
        client: ActionClient,
        confirmation: Confirmation,
        reporter: Optional[Reporter] = None,
    ):
        self.repository = repository
        self.runner = BulkRunner(client, reporter)
        self.confirmation = confirmation

    def targets(self, server_id: Any = None, node_id: Any = None) -> Tuple[Target, ...]:
        return select_targets(self.repository, server_id=server_id, node_id=node_id)

    def execute(self, server_id: Any = None, node_id: Any = None) -> Optional[BatchReport]:
        """Select, confirm and run. Returns None when the operator declines.

        Raises:
            InvalidArgument: Before any prompt or daemon call if an id is invalid
        """
        targets = self.targets(server_id, node_id)

        if not self.confirmation.confirm(CONFIRM_PROMPT):
            logger.info("Reinstall cancelled by operator")
            return None

        return self.runner.run(targets)
