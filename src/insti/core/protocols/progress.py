"""Progress reporting protocol for the core engines.

Engines report human readable status lines ("Creating 'x.zip'",
"Compressing...", "Done.") without knowing who displays them. The CLI
passes a sink that prints; tests pass a list-collecting fake; everything
else gets the null object.

Usage in engines::

    from insti.core.protocols import NullProgressSink, ProgressSink

    def backup(manifest, ctx, *, progress: ProgressSink | None = None):
        progress = progress or NullProgressSink()
        progress.report("Compressing...")

"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProgressSink(Protocol):
    """Abstract receiver of engine status messages."""

    def report(self, message: str) -> None:
        """Report one status line.

        Args:
            message: Status text, already formatted

        """
        ...

    def failure(self, message: str) -> None:
        """Report a failed step without stopping the pass.

        Args:
            message: Description of what failed

        """
        ...


class NullProgressSink:
    """No-op sink used when the caller does not care about progress.

    All methods are safe to call and have no side effects.
    """

    def report(self, message: str) -> None:
        """Discard a status line."""

    def failure(self, message: str) -> None:
        """Discard a failure line."""

