"""Rich terminal formatting for build results.

Produces structured, colored output for ``fledge build`` and
``fledge bundles``.  Respects TTY detection: no ANSI codes when piped
or redirected.

Example output (with color)::

    ── fledge build ────────────────────────────────────────────

      3 bundles · 7 routes · cleaned output

      ✓  build/server/public       4 routes
      ✗  build/server/admin        3 routes
         esbuild exited with status 1

      ✗  1 of 3 server builds failed

    ─────────────────────────────────────────────────────────────

"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fledge.build import BuildReport, BundleResult
    from fledge.routes.types import ServerBuildConfig

_W = 65


# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------


def _use_color(stream: object | None = None) -> bool:
    """True if the output stream supports ANSI color."""
    s = stream or sys.stderr
    isatty = getattr(s, "isatty", None)
    return bool(isatty and isatty())


class _Palette:
    """ANSI escape sequences, empty strings when color is disabled."""

    __slots__ = ("bold", "cyan", "dim", "green", "red", "reset")

    def __init__(self, *, enabled: bool) -> None:
        if enabled:
            self.reset = "\033[0m"
            self.bold = "\033[1m"
            self.dim = "\033[2m"
            self.red = "\033[31m"
            self.green = "\033[32m"
            self.cyan = "\033[36m"
        else:
            self.reset = ""
            self.bold = ""
            self.dim = ""
            self.red = ""
            self.green = ""
            self.cyan = ""


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def _display_path(path: Path, root: Path | None) -> str:
    if root is not None and path.is_relative_to(root):
        return os.path.relpath(path, root)
    return str(path)


def _header(title: str, c: _Palette) -> str:
    pad = _W - len(title) - 4  # 4 = "── " + " "
    return (
        f"  {c.dim}──{c.reset} {c.bold}{title}{c.reset} "
        f"{c.dim}{'─' * max(pad, 1)}{c.reset}"
    )


def _footer(c: _Palette) -> list[str]:
    rule = f"{c.dim}─{c.reset}" * _W
    return ["", f"  {rule}", ""]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def format_build_report(
    report: BuildReport,
    *,
    root: Path | None = None,
    color: bool | None = None,
) -> str:
    """Format a BuildReport for terminal display.

    Args:
        report: The report to format.
        root: Paths inside *root* are shown relative to it.
        color: Force color on/off.  ``None`` auto-detects from stderr.

    Returns:
        Multi-line string ready for ``sys.stderr.write()``.
    """
    use = color if color is not None else _use_color()
    c = _Palette(enabled=use)

    lines = [_header("fledge build", c), ""]

    route_ids = {route_id for bundle in report.bundles for route_id in bundle.route_ids}
    sep = f" {c.dim}·{c.reset} "
    stats = [
        f"{c.bold}{len(report.bundles)}{c.reset} {c.dim}bundles{c.reset}",
        f"{c.bold}{len(route_ids)}{c.reset} {c.dim}routes{c.reset}",
    ]
    if report.cleaned:
        stats.append(f"{c.dim}cleaned output{c.reset}")
    lines.append(f"  {sep.join(stats)}")
    lines.append("")

    if report.bundles:
        width = max(len(_display_path(b.server_build_directory, root)) for b in report.bundles)
        for bundle in report.bundles:
            lines.extend(_format_bundle_result(bundle, width, root, c))
        lines.append("")

    failed = len(report.failures)
    if not report.bundles:
        lines.append(f"  {c.green}{c.bold}✓{c.reset}  {c.green}Client build complete{c.reset}")
    elif not failed:
        lines.append(
            f"  {c.green}{c.bold}✓{c.reset}  "
            f"{c.green}{_plural(len(report.bundles), 'server build')} complete{c.reset}"
        )
    else:
        lines.append(
            f"  {c.red}{c.bold}✗{c.reset}  "
            f"{c.red}{failed} of {_plural(len(report.bundles), 'server build')} failed{c.reset}"
        )

    lines.extend(_footer(c))
    return "\n".join(lines)


def _format_bundle_result(
    bundle: BundleResult,
    width: int,
    root: Path | None,
    c: _Palette,
) -> list[str]:
    if bundle.ok:
        icon = f"{c.green}{c.bold}✓{c.reset}"
    else:
        icon = f"{c.red}{c.bold}✗{c.reset}"
    directory = _display_path(bundle.server_build_directory, root)
    lines = [
        f"  {icon}  {c.cyan}{directory:<{width}}{c.reset}  "
        f"{c.dim}{_plural(len(bundle.route_ids), 'route')}{c.reset}"
    ]
    if bundle.error is not None:
        lines.append(f"     {c.red}{bundle.error}{c.reset}")
    return lines


def format_bundles(
    server_builds: Sequence[ServerBuildConfig],
    *,
    root: Path | None = None,
    color: bool | None = None,
) -> str:
    """Format a bundle partition (``fledge bundles``) for terminal display."""
    use = color if color is not None else _use_color(sys.stdout)
    c = _Palette(enabled=use)

    lines = [_header("fledge bundles", c), ""]
    for server_build in server_builds:
        directory = _display_path(server_build.server_build_directory, root)
        lines.append(
            f"  {c.cyan}{directory}{c.reset}  "
            f"{c.dim}{_plural(len(server_build.routes), 'route')}{c.reset}"
        )
        for route_id in server_build.routes:
            lines.append(f"     {c.dim}·{c.reset} {route_id}")
        lines.append("")

    lines.append(f"  {_plural(len(server_builds), 'bundle')}")
    lines.extend(_footer(c))
    return "\n".join(lines)


def format_build_error(exc: BaseException, *, color: bool | None = None) -> str:
    """Format a fatal build error as a short banner."""
    use = color if color is not None else _use_color()
    c = _Palette(enabled=use)

    title = type(exc).__name__
    lines = [_header(title, c), ""]
    for line in str(exc).splitlines() or [title]:
        lines.append(f"  {c.red}{line}{c.reset}")
    cause = exc.__cause__
    if cause is not None and str(cause) not in str(exc):
        lines.append(f"     {c.dim}caused by{c.reset} {type(cause).__name__}: {cause}")
    lines.extend(_footer(c))
    return "\n".join(lines)
