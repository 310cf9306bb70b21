"""Terminal rendering of report events with rich (coloured) or as raw lines."""

from __future__ import annotations

import sys

from rich.console import Console
from rich.text import Text

from .report import DiagnosticLine, InstanceLine, ProfileHeader, RegionHeader, ReportEvent


def _console(file, color: bool) -> Console:
    return Console(
        file=file,
        no_color=not color,
        color_system="auto" if color else None,
        highlight=False,
        markup=False,
        emoji=False,
        soft_wrap=True,
    )


class ReportPrinter:
    """Writes report lines to stdout and diagnostics to stderr.

    Raw mode drops the profile and region headers and all colour, leaving one
    ``name - address`` line per instance.

    Instance lines bypass rich rendering and are written verbatim, so tag
    values keep their tabs and control characters.
    """

    def __init__(self, raw: bool = False, color: bool = True, stdout=None, stderr=None):
        self._raw = raw
        color = color and not raw
        self._out = _console(stdout or sys.stdout, color)
        self._err = _console(stderr or sys.stderr, color)

    def emit(self, event: ReportEvent) -> None:
        if isinstance(event, DiagnosticLine):
            self._err.print(Text.assemble("Error: ", (str(event), "red")))
        elif isinstance(event, InstanceLine):
            stream = self._out.file
            stream.write(f"{event}\n")
            stream.flush()
        elif self._raw:
            return
        elif isinstance(event, ProfileHeader):
            if not event.first:
                self._out.print()
            self._out.print(Text.assemble("[", (event.identity_name, "bold green"), "]"))
        elif isinstance(event, RegionHeader):
            horiz = "-" * (len(event.region) + 2)
            self._out.print(horiz)
            self._out.print(Text.assemble("|", (event.region, "yellow"), "|"))
            self._out.print(horiz)
