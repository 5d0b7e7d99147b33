# File: contextcounter/core/errors.py
# Version: v0.1.0
"""
Exception hierarchy for context counting.

Every failure is fatal to a run: callers either get a complete CountReport
or one of these exceptions, never a partial report.
"""

from __future__ import annotations

from typing import Optional


class ContextCounterError(RuntimeError):
    pass


class InputError(ContextCounterError):
    """A FASTA source is missing or cannot be read."""


class OutputError(ContextCounterError):
    """Count files cannot be written."""


class ConfigError(ContextCounterError):
    """Invalid counting parameters (unsupported width, conflicting contig sets, ...)."""


class ParseError(ContextCounterError):
    """
    Content is not valid FASTA, or a base lies outside the recognised alphabet.

    Location fields are optional; whatever is known is folded into the message.
    """

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        contig: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.reason = message
        self.source = source
        self.contig = contig
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        where = []
        if self.source is not None:
            where.append(str(self.source))
        if self.line is not None:
            where.append(f"line {self.line}")
        if self.column is not None:
            where.append(f"col {self.column}")
        if self.contig is not None:
            where.append(f"contig '{self.contig}'")
        if not where:
            return self.reason
        return f"{self.reason} ({', '.join(where)})"
