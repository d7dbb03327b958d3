"""Logging formatters for trove diagnostics."""

import logging


class TroveFormatter(logging.Formatter):
    """Logging formatter that prepends the trove name from the extra parameter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with a trove prefix if present.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format

        Returns
        -------
        str
            Formatted log message with optional trove prefix
        """
        msg = super().format(record)
        trove = getattr(record, "trove", None)

        if trove:
            return f"[trove:{trove}] {msg}"

        return msg
