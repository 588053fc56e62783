class PipelineError(Exception):
    """Fatal failure in one of the analysis stages."""

    def __init__(self, message, stage=None):
        self.stage = stage
        prefix = f"[{stage}] " if stage else ""
        super().__init__(f"{prefix}{message}")


class MalformedInputError(PipelineError, ValueError):
    """The input table is missing a column or holds unparseable values."""

    def __init__(self, message, stage=None, column=None, row=None):
        self.column = column
        self.row = row
        details = []
        if column is not None:
            details.append(f"column={column!r}")
        if row is not None:
            details.append(f"row={row!r}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message, stage=stage)


class DegenerateStatisticsError(PipelineError, ValueError):
    """A statistic needed by a stage collapsed (zero variance, zero-width fence)."""

    def __init__(self, message, stage=None, column=None):
        self.column = column
        if column is not None:
            message = f"{message} (column={column!r})"
        super().__init__(message, stage=stage)
