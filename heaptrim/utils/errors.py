# heaptrim/utils/errors.py
class TrimError(RuntimeError):
    """
    Base class of every error the trim run can abort with.
    The CLI maps ``exit_code`` to the process status.
    """

    exit_code: int = 1
    kind: str = "TrimError"


class ConfigError(TrimError):
    """
    Raised for invalid user-provided config (threshold, buffer size, catalog).
    Should NOT print traceback.
    """

    exit_code = 2
    kind = "ConfigError"


class InputError(TrimError):
    """Underlying read failure on the byte source."""

    exit_code = 3
    kind = "InputError"


class OutputError(TrimError):
    """Underlying write failure on the byte sink."""

    exit_code = 4
    kind = "OutputError"


class FormatError(TrimError):
    """
    Malformed stream:
    - empty record (no tag)
    - record truncated before its line terminator at EOF
    - clock value that cannot be parsed or goes backwards
    """

    exit_code = 5
    kind = "FormatError"
