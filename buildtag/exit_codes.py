"""
Standard exit codes for buildtag commands.

Following Unix/POSIX conventions for command-line tools.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NO_CANDIDATE = 64        # No tag matched the variant and no fallback applied
REPOSITORY_ERROR = 65    # Git history could not be read
CONFIG_ERROR = 66        # Invalid configuration or tag pattern
AMBIGUOUS_TAGS = 67      # Two tags share the highest build number
CHRONOLOGY_ERROR = 68    # Tag build numbers contradict commit order
DATA_ERROR = 70          # Persisted document format or validation error
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for exceptions that do not carry their own code
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': GENERAL_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Exceptions raised by the engine carry an ``exit_code`` attribute;
    everything else is looked up by class name.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    code = getattr(exc, 'exit_code', None)
    if isinstance(code, int):
        return code
    return EXCEPTION_EXIT_CODES.get(exc.__class__.__name__, GENERAL_ERROR)
