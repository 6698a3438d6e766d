"""
Standard exit codes for remotegit commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NOT_FOUND = 64           # Branch or HEAD could not be resolved
GIT_ERROR = 65           # git exited nonzero
CONFIG_ERROR = 66        # Configuration file error
DATA_ERROR = 70          # Invalid object type or data
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings, checked against the exception's class hierarchy
EXCEPTION_EXIT_CODES = {
    'NoBranchesError': NOT_FOUND,
    'BranchNotFoundError': NOT_FOUND,
    'HeadResolutionError': NOT_FOUND,
    'InvalidObjectTypeError': DATA_ERROR,
    'MalformedObjectError': DATA_ERROR,
    'GitExecutableNotFoundError': CONFIG_ERROR,
    'GitCommandError': GIT_ERROR,
    'ValueError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    for cls in type(exc).__mro__:
        if cls.__name__ in EXCEPTION_EXIT_CODES:
            return EXCEPTION_EXIT_CODES[cls.__name__]
    return GENERAL_ERROR


def exit_with_code(code: int, message: Optional[str] = None):
    """
    Exit with a specific code and optional message.

    Args:
        code: Exit code
        message: Optional message to print to stderr
    """
    import sys
    if message:
        print(message, file=sys.stderr)
    sys.exit(code)

