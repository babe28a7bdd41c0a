# SPDX-License-Identifier: BSD-3-Clause
"""
Error types for the cook build orchestrator.
"""


class CookError(Exception):
    """Base class for every error cook reports to the operator."""


class InvalidTarget(CookError):
    """The target root is empty, missing or not the expected kind of tree."""


class MissingOperation(CookError):
    """No operation was requested."""


class UnrecognizedOperation(CookError):
    """The requested operation is unknown for the chosen target kind."""

    def __init__(self, name: str, kind: str = None):
        self.name = name
        self.kind = kind
        if kind:
            message = f"Unrecognized operation for {kind}: {name}"
        else:
            message = f"Unrecognized operation: {name}"
        super().__init__(message)


class ToolUnavailable(CookError):
    """An optional external tool is not on the search path.

    Collected by the capability prober as an advisory record; it is never
    raised out of probing.
    """

    def __init__(self, tool: str, hint: str = None):
        self.tool = tool
        self.hint = hint
        message = f"{tool} is not installed"
        if hint:
            message += f", try: {hint}"
        super().__init__(message)


class PhaseFailure(CookError):
    """An external step reported failure.

    Attributes:
        phase: Name of the phase or step that failed
        returncode: Exit status of the external process, passed through
    """

    def __init__(self, phase: str, returncode: int, detail: str = None):
        self.phase = phase
        self.returncode = returncode
        self.detail = detail
        message = f"{phase} failed with exit code {returncode}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
