"""
errors.py — Exception taxonomy
===============================
Three kinds of trouble can happen around a trace run:

  • InvalidInputError   – the user asked for something impossible
                          (unknown node, non-numeric target, bad size …).
                          Raised at the boundary, BEFORE a generator runs.
  • PreconditionError   – the input producer handed a generator a structure
                          that breaks the algorithm's contract (e.g. an
                          Eulerian circuit request on odd-degree vertices).
                          Fails loudly; it is a bug upstream.
  • TraceLimitError     – a generator produced more steps than MAX_TRACE_STEPS.
  • anything else       – genuine bugs, left to propagate.

"Target not found", "no path", "no full tour" … are NOT errors.  They are
ordinary terminal Steps.
"""


class AlgotraceError(Exception):
    """Base class for every error raised by algotrace."""


class InvalidInputError(AlgotraceError, ValueError):
    """User-supplied parameters cannot be used to build a trace."""


class PreconditionError(AlgotraceError, AssertionError):
    """A generator received a structure that violates its precondition."""


class TraceLimitError(AlgotraceError):
    """A trace grew past the configured step limit and was abandoned."""


__all__ = ["AlgotraceError", "InvalidInputError", "PreconditionError", "TraceLimitError"]
