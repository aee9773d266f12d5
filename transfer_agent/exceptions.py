"""
Exceptions raised by the transfer agent's collaborators.
The dialogue engine catches these at its boundary and degrades.
"""


class TransferAgentError(Exception):
    """Base class for transfer agent errors"""


class ReferenceDataError(TransferAgentError):
    """Hotel, vehicle or pricing tables could not be loaded"""


class QAServiceError(TransferAgentError):
    """Q&A backend failed, timed out or returned no answer"""
