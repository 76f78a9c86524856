"""Exceptions raised on malformed inputs to significance extraction and scoring."""


class EstimationContractError(ValueError):
    """
    Raised when an upstream estimation result is corrupted or mismatched.

    Always names the offending field so that a bad result is never confused
    with a result that simply found no significant region.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid estimation result field '{field}': {message}")
