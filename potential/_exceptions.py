class InvalidArgumentError(ValueError):
    """
    Raised when a procedure is called with a malformed configuration:
    ``m`` outside ``(0, N)``, mismatched outcome/treatment lengths, a
    non-positive trial count, and so on.

    Always raised before any random draw, so a partial result is never
    observed and a shared generator is left untouched.
    """
    pass


class InvalidDomainError(ValueError):
    """
    Raised when the standard-error formula is evaluated outside its domain,
    e.g. a covariance whose implied correlation lies outside [-1, 1].
    """
    pass
