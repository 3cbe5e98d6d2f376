class ConfigurationError(ValueError):
    """Raised when a run is configured in a way that cannot be computed"""


class DataError(Exception):
    """Raised if there is an issue with reference data, e.g. missing nuclides"""


class FractionSumWarning(UserWarning):
    """Warning that isotopic fractions no longer sum to one"""
