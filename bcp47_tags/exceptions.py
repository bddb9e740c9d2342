class Bcp47Error(Exception):
    """
    Exception raised for errors in the bcp47_tags library.
    This is a generic exception that can be used to indicate various types of
    errors encountered while resolving subtags or loading the registry.
    """

    pass


class SubtagError(Bcp47Error, ValueError):
    """
    Exception raised when a subtag cannot be resolved against the registry.
    The ``code`` attribute tells apart a subtag that does not exist
    (``ERR_NONEXISTENT``) from a string that is registered as a whole
    grandfathered or redundant tag rather than a subtag (``ERR_TAG``).
    """

    ERR_NONEXISTENT = 1
    ERR_TAG = 2

    code: int
    """The reason the subtag could not be resolved."""

    def __init__(self, message: str, code: int) -> None:
        super().__init__(message)
        self.code = code


class NotAMacrolanguageError(Bcp47Error, ValueError):
    """
    Exception raised when the languages of a macrolanguage are requested
    for a subtag that is not registered with the macrolanguage scope.
    """

    pass


class RegistryError(Bcp47Error):
    """
    Exception raised for errors in the language subtag registry data.
    This is used to indicate issues such as a registry file that cannot be
    found, a file that is not in the registry format, or two records
    registered under the same subtag and type.
    """

    pass


class DownloadError(Bcp47Error):
    """
    Exception raised for errors that occur when downloading the registry.
    This exception is a subclass of ``Bcp47Error`` and is used to indicate
    issues such as the registry URL not being found.
    """

    pass
