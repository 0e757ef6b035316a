class NotifierError(Exception):
    """Base class for errors that abort a run."""


class ConfigError(NotifierError):
    pass


class ProviderError(NotifierError):
    """football-data.org returned an error or a body we could not decode."""


class StorageError(NotifierError):
    pass
