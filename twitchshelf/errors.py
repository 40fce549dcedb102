class TwitchShelfError(Exception):
    """Base class for every error the CLI turns into a message and exit code."""


class RegistryError(TwitchShelfError):
    pass


class SourceUnavailableError(RegistryError):
    """A registry database is missing or cannot be opened."""


class SchemaMismatchError(RegistryError):
    """A registry table lacks the columns we decode by name."""


class ManifestError(TwitchShelfError):
    """fuel.json is missing or malformed. Local to one title."""


class CacheError(TwitchShelfError):
    pass


class LaunchError(TwitchShelfError):
    pass
