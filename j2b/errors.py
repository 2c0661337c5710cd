"""Exception hierarchy shared by the naming core and its callers."""


class J2bError(RuntimeError):
    """Base class for every error raised by j2b itself."""


class ConfigurationError(J2bError):
    """A credential or endpoint is missing before any request is made."""


class ProviderError(J2bError):
    """The model backend failed: network, auth, or an unusable response."""


class ValidationError(J2bError):
    """Caller input is unusable (blank summary, no commit messages)."""
