class ManifestParseError(ValueError):
    """Raised when manifest text cannot be turned into a usable model."""
