class StarfieldConfigError(ValueError):
    """Raised for malformed canvases or out-of-range tuning values."""
    pass
