"""tracevault: version control and baselines for engineering artifacts."""

__version__ = "0.1.0"
