"""Find and clean the target directories of Cargo projects."""

__version__ = "1.0.0"
