"""brandkit — brand brief in, design system out."""

__version__ = "0.1.0"
