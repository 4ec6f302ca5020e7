"""Learning Feed: a personal feed of learning links with completion tracking."""

__version__ = "0.1.0"
