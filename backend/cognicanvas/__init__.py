"""CogniCanvas note-taking backend."""

__version__ = "0.1.0"
