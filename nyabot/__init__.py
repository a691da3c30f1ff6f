"""A cat-girl group chat bot library: command dispatch, role-play chat memory and emoji reactions."""

__version__ = "0.1.0"