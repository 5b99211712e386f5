"""Maven native-image helper goals as a command-line tool."""

__version__ = "0.1.0"
