"""limeade: copy and paste to a remote machine's clipboard over HTTP."""

__version__ = "1.0.0"
