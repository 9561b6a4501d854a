"""texflat — flatten a nested LaTeX project into a single directory."""

__version__ = "0.1.0"
