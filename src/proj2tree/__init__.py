"""proj2tree: render a directory tree and its file contents as one Markdown document."""

__version__ = "0.1.0"
