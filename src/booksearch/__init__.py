"""Build elasticlunr-compatible search indexes for books."""

__version__ = "0.1.0"
