"""covhtml - HTML reports for llvm-cov JSON coverage exports."""

__version__ = "0.1.0"
