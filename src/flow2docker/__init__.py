"""flow2docker: package ADAMS workflows as Docker build contexts."""

__version__ = "0.1.0"
