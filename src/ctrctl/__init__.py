"""ctrctl — shipping container record tracker."""

__version__ = "0.1.0"
