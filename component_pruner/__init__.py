"""Component Pruner - garbage collection for declaratively reconciled cluster resources."""

__version__ = "0.4.0"
