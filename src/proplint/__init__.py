"""proplint: checks that exception propagation is annotated where it happens."""

__version__ = "0.3.0"
