"""Signal fusion engine — patterns, adversarial validation, edge, council, ledger."""

__version__ = "1.0.0"
