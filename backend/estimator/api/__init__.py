from . import clients, config, estimates, invoices

__all__ = [
    "clients",
    "config",
    "estimates",
    "invoices",
]
