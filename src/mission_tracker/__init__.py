"""Progress and eligibility tracking for branching mission catalogs."""

__version__ = "0.1.0"
