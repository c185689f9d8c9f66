"""FarmLedger: employee registrations and daily egg inventory records."""

__version__ = "1.0.0"
