"""fxdesk - currency converter with an editable JSON rate table."""

__version__ = "0.1.0"
