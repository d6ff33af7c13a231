"""Wiki dump preprocessor: titles, links and site metadata from an XML dump."""

__version__ = "0.1.0"
