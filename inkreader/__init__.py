"""Screen logic for a small e-reader: books, a file browser and Wi-Fi setup."""

__version__ = "0.1.0"