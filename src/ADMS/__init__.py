"""Academic department management service: schema, seeders and HTTP API."""

__version__ = "0.1.0"
