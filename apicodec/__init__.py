"""JSON and URL-query encoding, union resolution and porting for dataclass API models."""

__version__ = "0.1.0"