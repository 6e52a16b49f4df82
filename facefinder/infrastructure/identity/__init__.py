from .json_file import JsonFileIdentityBackend
from .memory import InMemoryIdentityBackend

__all__ = ["InMemoryIdentityBackend", "JsonFileIdentityBackend"]
