"""Key-value secrets engine helpers."""

from .api import KVAPI, build_write_body, check_versions
from .service import KV

__all__ = ["KV", "KVAPI", "build_write_body", "check_versions"]
