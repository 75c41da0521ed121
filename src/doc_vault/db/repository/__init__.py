from .base import Repository
from .mixins import CRUDMixin, apply_filters

__all__ = ["Repository", "CRUDMixin", "apply_filters"]
