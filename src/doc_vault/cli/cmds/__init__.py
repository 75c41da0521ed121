from .docs_cmds import register as register_docs
from .orphans_cmds import register as register_orphans

__all__ = ["register_docs", "register_orphans"]
