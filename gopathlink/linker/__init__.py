from .reconciler import Reconciler
from .symlinks import SymlinkManager

__all__ = ["Reconciler", "SymlinkManager"]
