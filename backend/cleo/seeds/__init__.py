from .bootstrap import BOOTSTRAP_USERS, run_all

__all__ = ["BOOTSTRAP_USERS", "run_all"]
