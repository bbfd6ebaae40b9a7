from sync.adapter import SyncAdapter, build_sync
from sync.sheets import RemoteSnapshot, SheetsClient, SyncError

__all__ = ["RemoteSnapshot", "SheetsClient", "SyncAdapter", "SyncError", "build_sync"]
