"""Host adapters satisfying the protocols in :mod:`depsnap.host`."""

from depsnap.hosts.snapshot import SnapshotBuild, load_snapshot, snapshot_from_dict

__all__ = ["SnapshotBuild", "load_snapshot", "snapshot_from_dict"]
