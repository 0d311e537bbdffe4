"""I/O utilities: snapshots, legacy migrations and CSV import/export."""

from .export_csv import export_employees_csv, export_month_report_csv
from .import_csv import import_employees_csv
from .migrations import migrate_employee, migrate_shift, migrate_snapshot
from .snapshot import SqlSnapshotSink, load_store, new_store, save_store, store_from_payload

__all__ = [
    "export_employees_csv",
    "export_month_report_csv",
    "import_employees_csv",
    "migrate_employee",
    "migrate_shift",
    "migrate_snapshot",
    "SqlSnapshotSink",
    "load_store",
    "new_store",
    "save_store",
    "store_from_payload",
]
