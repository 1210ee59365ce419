# Record Source implementations
# Each one serves the core.source.RecordSource query contract

from .memory import InMemoryRecordSource
from .csv_export import CsvExportLoader, LoadedRecords
from .sample import sample_record_source

__all__ = [
    "InMemoryRecordSource",
    "CsvExportLoader",
    "LoadedRecords",
    "sample_record_source",
]
