from .opportunity_service import OpportunityService
from .document_service import DocumentService
from .spreadsheet_importer import SpreadsheetImporter, ImportResult

__all__ = [
    "OpportunityService",
    "DocumentService",
    "SpreadsheetImporter",
    "ImportResult",
]
