from .document import BaseDocument, TDocument, stored_field_name
from .identifiers import PyObjectId

__all__ = ["BaseDocument", "PyObjectId", "TDocument", "stored_field_name"]
