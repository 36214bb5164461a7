from .table import TableSerializer, TableUpdateSerializer

__all__ = ["TableSerializer", "TableUpdateSerializer"]
