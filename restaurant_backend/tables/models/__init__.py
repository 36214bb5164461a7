from .table import Table, table_code_for

__all__ = ["Table", "table_code_for"]
