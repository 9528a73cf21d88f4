"""Record builders shared by the unit tests."""


def make_record(index: list, columns: list, **extra) -> dict:
    """Build a record whose cell values are ``row * 10 + column``."""
    data = [[i * 10 + j for j in range(len(columns))] for i in range(len(index))]
    return {"index": index, "columns": columns, "data": data, **extra}
