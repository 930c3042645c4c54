import io

from kool.table import TableWriter


def test_table_writer():
    buffer = io.StringIO()
    table = TableWriter(buffer)
    table.append_header("header")
    table.append_row("row")
    table.render()
    expected = "+--------+\n| HEADER |\n+--------+\n| row    |\n+--------+"
    assert buffer.getvalue().strip() == expected


def test_sort_by_table_writer():
    buffer = io.StringIO()
    table = TableWriter(buffer)
    table.append_header("header")
    table.append_row("zRow")
    table.append_row("aRow")
    table.sort_by(1)
    table.render()
    expected = "+--------+\n| HEADER |\n+--------+\n| aRow   |\n| zRow   |\n+--------+"
    assert buffer.getvalue().strip() == expected


def test_multiple_columns_padded():
    buffer = io.StringIO()
    table = TableWriter(buffer)
    table.append_header("a", "bb")
    table.append_row("xyz")
    text = table.render()
    assert text.splitlines()[3] == "| xyz |    |"


def test_empty_table_renders_nothing():
    buffer = io.StringIO()
    assert TableWriter(buffer).render() == ""
    assert buffer.getvalue() == ""