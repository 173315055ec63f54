from app.services.delimited_parser import RawRow, detect_delimiter, parse_delimited, split_grid

TSV = "Item Number\tItem Name\tSelling Price\nA100\tWidget\t$5.00\nB200\tGadget\t$7.25\n"


def test_tab_delimited_rows_keyed_by_header():
    parsed = parse_delimited(TSV)
    assert parsed.headers == ["Item Number", "Item Name", "Selling Price"]
    assert parsed.rows[0].as_dict() == {"Item Number": "A100", "Item Name": "Widget", "Selling Price": "$5.00"}
    assert parsed.rows[1].get("Item Name") == "Gadget"
    assert parsed.first_line == "Item Number\tItem Name\tSelling Price"


def test_comma_used_when_header_has_no_tab():
    parsed = parse_delimited("Item Number,Item Name\nA1,Widget\n")
    assert parsed.rows[0].as_dict() == {"Item Number": "A1", "Item Name": "Widget"}


def test_tab_wins_over_comma_in_header():
    assert detect_delimiter("Item Number\tPrice, inc GST") == "\t"
    assert detect_delimiter("Item Number,Price") == ","


def test_stray_preamble_is_ignored():
    with_preamble = parse_delimited("\n{}\n\n" + TSV)
    without = parse_delimited(TSV)
    assert with_preamble.rows == without.rows
    assert with_preamble.headers == without.headers


def test_crlf_and_cr_newlines():
    assert parse_delimited(TSV.replace("\n", "\r\n")).rows == parse_delimited(TSV).rows
    assert parse_delimited(TSV.replace("\n", "\r")).rows == parse_delimited(TSV).rows


def test_blank_and_empty_cell_rows_are_skipped():
    text = "Item Number\tItem Name\n\nA1\tWidget\n\t \n   \nB2\tGadget\n"
    parsed = parse_delimited(text)
    assert [r.get("Item Number") for r in parsed.rows] == ["A1", "B2"]


def test_missing_cells_become_empty_and_cells_are_trimmed():
    parsed = parse_delimited("Item Number\tItem Name\tBuy\n  A1 \t Widget\n")
    assert parsed.rows[0].as_dict() == {"Item Number": "A1", "Item Name": "Widget", "Buy": ""}


def test_bom_stripped_from_header_and_lines():
    parsed = parse_delimited("\ufeffItem Number,Item Name\n\ufeffA1,Widget\n")
    assert parsed.headers == ["Item Number", "Item Name"]
    assert parsed.rows[0].get("Item Number") == "A1"


def test_header_only_or_empty_gives_no_rows():
    assert parse_delimited("Item Number\tItem Name\n").rows == []
    assert parse_delimited("").rows == []
    assert parse_delimited("{}\n").rows == []


def test_first_line_reported_even_without_rows():
    parsed = parse_delimited("\n\njust one line\n")
    assert parsed.rows == []
    assert parsed.first_line == "just one line"


def test_no_quoting_support():
    grid = split_grid('Item Number,Item Name\nA1,"Widget, large"\n')
    assert grid[1] == ["A1", '"Widget', ' large"']


def test_raw_row_keeps_duplicate_headers_in_order():
    row = RawRow((("Code", "first"), ("Code", "second")))
    assert row.headers() == ["Code", "Code"]
    assert row.get("Code") == "second"
    assert row.get("Missing") is None


def test_trailing_tab_on_header_still_selects_tab():
    parsed = parse_delimited("Item Number\t\nA1,000\t\n")
    assert parsed.headers == ["Item Number", ""]
    assert parsed.rows[0].get("Item Number") == "A1,000"
