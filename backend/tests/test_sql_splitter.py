from muac.sql_splitter import split


def test_split_basic_statements():
    script = "CREATE TABLE a (id INT);\nCREATE TABLE b (id INT);\n"
    assert split(script) == ["CREATE TABLE a (id INT)", "CREATE TABLE b (id INT)"]


def test_split_keeps_semicolon_inside_literal():
    assert split("INSERT INTO t VALUES ('a;b');") == ["INSERT INTO t VALUES ('a;b')"]


def test_split_terminated_single_statement_is_stable():
    stmt = "UPDATE t SET name = 'x' WHERE id = 1"
    assert split(stmt + ";") == [stmt]
    assert split(stmt) == [stmt]


def test_split_ignores_semicolon_in_line_comment():
    script = "SELECT 1 -- note; more text\n, 2;\nSELECT 3;"
    assert split(script) == ["SELECT 1 -- note; more text\n, 2", "SELECT 3"]


def test_split_line_comment_ends_at_carriage_return():
    script = "-- header; still comment\rSELECT 1;"
    assert split(script) == ["-- header; still comment\rSELECT 1"]


def test_split_ignores_semicolon_in_block_comment():
    script = "/* first; second\n third; */ CREATE TABLE t (id INT);"
    assert split(script) == ["/* first; second\n third; */ CREATE TABLE t (id INT)"]


def test_split_quote_inside_comment_does_not_open_literal():
    script = "-- don't split here\nSELECT 1;\n/* it's fine */ SELECT 2;"
    assert split(script) == ["-- don't split here\nSELECT 1", "/* it's fine */ SELECT 2"]


def test_split_comment_markers_inside_literal_are_text():
    script = "INSERT INTO t VALUES ('-- not a comment; /* nor this */');SELECT 2;"
    assert split(script) == [
        "INSERT INTO t VALUES ('-- not a comment; /* nor this */')",
        "SELECT 2",
    ]


def test_split_doubled_quote_keeps_literal_intact():
    assert split("INSERT INTO t VALUES ('it''s; fine');") == ["INSERT INTO t VALUES ('it''s; fine')"]


def test_split_drops_blank_and_comment_only_chunks():
    script = "  ;\n;;\nSELECT 1;\n-- trailing comment only\n"
    assert split(script) == ["SELECT 1"]


def test_split_emits_unterminated_tail():
    assert split("SELECT 1;\n  SELECT 2  \n") == ["SELECT 1", "SELECT 2"]


def test_split_empty_script():
    assert split("") == []
    assert split("   \n\t") == []
