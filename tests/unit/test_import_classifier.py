"""
Unit tests for import extraction and classification.
"""
from widgetsmith.core.import_classifier import (
    aggregate_imports,
    analyze_imports,
    categorize_imports,
    classify_import,
    extract_imports,
)
from widgetsmith.support.models import ImportRecord

SOURCE = '''
import React from "react";
import * as Icons from "@fortawesome/free-solid-svg-icons";
import { Link, OtTable as Table } from "ui";
import { Box } from "@mui/material";
import Summary from "./Summary";
import { helper } from "../utils";
import "./styles.css";
'''


def test_extract_imports_forms():
    records = {r.local_name: r for r in extract_imports(SOURCE)}

    assert records["React"].is_default
    assert records["Icons"].is_namespace
    assert records["Table"].original_name == "OtTable"
    assert records["Link"].original_name is None
    assert records["Summary"].source == "./Summary"
    assert len(records) == 7


def test_extract_imports_unparseable():
    assert extract_imports("import { from ;;; <<<") == []


def test_classify_import():
    assert classify_import(ImportRecord("Box", "@mui/material")) == "ui"
    assert classify_import(ImportRecord("Link", "ui")) == "ui"
    assert classify_import(ImportRecord("X", "./X")) == "local"
    assert classify_import(ImportRecord("y", "../y")) == "local"
    assert classify_import(ImportRecord("React", "react")) == "other"
    assert classify_import(ImportRecord("u", "uikit")) == "other"


def test_categories_partition_all_imports():
    records = extract_imports(SOURCE)
    bucket = categorize_imports(records)

    def names(records):
        return {r.local_name for r in records}

    assert names(bucket.ui_components) == {"Link", "Table", "Box"}
    assert names(bucket.local_components) == {"Summary", "helper"}
    assert names(bucket.other_imports) == {"React", "Icons"}
    assert sorted(names(bucket.all)) == sorted(r.local_name for r in records)
    assert len(bucket.all) == len(records)


def test_aggregate_imports_dedupes_ui_and_skips_queries():
    sources = {
        "Body": 'import { Link } from "ui";\nimport Table from "./Table";',
        "Table": 'import { Link, OtTable } from "ui";',
        "Body.gql": "query { x }",
    }
    bucket = aggregate_imports(sources)

    assert [r.local_name for r in bucket.ui_components] == ["Link", "OtTable"]
    assert [r.local_name for r in bucket.local_components] == ["Table"]
    assert analyze_imports("").all == []


def test_ts_sources_with_type_assertions_keep_their_imports():
    helper = 'import { OtTable } from "ui";\nexport const rows = <string[]>[];\n'

    assert [r.local_name for r in extract_imports(helper, "helpers.ts")] == ["OtTable"]

    bucket = aggregate_imports({"helpers": helper}, {"helpers": "/ws/Foo/helpers.ts"})
    assert [r.local_name for r in bucket.ui_components] == ["OtTable"]
