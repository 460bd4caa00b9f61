"""
Unit tests for JSX element helpers.
"""
from widgetsmith.core.element_locator import (
    add_test_id,
    get_element_name,
    get_string_attribute,
    get_test_id,
    has_attribute,
    has_test_id,
)
from widgetsmith.core.syntax_tree import generate_code, parse_code


def elements(code):
    tree = parse_code(code)
    return tree, list(tree.jsx_elements())


def test_element_names():
    tree, found = elements("const x = <><Box /><ui.Table></ui.Table><a.b.C /><div></div></>;")
    assert [get_element_name(tree, e) for e in found] == [None, "Box", "ui.Table", None, "div"]


def test_attributes():
    tree, (el,) = elements('const x = <Link external to="/a" href={url} data-testid="foo-link" />;')

    assert has_attribute(tree, el, "external")
    assert not has_attribute(tree, el, "className")
    assert get_string_attribute(tree, el, "to") == "/a"
    assert get_string_attribute(tree, el, "href") is None
    assert get_string_attribute(tree, el, "missing") is None
    assert has_test_id(tree, el)
    assert get_test_id(tree, el) == "foo-link"


def test_add_test_id_is_first_attribute():
    tree, (el,) = elements('const x = <Box className="a">hi</Box>;')

    assert add_test_id(tree, el, "foo-box")
    assert generate_code(tree) == 'const x = <Box data-testid="foo-box" className="a">hi</Box>;'


def test_add_test_id_after_type_arguments():
    tree, (el,) = elements("const x = <Select<string> value={v} />;")

    assert add_test_id(tree, el, "foo-select")
    assert generate_code(tree) == 'const x = <Select<string> data-testid="foo-select" value={v} />;'


def test_add_test_id_never_duplicates():
    tree, (el,) = elements('const x = <Box data-testid="keep" />;')
    assert not add_test_id(tree, el, "other")
    assert not tree.modified

    tree, (el,) = elements("const x = <Box />;")
    assert add_test_id(tree, el, "first")
    assert not add_test_id(tree, el, "second")
    assert generate_code(tree) == 'const x = <Box data-testid="first" />;'
