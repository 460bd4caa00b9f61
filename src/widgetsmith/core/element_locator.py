"""
JSX element helpers: naming, attribute lookup and test-hook insertion.
"""
from tree_sitter import Node

from widgetsmith.core.syntax_tree import SourceTree

TEST_ID_ATTRIBUTE = "data-testid"

IDENTIFIER_TYPES = ("identifier", "jsx_identifier", "property_identifier")
MEMBER_TYPES = ("member_expression", "nested_identifier")


def opening_tag(element: Node) -> Node:
    """The node holding an element's name and attributes."""
    if element.type == "jsx_element":
        tag = element.child_by_field_name("open_tag")
        if tag is not None:
            return tag
        for child in element.children:
            if child.type == "jsx_opening_element":
                return child
    return element


def attributes(element: Node) -> list[Node]:
    return [c for c in opening_tag(element).children if c.type == "jsx_attribute"]


def _attribute_name(tree: SourceTree, attribute: Node) -> str:
    if not attribute.children:
        return ""
    return tree.text(attribute.children[0])


def _attribute_value(attribute: Node) -> Node | None:
    seen_equals = False
    for child in attribute.children:
        if seen_equals:
            return child
        if child.type == "=":
            seen_equals = True
    return None


def find_attribute(tree: SourceTree, element: Node, attr_name: str) -> Node | None:
    for attribute in attributes(element):
        if _attribute_name(tree, attribute) == attr_name:
            return attribute
    return None


def has_attribute(tree: SourceTree, element: Node, attr_name: str) -> bool:
    return find_attribute(tree, element, attr_name) is not None


def get_string_attribute(tree: SourceTree, element: Node, attr_name: str) -> str | None:
    """Value of a string-literal attribute; None for expressions or absent attributes."""
    attribute = find_attribute(tree, element, attr_name)
    if attribute is None:
        return None
    value = _attribute_value(attribute)
    if value is None or value.type != "string":
        return None
    return tree.text(value)[1:-1]


def get_element_name(tree: SourceTree, element: Node) -> str | None:
    """
    Tag name of an element: `Box`, `div`, or `Namespace.Component`.
    Fragments, namespaced and deeper member names resolve to None.
    """
    name = opening_tag(element).child_by_field_name("name")
    if name is None:
        return None

    if name.type in IDENTIFIER_TYPES:
        return tree.text(name)

    if name.type in MEMBER_TYPES:
        obj = name.child_by_field_name("object")
        prop = name.child_by_field_name("property")
        if obj is None or prop is None:
            obj, prop = name.children[0], name.children[-1]
        if obj.type in IDENTIFIER_TYPES:
            return f"{tree.text(obj)}.{tree.text(prop)}"

    return None


def _insertion_offset(element: Node) -> int | None:
    tag = opening_tag(element)
    name = tag.child_by_field_name("name")
    if name is None:
        return None
    type_arguments = tag.child_by_field_name("type_arguments")
    if type_arguments is not None:
        return type_arguments.end_byte
    return name.end_byte


def has_test_id(tree: SourceTree, element: Node) -> bool:
    """True if the element carries a data-testid, including one added in this pass."""
    if has_attribute(tree, element, TEST_ID_ATTRIBUTE):
        return True
    offset = _insertion_offset(element)
    if offset is None:
        return False
    marker = f"{TEST_ID_ATTRIBUTE}="
    return any(text.lstrip().startswith(marker) for text in tree.insertions_at(offset))


def get_test_id(tree: SourceTree, element: Node) -> str | None:
    return get_string_attribute(tree, element, TEST_ID_ATTRIBUTE)


def add_test_id(tree: SourceTree, element: Node, test_id: str) -> bool:
    """
    Insert data-testid as the first attribute of the element.
    Returns False (and changes nothing) if the element already has one.
    """
    if has_test_id(tree, element):
        return False

    offset = _insertion_offset(element)
    if offset is None:
        return False

    tree.insert(offset, f' {TEST_ID_ATTRIBUTE}="{test_id}"')
    return True
