from issuecopilot.nodes import DocumentNode, parse_node


def test_parse_node_coerces_malformed_fields():
    node = parse_node({"type": "paragraph", "content": [None, "x", {"type": "text", "text": 5}], "attrs": ["bad"]})

    assert node == DocumentNode(type="paragraph", content=(DocumentNode(type="text"),))
    assert node.attrs == {}


def test_parse_node_rejects_non_mappings():
    assert parse_node(None) is None
    assert parse_node(["type", "doc"]) is None


def test_missing_type_becomes_empty_node():
    node = parse_node({"text": "orphan"})

    assert node.type == ""
    assert node.text == "orphan"


def test_attr_helpers():
    node = parse_node({"type": "heading", "attrs": {"level": None, "title": 3, "language": "sql"}})

    assert node.attr("level", 1) == 1
    assert node.attr_text("title") == ""
    assert node.attr_text("language") == "sql"
