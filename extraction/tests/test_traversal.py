"""
Unit tests for traversal.py

Tests declaration classification, doc comment association, the declaration
extractors, and the per-file source walker.
"""

import unittest
from pathlib import Path

from extraction.comments import leading_comment_lines
from extraction.models import DeclarationShape
from extraction.parser import parse_bytes, parse_file
from extraction.traversal import (
    SourceWalker,
    classify_node,
    extract_interface,
    extract_operation,
    extract_package_name,
    extract_struct,
    walk_tree,
)


def _first(tree, node_type):
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            return node
        stack.extend(reversed(node.named_children))
    return None


class TestClassifyNode(unittest.TestCase):
    """Test mapping of syntax nodes to declaration shapes."""

    SOURCE = b"""package shapes

type S struct{ A int }

type I interface{ M() }

type N int

func F() {}

func (s S) G() {}
"""

    def setUp(self):
        self.tree = parse_bytes(self.SOURCE)

    def test_shapes(self):
        shapes = [classify_node(n) for n in self.tree.root_node.named_children]
        self.assertEqual(shapes[0], DeclarationShape.PACKAGE_CLAUSE)
        self.assertIn(DeclarationShape.OPERATION, shapes)

        specs = []
        for declaration in self.tree.root_node.named_children:
            if declaration.type == "type_declaration":
                specs.extend(c for c in declaration.named_children if c.type == "type_spec")
        self.assertEqual(
            [classify_node(spec) for spec in specs],
            [DeclarationShape.STRUCT_TYPE, DeclarationShape.INTERFACE_TYPE, DeclarationShape.OTHER],
        )

    def test_extractors_reject_other_shapes(self):
        func = _first(self.tree, "function_declaration")
        spec = _first(self.tree, "type_spec")
        self.assertIsNone(extract_struct(func))
        self.assertIsNone(extract_interface(spec))
        self.assertIsNone(extract_operation(spec))

    def test_package_name(self):
        clause = _first(self.tree, "package_clause")
        self.assertEqual(extract_package_name(clause), "shapes")
        self.assertIsNone(extract_package_name(self.tree.root_node))


class TestDocComments(unittest.TestCase):
    """Test association of comment groups with declarations."""

    def test_adjacent_lines_kept_verbatim_in_order(self):
        source = b"""package p

// first line
// @Entity( table = "t" )
//   indented  text
func F() {}
"""
        tree = parse_bytes(source)
        func = _first(tree, "function_declaration")
        self.assertEqual(
            leading_comment_lines(func),
            ["// first line", '// @Entity( table = "t" )', "//   indented  text"],
        )

    def test_blank_line_separates_groups(self):
        source = b"""package p

// detached

// attached
func F() {}
"""
        tree = parse_bytes(source)
        self.assertEqual(leading_comment_lines(_first(tree, "function_declaration")), ["// attached"])

    def test_block_comment(self):
        source = b"""package p

/* block
   doc */
func F() {}
"""
        tree = parse_bytes(source)
        self.assertEqual(
            leading_comment_lines(_first(tree, "function_declaration")),
            ["/* block\n   doc */"],
        )

    def test_trailing_comment_of_previous_declaration_excluded(self):
        source = b"""package p

var x = 1 // about x
func F() {}
"""
        tree = parse_bytes(source)
        self.assertEqual(leading_comment_lines(_first(tree, "function_declaration")), [])

    def test_no_comment(self):
        tree = parse_bytes(b"package p\n\nfunc F() {}\n")
        self.assertEqual(leading_comment_lines(_first(tree, "function_declaration")), [])


class TestDeclarationExtractors(unittest.TestCase):
    """Test the struct, interface, and operation extractors."""

    SOURCE = b"""package demo

// Point is a coordinate.
// @Value
type Point struct {
	X, Y int
}

// Shape has an area.
type Shape interface {
	// Area computes the area
	Area() float64
	Scale(factor float64) (Shape, error)
	fmt.Stringer
}

// Move shifts a point.
func (p *Point) Move(dx, dy int) {}

func Origin() Point { return Point{} }
"""

    def setUp(self):
        self.tree = parse_bytes(self.SOURCE)

    def test_struct(self):
        struct = extract_struct(_first(self.tree, "type_spec"))
        self.assertEqual(struct.name, "Point")
        self.assertEqual(struct.doc_lines, ["// Point is a coordinate.", "// @Value"])
        self.assertEqual([f.name for f in struct.fields], ["X", "Y"])
        self.assertEqual([a.name for a in struct.annotations], ["Value"])
        self.assertEqual(struct.operations, [])

    def test_interface(self):
        specs = []
        for declaration in self.tree.root_node.named_children:
            if declaration.type == "type_declaration":
                specs.extend(c for c in declaration.named_children if c.type == "type_spec")
        interface = extract_interface(specs[1])

        self.assertEqual(interface.name, "Shape")
        self.assertEqual(interface.doc_lines, ["// Shape has an area."])
        self.assertEqual([m.name for m in interface.methods], ["Area", "Scale"])

        area, scale = interface.methods
        self.assertIsNone(area.related_struct)
        self.assertEqual(area.doc_lines, ["// Area computes the area"])
        self.assertEqual(area.input_args, [])
        self.assertEqual([o.type_name for o in area.output_args], ["float64"])
        self.assertEqual([(a.name, a.type_name) for a in scale.input_args], [("factor", "float64")])
        self.assertEqual([o.type_name for o in scale.output_args], ["Shape", "error"])

    def test_method(self):
        operation = extract_operation(_first(self.tree, "method_declaration"))
        self.assertEqual(operation.name, "Move")
        self.assertTrue(operation.is_method)
        self.assertEqual(operation.related_struct.name, "p")
        self.assertEqual(operation.related_struct.type_name, "Point")
        self.assertTrue(operation.related_struct.is_pointer)
        self.assertEqual([a.name for a in operation.input_args], ["dx", "dy"])
        self.assertEqual(operation.output_args, [])
        self.assertEqual(operation.doc_lines, ["// Move shifts a point."])

    def test_free_function(self):
        operation = extract_operation(_first(self.tree, "function_declaration"))
        self.assertEqual(operation.name, "Origin")
        self.assertIsNone(operation.related_struct)
        self.assertFalse(operation.is_method)
        self.assertEqual(operation.doc_lines, [])
        self.assertEqual([o.type_name for o in operation.output_args], ["Point"])


class TestSourceWalker(unittest.TestCase):
    """Test walking whole files."""

    def setUp(self):
        self.fixture = Path(__file__).parent / "fixtures" / "model" / "person.go"
        tree, _ = parse_file(str(self.fixture))
        self.walker = walk_tree(tree, str(self.fixture))

    def test_package_propagated(self):
        self.assertEqual(self.walker.package_name, "model")
        for entity in self.walker.structs + self.walker.operations + self.walker.interfaces:
            self.assertEqual(entity.package_name, "model")
        for method in self.walker.interfaces[0].methods:
            self.assertEqual(method.package_name, "model")

    def test_declaration_order_and_nested_types(self):
        # Types declared inside function bodies are harvested too
        self.assertEqual([s.name for s in self.walker.structs], ["Person", "Audit", "Address", "check"])
        self.assertEqual(
            [o.name for o in self.walker.operations],
            ["Validate", "NewPerson", "Who", "Orphan"],
        )
        self.assertEqual([i.name for i in self.walker.interfaces], ["PersonStore"])

    def test_person_fields(self):
        person = self.walker.structs[0]
        by_name = {f.name: f for f in person.fields}

        self.assertEqual(
            [f.name for f in person.fields],
            ["Uid", "FirstName", "LastName", "Age", "Friends", "Nicknames", "Manager",
             "Created", "Labels", "Updates", "OnChange", "", ""],
        )
        self.assertEqual(by_name["Uid"].doc_lines, ["// Uid identifies the person"])
        self.assertEqual(by_name["Uid"].tag, '`json:"uid"`')
        self.assertEqual(by_name["LastName"].comment_lines, ["// full name"])
        self.assertEqual(by_name["FirstName"].type_name, by_name["LastName"].type_name)

        friends = by_name["Friends"]
        self.assertEqual((friends.type_name, friends.is_pointer, friends.is_slice), ("Person", True, True))
        self.assertEqual((by_name["Manager"].type_name, by_name["Manager"].is_pointer), ("Person", True))
        self.assertEqual(by_name["Created"].type_name, "")
        self.assertEqual(by_name["Labels"].type_name, "")

        audit, address = person.fields[-2:]
        self.assertEqual((audit.type_name, audit.is_pointer), ("Audit", False))
        self.assertEqual((address.type_name, address.is_pointer), ("Address", True))

    def test_annotations_parsed_but_doc_lines_kept(self):
        person = self.walker.structs[0]
        self.assertEqual(len(person.doc_lines), 2)
        self.assertEqual(person.annotations[0].name, "Entity")
        self.assertEqual(person.annotations[0].attributes, {"table": "persons", "key": "uid"})

        store = self.walker.interfaces[0]
        get = store.methods[0]
        self.assertEqual(get.annotations[0].attributes["method"], "GET")
        self.assertEqual([m.name for m in store.methods], ["Get", "List", "Close"])

    def test_variadic_argument(self):
        new_person = self.walker.operations[1]
        self.assertEqual(
            [(a.name, a.type_name, a.is_slice) for a in new_person.input_args],
            [("first", "string", False), ("last", "string", False), ("tags", "string", True)],
        )

    def test_grouped_type_declaration(self):
        source = b"""package grouped

// Types of the domain.
type (
	// A is first
	A struct{ X int }

	B struct{ Y int }
)
"""
        walker = SourceWalker("grouped.go").walk(parse_bytes(source))
        self.assertEqual([s.name for s in walker.structs], ["A", "B"])
        self.assertEqual(walker.structs[0].doc_lines, ["// A is first"])
        self.assertEqual(walker.structs[1].doc_lines, ["// Types of the domain."])

    def test_grouped_declaration_annotation_above_type(self):
        source = b"""package grouped

// @Entity( table = "a" )
type (
	A struct{}
)
"""
        walker = SourceWalker("grouped.go").walk(parse_bytes(source))
        self.assertEqual(walker.structs[0].doc_lines, ['// @Entity( table = "a" )'])
        self.assertEqual(walker.structs[0].annotations[0].attributes, {"table": "a"})


if __name__ == "__main__":
    unittest.main()
