"""
Unit tests for annotation/registry.py

Tests schema registration, last-registration-wins replacement, and the
three-valued validation outcome.
"""

import threading
import unittest

from annotation.models import Annotation, ValidationOutcome
from annotation.registry import AnnotationRegistry, required_attributes_validator

TYPE_REST_OPERATION = "RestOperation"
TYPE_REST_SERVICE = "RestService"


def validate_rest_service(annotation):
    return annotation.name == TYPE_REST_SERVICE and "path" in annotation.attributes


class TestRegistration(unittest.TestCase):

    def setUp(self):
        self.registry = AnnotationRegistry()

    def test_register_stores_schema(self):
        schema = self.registry.register(TYPE_REST_OPERATION, ["method", "path", "method"])
        self.assertEqual(schema.required_attributes, ("method", "path"))
        self.assertIs(self.registry.schema_for(TYPE_REST_OPERATION), schema)
        self.assertIn(TYPE_REST_OPERATION, self.registry)
        self.assertEqual(len(self.registry), 1)
        self.assertEqual(self.registry.names(), [TYPE_REST_OPERATION])

    def test_empty_name_rejected(self):
        with self.assertRaises(ValueError):
            self.registry.register("", ["path"])

    def test_last_registration_wins(self):
        self.registry.register("X", ["a"])
        self.registry.register("X", ["b"])

        self.assertEqual(len(self.registry), 1)
        self.assertEqual(
            self.registry.validate(Annotation("X", {"b": "1"})), ValidationOutcome.VALID
        )
        self.assertEqual(
            self.registry.validate(Annotation("X", {"a": "1"})), ValidationOutcome.INVALID
        )

    def test_registries_are_independent(self):
        other = AnnotationRegistry()
        self.registry.register("X", [])
        self.assertNotIn("X", other)

    def test_concurrent_registration(self):
        threads = [
            threading.Thread(target=self.registry.register, args=(f"A{i}", ["k"]))
            for i in range(20)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len(self.registry), 20)


class TestValidation(unittest.TestCase):

    def setUp(self):
        self.registry = AnnotationRegistry()
        self.registry.register(TYPE_REST_OPERATION, ["method", "path"])
        self.registry.register(TYPE_REST_SERVICE, ["path"], validate_rest_service)

    def test_unknown(self):
        outcome = self.registry.validate(Annotation("NeverRegistered", {"path": "/"}))
        self.assertIs(outcome, ValidationOutcome.UNKNOWN)

    def test_valid(self):
        annotation = Annotation(TYPE_REST_OPERATION, {"method": "GET", "path": "/person"})
        self.assertIs(self.registry.validate(annotation), ValidationOutcome.VALID)

    def test_missing_required_attribute(self):
        annotation = Annotation(TYPE_REST_OPERATION, {"method": "GET"})
        self.assertIs(self.registry.validate(annotation), ValidationOutcome.INVALID)
        schema = self.registry.schema_for(TYPE_REST_OPERATION)
        self.assertEqual(schema.missing_attributes(annotation), ("path",))

    def test_empty_required_attribute(self):
        annotation = Annotation(TYPE_REST_OPERATION, {"method": "GET", "path": ""})
        self.assertIs(self.registry.validate(annotation), ValidationOutcome.INVALID)

    def test_custom_validator(self):
        self.assertIs(
            self.registry.validate(Annotation(TYPE_REST_SERVICE, {"path": ""})),
            ValidationOutcome.VALID,
        )
        self.assertIs(
            self.registry.validate(Annotation(TYPE_REST_SERVICE, {})),
            ValidationOutcome.INVALID,
        )

    def test_default_validator_checks_name(self):
        validator = required_attributes_validator("A", ["k"])
        self.assertTrue(validator(Annotation("A", {"k": "v"})))
        self.assertFalse(validator(Annotation("B", {"k": "v"})))

    def test_resolve_annotations_keeps_only_valid(self):
        doc_lines = [
            "// getPerson loads one person",
            '// @RestOperation( method = "GET", path = "/person/:uid" )',
            '// @RestOperation( method = "GET" )',
            "// @Unregistered",
        ]
        resolved = self.registry.resolve_annotations(doc_lines)
        self.assertEqual(len(resolved), 1)
        self.assertEqual(resolved[0].attributes["path"], "/person/:uid")


if __name__ == "__main__":
    unittest.main()
