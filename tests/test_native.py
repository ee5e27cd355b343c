import json
import unittest

from smwks.codec.envelope import restore_body
from smwks.errors import MalformedPayloadError, ShapeMismatchError
from smwks.loader import deserialize_any, serialize
from smwks.model import DiagramModel
from smwks.native import UPGRADE_ADVISORY, decode_v1, decode_v2, encode


def sample_model(version=(2, 1, 3)) -> DiagramModel:
    """A diagram whose text fields contain nothing the escape rewrites."""
    model = DiagramModel(version=version)
    model.add_node({"id": 1, "x": 100, "y": 200, "init": 0.25, "label": "Births",
                    "color": "red", "w": 60, "h": 40})
    model.add_node({"id": 2, "x": -40, "y": 15, "init": 1, "label": "Population",
                    "color": "blue", "w": 30, "h": 30})
    model.add_edge({"from": 1, "to": 2, "arc": 30, "strength": 1, "rotation": 0,
                    "thickness": 3, "color": "gray", "delay": 0})
    model.add_edge({"from": 2, "to": 1, "arc": -12, "strength": -1, "rotation": 0,
                    "thickness": 2.5, "color": "gray", "delay": 1})
    model.add_label({"x": 5, "y": 6, "text": "Growth", "color": "black"})
    model.add_loop_mark({"x": 50, "y": 60, "clockwise": 1, "reinforcement": 0, "color": "green"})
    model.node_uid = 3
    return model


class LegacyDecodeTests(unittest.TestCase):
    def test_v1_example_artifact(self):
        model = DiagramModel()
        result = deserialize_any(model, '[[ [1,0,0,1,"A","%23fff",10] ], [], [], 2, []]', "old.smwks")

        self.assertEqual(result.warnings, [UPGRADE_ADVISORY])
        self.assertEqual(len(model.nodes), 1)
        node = model.nodes[0]
        self.assertEqual(node.id, 1)
        self.assertEqual((node.x, node.y, node.init), (0, 0, 1))
        self.assertEqual(node.label, "A")
        self.assertEqual(node.color, "#fff")
        self.assertEqual(node.w, 6)
        self.assertEqual(node.h, 6)
        self.assertEqual(model.node_uid, 2)
        self.assertEqual(model.edges, [])

    def test_v1_radius_scales_to_width_and_height(self):
        decoded = decode_v1('[[[4,1,2,0,"n","c",7]],[],[],5,[]]')
        self.assertEqual(decoded.nodes[0]["w"], 7 * 0.6)
        self.assertEqual(decoded.nodes[0]["h"], 7 * 0.6)
        self.assertIsNone(decoded.version)

    def test_v1_edges_labels_and_loop_marks(self):
        raw = json.dumps([
            [[1, 0, 0, 1, "A", "red", 10], [2, 9, 9, 1, "B", "red", 10]],
            [[1, 2, 40, -1, 90, 4, "%2523666", 2]],
            [[3, 4, "Hello%2520world", "black"]],
            3,
            [[7, 8, 1, 1, "purple"]],
        ])
        model = DiagramModel()
        deserialize_any(model, raw, "legacy.smwks")

        edge = model.edges[0]
        self.assertEqual((edge.from_id, edge.to_id, edge.arc, edge.strength), (1, 2, 40, -1))
        self.assertEqual(edge.rotation, 0)
        self.assertEqual((edge.thickness, edge.delay), (4, 2))
        self.assertEqual(edge.color, "%23666")
        self.assertEqual(model.labels[0].text, "Hello%20world")
        mark = model.loop_marks[0]
        self.assertEqual((mark.x, mark.y, mark.clockwise, mark.reinforcement), (7, 8, 1, 1))
        self.assertEqual(mark.color, "purple")


class EnvelopeDecodeTests(unittest.TestCase):
    def test_v2_example_artifact_keeps_width_and_height(self):
        model = DiagramModel()
        result = deserialize_any(
            model, '[1,0,0]\'[[[1,0,0,1,"A","%23fff",10,10]],[],[],2,[]]', "new.smwks"
        )
        self.assertEqual(result.warnings, [])
        self.assertEqual(result.version, (1, 0, 0))
        self.assertEqual(model.version, (1, 0, 0))
        node = model.nodes[0]
        self.assertEqual((node.w, node.h), (10, 10))
        self.assertEqual(node.color, "#fff")
        self.assertEqual(model.node_uid, 2)

    def test_v2_mutated_body(self):
        decoded = decode_v2("[2,0,0]'[[[1,0,0,1,%22A%22,%22%2523fff%22,10,12]],[],[],2,[]%5D")
        self.assertEqual(decoded.nodes[0]["label"], "A")
        self.assertEqual(decoded.nodes[0]["color"], "%23fff")
        self.assertEqual(decoded.nodes[0]["h"], 12)

    def test_short_node_tuple_is_shape_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            decode_v2('[2,0,0]\'[[[1,0,0,1,"A","red",10]],[],[],2,[]]')

    def test_nan_coordinate_is_malformed(self):
        with self.assertRaises(MalformedPayloadError):
            decode_v1('[[[1,NaN,0,1,"A","c",10]],[],[],2,[]]')

    def test_wrong_top_level_shape(self):
        with self.assertRaises(MalformedPayloadError):
            decode_v2("[2,0,0]'[[],[],[],1]")
        with self.assertRaises(MalformedPayloadError):
            decode_v2("[2,0,0]'[[],[],[],\"uid\",[]]")


class EncodeTests(unittest.TestCase):
    def test_exact_output(self):
        model = DiagramModel(version=(2, 0, 0))
        model.add_node({"id": 1, "x": 10.6, "y": -3.5, "init": 1, "label": "A b",
                        "color": "#fff", "w": 30.4, "h": 20.5})
        model.node_uid = 2
        self.assertEqual(
            encode(model),
            "[2,0,0]'[[[1,11,-3,1,%22A%2520b%22,%22%2523fff%22,30,21]],[],[],2,[]%5D",
        )

    def test_body_has_five_collections(self):
        text = serialize(sample_model())
        version_str, body = text.split("'", 1)
        self.assertEqual(json.loads(version_str), [2, 1, 3])
        data = json.loads(restore_body(body))
        self.assertEqual(len(data), 5)
        self.assertEqual(data[3], 3)
        self.assertEqual(len(data[0][0]), 8)
        self.assertEqual(len(data[1][0]), 8)

    def test_explicit_version_overrides_model(self):
        self.assertTrue(encode(sample_model(), version=(3, 0, 0)).startswith("[3,0,0]'"))

    def test_rotation_is_written_but_not_read_back(self):
        model = sample_model()
        model.edges[0].rotation = 45.2
        text = serialize(model)
        body = json.loads(restore_body(text.split("'", 1)[1]))
        self.assertEqual(body[1][0][4], 45)

        loaded = DiagramModel()
        deserialize_any(loaded, text, "saved.smwks")
        self.assertEqual(loaded.edges[0].rotation, 0)


class RoundTripTests(unittest.TestCase):
    def test_decode_of_encode_reproduces_model(self):
        original = sample_model()
        loaded = DiagramModel()
        deserialize_any(loaded, serialize(original), "roundtrip.smwks")
        self.assertEqual(loaded.to_dict(), original.to_dict())

    def test_percent_in_label_comes_back_singly_escaped(self):
        original = sample_model()
        original.nodes[0].label = "50% off"
        original.labels[0].color = "#000"
        loaded = DiagramModel()
        deserialize_any(loaded, serialize(original), "roundtrip.smwks")
        self.assertEqual(loaded.nodes[0].label, "50%25%20off")
        self.assertNotEqual(loaded.nodes[0].label, "50% off")
        self.assertEqual(loaded.labels[0].color, "%23000")


if __name__ == "__main__":
    unittest.main()
