from openapi_refs.result import CheckResult, Level, write, start, abort, ResultException

from unittest import TestCase


class ResultTest(TestCase):

    def setUp(self) -> None:
        self.result = CheckResult('test', Level.INFO)
        self.result.append(CheckResult('test1', Level.INFO))
        sub_result = CheckResult('test2')
        self.result.append(sub_result)
        self.result.append(CheckResult('test3', Level.ERROR))
        sub_result.append(CheckResult('sub', Level.WARNING))

    def test_ok(self):
        self.assertTrue(CheckResult('', Level.INFO).ok())
        self.assertTrue(CheckResult('', Level.WARNING).ok())
        self.assertFalse(CheckResult('', Level.ERROR).ok())

    def test_append(self):
        result = CheckResult('test', Level.INFO)
        result.append(CheckResult('test1', Level.INFO))
        self.assertEqual(result.level, Level.INFO)
        result.append(CheckResult('test2', Level.WARNING))
        self.assertEqual(result.level, Level.WARNING)
        result.append(CheckResult('test2', Level.ERROR))
        self.assertEqual(result.level, Level.ERROR)
        self.assertEqual(len(result.sub_results), 3)

    def test_to_lines(self):
        lines = list(self.result.to_lines())
        self.assertEqual(len(lines), 5)
        self.assertIn('sub', lines[3])
        self.assertTrue(lines[3].startswith('      '))

    def test_dump(self):
        self.result.dump()

    def test_to_dict(self):
        d = self.result.to_dict()
        self.assertEqual(d["m"], "test")
        self.assertEqual(d["l"], Level.ERROR.value)
        self.assertEqual([i["m"] for i in d["s"]], ["test1", "test2", "test3"])
        self.assertEqual(d["s"][1]["s"][0]["l"], Level.WARNING.value)
        self.assertNotIn("chain", d)
        self.assertNotIn("pointer", d)

    def test_to_dict_reference_details(self):
        site = CheckResult("site", pointer="#/components/schemas/a", location="paths./a.get")
        site.append(CheckResult("resolved", chain=["#/components/schemas/a", "#/components/schemas/b"]))
        d = site.to_dict()
        self.assertEqual(d["pointer"], "#/components/schemas/a")
        self.assertEqual(d["location"], "paths./a.get")
        self.assertNotIn("chain", d)
        self.assertEqual(d["s"][0]["chain"], ["#/components/schemas/a", "#/components/schemas/b"])


class ContextManagerTest(TestCase):

    def test_write_without_context(self):
        with self.assertRaises(RuntimeError):
            write("foo")

    def test_write_with_context(self):
        with start("foo") as r:
            write("bar")
        self.assertEqual(r.message, "foo")
        self.assertEqual(len(r.sub_results), 1)
        self.assertEqual(r.sub_results[0].message, "bar")
        self.assertTrue(r.ok())

    def test_abort_without_context(self):
        with self.assertRaises(ResultException):
            abort("foo")

    def test_abort_with_context(self):
        with start("foo") as r:
            with start("bar"):
                abort("baz")
            write("after")
        self.assertFalse(r.ok())
        self.assertEqual([i.message for i in r.sub_results], ["bar", "after"])
        self.assertEqual(r.sub_results[0].sub_results[0].message, "baz")

    def test_other_exceptions_propagate(self):
        with self.assertRaises(ValueError):
            with start("foo"):
                raise ValueError()
