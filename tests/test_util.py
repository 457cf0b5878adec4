import io
import unittest

from cyclograph.util.typedispatch import *
from cyclograph.util.application.console import Console
from cyclograph.util.io import dot, filesystem, formatting


class TestTypeDisbatch(unittest.TestCase):
    def testTD(self):
        def visitNumber(self, node):
            return "number"

        def visitDefault(self, node):
            return "default"

        class FooBar(TypeDispatcher):
            num = dispatch(int)(visitNumber)
            default = defaultdispatch(visitDefault)

        self.assertEqual(FooBar.__dict__["num"], visitNumber)
        self.assertEqual(FooBar.__dict__["default"], visitDefault)

        foo = FooBar()

        self.assertEqual(foo(1), "number")
        self.assertEqual(foo(2**70), "number")
        self.assertEqual(foo(True), "number")
        self.assertEqual(foo(1.0), "default")

    def testInheritance(self):
        class Base(TypeDispatcher):
            @dispatch(int)
            def visitInt(self, node):
                return "base int"

            @dispatch(str)
            def visitStr(self, node):
                return "base str"

        class Derived(Base):
            @dispatch(int)
            def visitInt(self, node):
                return "derived int"

        self.assertEqual(Derived()(1), "derived int")
        self.assertEqual(Derived()("a"), "base str")
        self.assertRaises(TypeDispatchError, Derived(), 1.0)

    def testTupleOfTypes(self):
        NUMBERS = (int, (float, complex))

        class Kind(TypeDispatcher):
            @dispatch(NUMBERS)
            def visitNumber(self, node):
                return "number"

            @defaultdispatch
            def visitOther(self, node):
                return "other"

        self.assertEqual([Kind()(x) for x in (1, 1.5, 1j, "1")], ["number"] * 3 + ["other"])

    def testDuplicateHandler(self):
        with self.assertRaises(TypeDispatchDeclarationError):
            class Broken(TypeDispatcher):
                @dispatch(int)
                def a(self, node):
                    pass

                @dispatch(int)
                def b(self, node):
                    pass

    def testNotAType(self):
        with self.assertRaises(TypeDispatchDeclarationError):
            dispatch("int")(lambda self, node: None)


class TestDot(unittest.TestCase):
    def testEscapeField(self):
        self.assertEqual(dot.escapeField('a"b\\c\nd\te'), 'a\\"b\\\\c\\nd\\te')

    def testEscapeIsSinglePass(self):
        self.assertEqual(dot.escapeField("\\n"), "\\\\n")

    def testQuoteID(self):
        self.assertEqual(dot.quoteID("Block0"), "Block0")
        self.assertEqual(dot.quoteID("my graph"), '"my graph"')
        self.assertEqual(dot.quoteID("0abc"), '"0abc"')

    def testDeclarationOrder(self):
        g = dot.Digraph("G", rankdir="TB")
        g.node("b", label="B")
        g.node("a")
        g.edge("b", "a")
        self.assertEqual(
            g.dumps(),
            'digraph G {\n  rankdir="TB";\n  b [label="B"];\n  a;\n  b -> a;\n}\n',
        )


class TestFormatting(unittest.TestCase):
    def testPlural(self):
        self.assertEqual(formatting.plural(1, "file"), "1 file")
        self.assertEqual(formatting.plural(0, "file"), "0 files")

    def testElapsedTime(self):
        self.assertTrue(formatting.elapsedTime(0.05).endswith("ms"))
        self.assertTrue(formatting.elapsedTime(5.0).endswith(" s"))
        self.assertTrue(formatting.elapsedTime(120.0).endswith(" m"))


def test_safe_name():
    assert filesystem.safeName("outer.<locals>.inner") == "outer._locals_.inner"
    assert filesystem.safeName("B.run(self, x)") == "B.run(self,_x)"
    assert filesystem.safeName("a/b") == "a_b"


def test_write_data_creates_directories(tmp_path):
    target = tmp_path / "a" / "b"
    path = filesystem.writeData(str(target), "f_cfg", "dot", "digraph CFG {\n}\n")
    assert path == str(target / "f_cfg.dot")
    assert (target / "f_cfg.dot").read_text(encoding="utf-8") == "digraph CFG {\n}\n"


def test_console_scopes():
    out = io.StringIO()
    console = Console(out, verbose=True)
    with console.scope("analysis"):
        with console.scope("mod.py") as c:
            c.output("Function: f, Complexity: 1", 0)
    lines = out.getvalue().splitlines()
    assert lines[0] == "begin [ analysis ]"
    assert lines[1] == "begin [ analysis | mod.py ]"
    assert lines[2] == "Function: f, Complexity: 1"
    assert lines[3].startswith("end   [ analysis | mod.py ]")
    assert lines[4].startswith("end   [ analysis ]")
    assert console.current is console.root


def test_console_quiet():
    out = io.StringIO()
    console = Console(out, verbose=True, quiet=True)
    with console.scope("analysis"):
        console.output("hidden")
    assert out.getvalue() == ""
