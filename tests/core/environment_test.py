import unittest

from wagago.core.environment import Environment
from wagago.core.tokens import Token, TokenType
from wagago.lang.error import RuntimeFault


def name(lexeme, line=1):
    return Token(TokenType.IDENTIFIER, lexeme, None, line)


class EnvironmentTestCase(unittest.TestCase):

    def setUp(self):
        self.globals = Environment()
        self.middle = Environment(self.globals)
        self.inner = Environment(self.middle)

        self.globals.define("a", "global a")
        self.middle.define("a", "middle a")
        self.middle.define("b", "middle b")
        self.inner.define("c", "inner c")

    def test_get_walks_outward(self):
        cases = {"a": "middle a", "b": "middle b", "c": "inner c"}
        for case, expected in cases.items():
            self.assertEqual(expected, self.inner.get(name(case)), case)

        self.assertEqual("global a", self.globals.get(name("a")))

    def test_missing_is_a_fault(self):
        with self.assertRaises(RuntimeFault) as context:
            self.inner.get(name("missing", line=7))
        self.assertEqual("Undefined variable 'missing'.", context.exception.message)
        self.assertEqual(7, context.exception.token.line)

        self.assertRaises(RuntimeFault, self.inner.assign, name("missing"), 1)

    def test_define_shadows(self):
        self.inner.define("a", "inner a")
        self.assertEqual("inner a", self.inner.get(name("a")))
        self.assertEqual("middle a", self.middle.get(name("a")))

        self.inner.define("a", "redefined")
        self.assertEqual("redefined", self.inner.get(name("a")))

    def test_assign_updates_nearest(self):
        self.inner.assign(name("a"), "changed")
        self.assertEqual("changed", self.middle.values["a"])
        self.assertEqual("global a", self.globals.values["a"])

    def test_ancestor(self):
        self.assertIs(self.inner, self.inner.ancestor(0))
        self.assertIs(self.middle, self.inner.ancestor(1))
        self.assertIs(self.globals, self.inner.ancestor(2))
        self.assertRaises(LookupError, self.inner.ancestor, 3)

    def test_get_at_is_exact(self):
        # distance selects the scope even when a nearer scope binds the same name
        self.assertEqual("middle a", self.inner.get_at(1, "a"))
        self.assertEqual("global a", self.inner.get_at(2, "a"))
        self.assertRaises(LookupError, self.inner.get_at, 0, "a")

    def test_assign_at_is_exact(self):
        self.inner.assign_at(2, name("a"), "new global")
        self.assertEqual("new global", self.globals.values["a"])
        self.assertEqual("middle a", self.middle.values["a"])
        self.assertRaises(LookupError, self.inner.assign_at, 0, name("b"), 1)

    def test_shared_by_closures(self):
        # two children of one scope see each other's writes to it
        left, right = Environment(self.middle), Environment(self.middle)
        left.assign(name("b"), "from left")
        self.assertEqual("from left", right.get(name("b")))


if __name__ == '__main__':
    unittest.main()
