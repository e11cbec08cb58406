import io
import unittest

from wagago.core import ast
from wagago.core.environment import Environment
from wagago.core.interpreter import Interpreter
from wagago.core.runtime import Callable, Class, Clock, Function, Instance, Module
from wagago.core.tokens import Token, TokenType
from wagago.lang.error import RuntimeFault


def name(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme, None, 1)


def method(lexeme, *params):
    return ast.Function(name(lexeme), tuple(name(param) for param in params), ())


class ClassTestCase(unittest.TestCase):

    def setUp(self):
        env = Environment()
        self.base = Class("Base", None, {"shared": Function(method("shared"), env),
                                         "init": Function(method("init", "a", "b"), env, is_initializer=True)})
        self.derived = Class("Derived", self.base, {"own": Function(method("own"), env)})

    def test_find_method(self):
        self.assertIs(self.base.methods["shared"], self.derived.find_method("shared"))
        self.assertIs(self.derived.methods["own"], self.derived.find_method("own"))
        self.assertIsNone(self.base.find_method("own"))
        self.assertIsNone(self.derived.find_method("missing"))

    def test_arity(self):
        self.assertEqual(2, self.base.arity())
        self.assertEqual(2, self.derived.arity())
        self.assertEqual(0, Class("Empty", None, {}).arity())
        self.assertEqual(0, Clock().arity())

    def test_callables(self):
        should_pass = [self.base, Clock(), self.base.methods["shared"]]
        for case in should_pass:
            self.assertIsInstance(case, Callable, case)

        should_fail = [Instance(self.base), Module("m", {})]
        for case in should_fail:
            self.assertNotIsInstance(case, Callable, case)

    def test_call_runs_initializer(self):
        instance = self.derived.call(Interpreter(out=io.StringIO()), [1.0, 2.0])
        self.assertIsInstance(instance, Instance)
        self.assertIs(self.derived, instance.klass)


class InstanceTestCase(unittest.TestCase):

    def test_get_and_set(self):
        klass = Class("A", None, {"m": Function(method("m"), Environment())})
        instance = Instance(klass)

        bound = instance.get(name("m"))
        self.assertIsInstance(bound, Function)
        self.assertIs(instance, bound.closure.get_at(0, "this"))

        instance.set(name("m"), "field")
        self.assertEqual("field", instance.get(name("m")))

        self.assertRaises(RuntimeFault, instance.get, name("missing"))
        self.assertEqual("A instance", str(instance))


class FunctionTestCase(unittest.TestCase):

    def test_bind_keeps_declaration(self):
        closure = Environment()
        function = Function(method("m", "x"), closure, is_initializer=True)
        bound = function.bind("receiver")

        self.assertIs(function.declaration, bound.declaration)
        self.assertIs(closure, bound.closure.enclosing)
        self.assertTrue(bound.is_initializer)
        self.assertEqual(1, bound.arity())
        self.assertEqual("<fn m>", str(bound))

    def test_initializer_yields_this(self):
        bound = Function(method("init"), Environment(), is_initializer=True).bind("receiver")
        self.assertEqual("receiver", bound.call(Interpreter(out=io.StringIO()), []))


class ModuleTestCase(unittest.TestCase):

    def test_get(self):
        member = Function(method("f"), Environment())
        module = Module("m", {"f": member})

        self.assertIs(member, module.get(name("f")))
        with self.assertRaises(RuntimeFault) as context:
            module.get(name("g"))
        self.assertEqual("Undefined module function 'g'.", context.exception.message)
        self.assertEqual("'m' module", str(module))


class ClockTestCase(unittest.TestCase):

    def test_clock(self):
        clock = Clock()
        first = clock.call(None, [])
        self.assertIsInstance(first, float)
        self.assertLessEqual(first, clock.call(None, []))
        self.assertEqual("<native fn>", str(clock))


if __name__ == '__main__':
    unittest.main()
