import io
import os
import tempfile
import unittest

from wagago.lang.error import WagagoError
from wagago.lang.session import Session


def session():
    out, err = io.StringIO(), io.StringIO()
    return Session(out=out, err=err, color=False), out, err


class SessionTestCase(unittest.TestCase):

    def test_clean_run(self):
        sess, out, err = session()
        self.assertEqual((False, False), sess.run("print \"hello\";"))
        self.assertEqual("hello\n", out.getvalue())
        self.assertEqual("", err.getvalue())
        self.assertEqual(Session.EX_OK, sess.exit_code)

    def test_static_error(self):
        sess, out, err = session()
        self.assertEqual((True, False), sess.run("print 1;\nvar 1;\n@"))
        self.assertEqual("", out.getvalue())
        self.assertEqual("[line 3] Error: Unexpected character.\n[line 2] Error at '1': Expect variable name.\n",
                         err.getvalue())
        self.assertEqual(Session.EX_DATAERR, sess.exit_code)

    def test_resolve_error_suppresses_execution(self):
        sess, out, __ = session()
        self.assertEqual((True, False), sess.run("print 1; { var a = a; }"))
        self.assertEqual("", out.getvalue())

    def test_runtime_error(self):
        sess, out, err = session()
        self.assertEqual((False, True), sess.run("print 1;\nprint -\"x\";\nprint 3;"))
        self.assertEqual("1\n", out.getvalue())
        self.assertEqual("Operand must be a number.\n[line 2]\n", err.getvalue())
        self.assertEqual(Session.EX_SOFTWARE, sess.exit_code)

    def test_globals_persist_between_runs(self):
        sess, out, __ = session()
        sess.run("var count = 1; fun bump() { count = count + 1; }")
        sess.run("bump(); bump();")
        sess.run("print count;")
        self.assertEqual("3\n", out.getvalue())

    def test_runtime_fault_keeps_session_usable(self):
        sess, out, __ = session()
        sess.run("var a = 1;")
        sess.run("a = 2; a();")
        self.assertTrue(sess.had_runtime_error)

        sess.reset_errors()
        self.assertEqual((False, False), sess.run("print a;"))
        self.assertEqual("2\n", out.getvalue())

    def test_sessions_are_independent(self):
        first, __, __ = session()
        second, second_out, __ = session()

        first.run("var shared = 1; print nil + 1;")
        self.assertTrue(first.had_runtime_error)
        self.assertFalse(second.had_runtime_error)

        second.run("print shared;")
        self.assertEqual("", second_out.getvalue())
        self.assertEqual(["Undefined variable 'shared'.\n[line 1]"], second.error_handler.diagnostics)

    def test_deep_expression_is_reported(self):
        sess, out, err = session()
        self.assertEqual((False, True), sess.run("print " + " + ".join(["1"] * 5000) + ";"))
        self.assertEqual("", out.getvalue())
        self.assertEqual("Stack overflow.\n", err.getvalue())
        self.assertEqual(Session.EX_SOFTWARE, sess.exit_code)

        sess.reset_errors()
        self.assertEqual((False, False), sess.run("print 1;"))

    def test_parse(self):
        sess, __, __ = session()
        self.assertEqual(1, len(sess.parse("print 1;")))
        self.assertIsNone(sess.parse("print"))

    def test_run_file(self):
        sess, out, __ = session()
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "script.wg")
            with open(path, "w") as file:
                file.write("fun greet(who) { return \"hi \" + who; }\nprint greet(\"file\");\n")

            self.assertEqual((False, False), sess.run_file(path))
            self.assertEqual("hi file\n", out.getvalue())

            self.assertRaises(WagagoError, sess.run_file, os.path.join(tmp, "missing.wg"))


if __name__ == '__main__':
    unittest.main()
