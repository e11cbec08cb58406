import io
import unittest

from wagago.core.tokens import Token, TokenType
from wagago.lang.error import ErrorHandler, RuntimeFault


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.stream = io.StringIO()
        self.error_handler = ErrorHandler(stream=self.stream, color=False)

    def test_formats(self):
        cases = [
            (lambda: self.error_handler.error(3, "Unexpected character."),
             "[line 3] Error: Unexpected character."),
            (lambda: self.error_handler.token_error(Token(TokenType.IDENTIFIER, "foo", None, 4), "Bad."),
             "[line 4] Error at 'foo': Bad."),
            (lambda: self.error_handler.token_error(Token(TokenType.EOF, "", None, 9), "Expect ';'."),
             "[line 9] Error at end: Expect ';'."),
        ]
        for report, expected in cases:
            report()
            self.assertEqual(expected, self.error_handler.diagnostics[-1], expected)

        self.assertTrue(self.error_handler.had_error)
        self.assertFalse(self.error_handler.had_runtime_error)
        self.assertEqual("\n".join(expected for __, expected in cases) + "\n", self.stream.getvalue())

    def test_runtime_error(self):
        fault = RuntimeFault(Token(TokenType.PLUS, "+", None, 12), "Operands must be numbers.")
        self.error_handler.runtime_error(fault)

        self.assertEqual(["Operands must be numbers.\n[line 12]"], self.error_handler.diagnostics)
        self.assertTrue(self.error_handler.had_runtime_error)
        self.assertFalse(self.error_handler.had_error)
        self.assertEqual("Operands must be numbers.", str(fault))

    def test_reset(self):
        self.error_handler.error(1, "x")
        self.error_handler.runtime_error(RuntimeFault(Token(TokenType.NIL, "nil", None, 1), "y"))
        self.error_handler.reset()

        self.assertFalse(self.error_handler.had_error)
        self.assertFalse(self.error_handler.had_runtime_error)
        self.assertEqual(2, len(self.error_handler.diagnostics))

    def test_host_interrupts_are_reported(self):
        cases = [(RecursionError, "Stack overflow."), (KeyboardInterrupt, "Keyboard interrupt.")]
        for exception, expected in cases:
            with self.error_handler:
                raise exception()
            self.assertEqual(expected, self.error_handler.diagnostics[-1], expected)

        self.assertTrue(self.error_handler.had_runtime_error)
        self.assertRaises(ValueError, self._raise_inside, ValueError)

    def _raise_inside(self, exception):
        with self.error_handler:
            raise exception()

    def test_color_only_affects_stream(self):
        stream = io.StringIO()
        error_handler = ErrorHandler(stream=stream, color=True)
        error_handler.error(1, "Unexpected character.")

        self.assertEqual(["[line 1] Error: Unexpected character."], error_handler.diagnostics)
        self.assertIn("Unexpected character.", stream.getvalue())


if __name__ == '__main__':
    unittest.main()
