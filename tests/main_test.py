import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from wagago.main import main


class MainTestCase(unittest.TestCase):

    def run_script(self, source):
        """Runs source as a script file through main. Returns (exit code, stdout, stderr)."""
        out, err = io.StringIO(), io.StringIO()
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "script.wg")
            with open(path, "w") as file:
                file.write(source)

            with redirect_stdout(out), redirect_stderr(err), self.assertRaises(SystemExit) as context:
                main([path, "--no-color"])

        return context.exception.code, out.getvalue(), err.getvalue()

    def test_exit_codes(self):
        cases = {
            "print 1 + 2;": (0, "3\n", ""),
            "print 1 +;": (65, "", "[line 1] Error at ';': Expect expression.\n"),
            "print 1;\nprint x;": (70, "1\n", "Undefined variable 'x'.\n[line 2]\n"),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.run_script(case), case)

    def test_missing_file(self):
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as context:
            main([os.path.join(tempfile.gettempdir(), "does-not-exist.wg"), "--no-color"])

        self.assertEqual(66, context.exception.code)
        self.assertIn("could not be opened", err.getvalue())


if __name__ == '__main__':
    unittest.main()
