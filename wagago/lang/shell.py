"""Interactive mode for wagago: reads source a line at a time on top of cmd, continuing lines while braces are open."""

import cmd
import io

from wagago.core.ast import display
from wagago.core.scanner import Scanner
from wagago.core.tokens import TokenType
from wagago.lang.error import ErrorHandler


class Shell(cmd.Cmd):
    """wagago REPL. Each completed line runs in the same session, so globals carry over."""
    intro = "wagago :: tree-walking interpreter\nType 'help' for a quick tour, 'exit' to leave."
    prompt = "> "
    secondary_prompt = ". "  # shown while a block is still open
    _tmp_prompt = "> "       # restored once the block closes

    # after a command name, these start wagago source rather than a command argument, e.g. `tree = 1;`
    SOURCE_CONTINUATIONS = "=(.;,+-*/<>!)"

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess
        self._tmp_line = ""

    @staticmethod
    def open_braces(source):
        """Counts unclosed braces in source by token, so braces in strings and comments do not count."""
        tokens = Scanner(source, ErrorHandler(io.StringIO(), color=False)).scan_tokens()
        kinds = [token.kind for token in tokens]
        return kinds.count(TokenType.LEFT_BRACE) - kinds.count(TokenType.RIGHT_BRACE)

    def parseline(self, line):
        """Routes a line to a shell command only when it cannot be wagago source."""
        command, arg, line = super().parseline(line)

        if command != "EOF" and (self._tmp_line or (arg and arg[0] in Shell.SOURCE_CONTINUATIONS)):
            return None, None, line
        return command, arg, line

    def default(self, line):
        """Executes arbitrary wagago source. Lines with unclosed braces are continued on the next prompt."""
        line = self._tmp_line + line + "\n"

        if Shell.open_braces(line) > 0:
            self._tmp_line = line
            self.prompt = self.secondary_prompt
            return

        self._tmp_line = ""
        self.prompt = self._tmp_prompt

        self.sess.run(line)
        self.sess.reset_errors()  # a bad line must not poison the next one

    def do_tree(self, arg):
        """Prints the syntax tree of the given source without running it."""
        with self.sess.error_handler:
            statements = self.sess.parse(arg)
            if statements is not None:
                print(display(statements))
        self.sess.reset_errors()

    def do_help(self, arg):
        """Prints a short tour of the language."""
        print("wagago is a small dynamically-typed scripting language with first-class functions, \n"
              "closures, single-inheritance classes and inline modules.\n\n"
              "Statements end with ';', e.g. 'var greeting = \"hi\";' then 'print greeting;'. \n"
              "A line that opens a '{' continues until the brace is closed.\n\n"
              "Shell commands: 'tree SOURCE' prints how SOURCE parses, 'exit' leaves.")

    def emptyline(self):
        """Blank input is ignored."""
        return ""

    def do_EOF(self, arg):
        """Leaves the shell on end of input."""
        print()
        return self.do_exit("")

    def do_exit(self, arg):
        """Leaves the shell. With trailing text, the line is wagago source using a name 'exit'."""
        if arg:
            self.default(f"exit {arg}")
            return False
        return True
