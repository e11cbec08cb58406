"""Scanner for the wagago language: turns source text into a flat list of Tokens.

Errors (unexpected characters, unterminated strings and block comments) are reported to the ErrorHandler and
scanning carries on, so one run can surface every lexical defect in a file.
"""

from wagago.core.tokens import KEYWORDS, Token, TokenType


class Scanner:
    """Single-pass scanner over one source string."""
    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
        ":": TokenType.COLON,
    }
    # char: (type if followed by "=", type otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
    }

    def __init__(self, source, error_handler):
        self.source = source
        self.error_handler = error_handler
        self.tokens = []

        self._start = 0    # first char of the lexeme being scanned
        self._current = 0  # char about to be consumed
        self._line = 1

    def scan_tokens(self):
        """Scans the whole source. The returned list always ends with an EOF token."""
        while not self._is_at_end():
            self._start = self._current
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self._line))
        return self.tokens

    def _scan_token(self):
        char = self._advance()

        if char in Scanner.SINGLE:
            self._add_token(Scanner.SINGLE[char])

        elif char in Scanner.DOUBLE:
            matched, alone = Scanner.DOUBLE[char]
            self._add_token(matched if self._match("=") else alone)

        elif char == "/":
            if self._match("/"):
                while self._peek() != "\n" and not self._is_at_end():
                    self._advance()
            elif self._match("*"):
                self._block_comment()
            else:
                self._add_token(TokenType.SLASH)

        elif char in " \r\t":
            pass

        elif char == "\n":
            self._line += 1

        elif char == "\"":
            self._string()

        elif self._is_digit(char):
            self._number()

        elif self._is_alpha(char):
            self._identifier()

        else:
            self.error_handler.error(self._line, "Unexpected character.")

    def _block_comment(self):
        while not (self._peek() == "*" and self._peek_next() == "/"):
            if self._is_at_end():
                self.error_handler.error(self._line, "Unterminated block comment.")
                return
            if self._peek() == "\n":
                self._line += 1
            self._advance()

        self._current += 2  # closing */

    def _string(self):
        while self._peek() != "\"" and not self._is_at_end():
            if self._peek() == "\n":
                self._line += 1
            self._advance()

        if self._is_at_end():
            self.error_handler.error(self._line, "Unterminated string.")
            return

        self._advance()  # closing "
        self._add_token(TokenType.STRING, self.source[self._start + 1:self._current - 1])

    def _number(self):
        while self._is_digit(self._peek()):
            self._advance()

        # fractional part needs a digit after the "."
        if self._peek() == "." and self._is_digit(self._peek_next()):
            self._advance()
            while self._is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, float(self.source[self._start:self._current]))

    def _identifier(self):
        while self._is_alpha(self._peek()) or self._is_digit(self._peek()):
            self._advance()

        text = self.source[self._start:self._current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    @staticmethod
    def _is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def _is_alpha(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"

    def _is_at_end(self):
        return self._current >= len(self.source)

    def _advance(self):
        char = self.source[self._current]
        self._current += 1
        return char

    def _match(self, expected):
        if self._is_at_end() or self.source[self._current] != expected:
            return False
        self._current += 1
        return True

    def _peek(self):
        return "" if self._is_at_end() else self.source[self._current]

    def _peek_next(self):
        return "" if self._current + 1 >= len(self.source) else self.source[self._current + 1]

    def _add_token(self, kind, literal=None):
        self.tokens.append(Token(kind, self.source[self._start:self._current], literal, self._line))
