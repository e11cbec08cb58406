"""Recursive-descent parser for the wagago language. Consumes the Scanner's tokens with one token of lookahead and
produces a list of statements. Precedence is encoded by call nesting, lowest to highest:

```
program     ::= declaration* EOF
declaration ::= classDecl | funDecl | varDecl | moduleDecl | statement
classDecl   ::= "class" IDENT ( ":" IDENT )? "{" function* "}"
moduleDecl  ::= "import" IDENT "{" function* "}"      ; inline module, members are functions
funDecl     ::= "fun" function
function    ::= IDENT "(" params? ")" block
varDecl     ::= "var" IDENT ( "=" expression )? ";"
statement   ::= exprStmt | forStmt | ifStmt | printStmt | returnStmt | whileStmt | block
forStmt     ::= "for" "(" ( varDecl | exprStmt | ";" ) expression? ";" expression? ")" statement

assignment  ::= ( call "." )? IDENT "=" assignment | logic_or
logic_or    ::= logic_and ( "or" logic_and )*
logic_and   ::= equality ( "and" equality )*
equality    ::= comparison ( ( "!=" | "==" ) comparison )*
comparison  ::= term ( ( ">" | ">=" | "<" | "<=" ) term )*
term        ::= factor ( ( "-" | "+" ) factor )*
factor      ::= unary ( ( "/" | "*" ) unary )*
unary       ::= ( "!" | "-" ) unary | call
call        ::= primary ( "(" args? ")" | "." IDENT )*
primary     ::= "true" | "false" | "nil" | "this" | NUMBER | STRING | IDENT
              | "(" expression ")" | "super" "." IDENT
```

A syntax error discards the current declaration only: the parser resynchronizes at the next statement boundary and
keeps going, so every error in a file is reported in one pass.
"""

from wagago.core import ast
from wagago.core.tokens import TokenType
from wagago.lang.error import ParseError


class Parser:
    MAX_ARGS = 255
    # keywords that start a new declaration/statement (resynchronization points)
    BOUNDARIES = {
        TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR, TokenType.IF,
        TokenType.WHILE, TokenType.PRINT, TokenType.RETURN, TokenType.IMPORT,
    }

    def __init__(self, tokens, error_handler):
        self.tokens = tokens
        self.error_handler = error_handler
        self._current = 0

    def parse(self):
        """Returns the list of declarations that parsed cleanly. Errors are reported to the ErrorHandler."""
        statements = []
        while not self._is_at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # declarations

    def _declaration(self):
        try:
            if self._match(TokenType.CLASS):
                return self._class_declaration()
            if self._match(TokenType.IMPORT):
                return self._module_declaration()
            if self._match(TokenType.FUN):
                return self._function("function")
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except ParseError:
            self._synchronize()
            return None

    def _class_declaration(self):
        name = self._consume(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if self._match(TokenType.COLON):
            self._consume(TokenType.IDENTIFIER, "Expect superclass name.")
            superclass = ast.Variable(self._previous())

        self._consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")
        methods = self._members("method")
        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")

        return ast.Class(name, superclass, methods)

    def _module_declaration(self):
        name = self._consume(TokenType.IDENTIFIER, "Expect module name.")

        self._consume(TokenType.LEFT_BRACE, "Expect '{' before module body.")
        members = self._members("module function")
        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after module body.")

        return ast.Module(name, members)

    def _members(self, kind):
        members = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            members.append(self._function(kind))
        return tuple(members)

    def _function(self, kind):
        name = self._consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self._consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= Parser.MAX_ARGS:
                    self._error(self._peek(), f"Can't have more than {Parser.MAX_ARGS} parameters.")
                params.append(self._consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self._match(TokenType.COMMA):
                    break

        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self._consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")

        return ast.Function(name, tuple(params), self._block())

    def _var_declaration(self):
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer)

    # statements

    def _statement(self):
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.RETURN):
            return self._return_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.LEFT_BRACE):
            return ast.Block(self._block())
        return self._expression_statement()

    def _for_statement(self):
        """Desugars into an initializer and a while loop wrapped in a Block; there is no for node."""
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()

        if increment is not None:
            body = ast.Block((body, ast.Expression(increment)))
        if condition is None:
            condition = ast.Literal(True)
        body = ast.While(condition, body)
        if initializer is not None:
            body = ast.Block((initializer, body))

        return body

    def _if_statement(self):
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self._statement()
        else_branch = self._statement() if self._match(TokenType.ELSE) else None

        return ast.If(condition, then_branch, else_branch)

    def _print_statement(self):
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return ast.Print(value)

    def _return_statement(self):
        keyword = self._previous()

        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ast.Return(keyword, value)

    def _while_statement(self):
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")

        return ast.While(condition, self._statement())

    def _block(self):
        statements = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return tuple(statements)

    def _expression_statement(self):
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ast.Expression(expr)

    # expressions

    def _expression(self):
        return self._assignment()

    def _assignment(self):
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, ast.Variable):
                return ast.Assign(expr.name, value)
            if isinstance(expr, ast.Get):
                return ast.Set(expr.owner, expr.name, value)

            # reported but not raised: the parser is not confused, so no need to resynchronize
            self._error(equals, "Invalid assignment target.")

        return expr

    def _or(self):
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            expr = ast.Logical(expr, operator, self._and())
        return expr

    def _and(self):
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            expr = ast.Logical(expr, operator, self._equality())
        return expr

    def _binary(self, operand, *kinds):
        """Left-associative binary rule: operand ( kinds operand )*"""
        expr = operand()
        while self._match(*kinds):
            operator = self._previous()
            expr = ast.Binary(expr, operator, operand())
        return expr

    def _equality(self):
        return self._binary(self._comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self):
        return self._binary(self._term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS,
                            TokenType.LESS_EQUAL)

    def _term(self):
        return self._binary(self._factor, TokenType.MINUS, TokenType.PLUS)

    def _factor(self):
        return self._binary(self._unary, TokenType.SLASH, TokenType.STAR)

    def _unary(self):
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return ast.Unary(operator, self._unary())
        return self._call()

    def _call(self):
        expr = self._primary()

        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = ast.Get(expr, name)
            else:
                return expr

    def _finish_call(self, callee):
        arguments = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= Parser.MAX_ARGS:
                    self._error(self._peek(), f"Can't have more than {Parser.MAX_ARGS} arguments.")
                arguments.append(self._expression())
                if not self._match(TokenType.COMMA):
                    break

        paren = self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return ast.Call(callee, paren, tuple(arguments))

    def _primary(self):
        if self._match(TokenType.FALSE):
            return ast.Literal(False)
        if self._match(TokenType.TRUE):
            return ast.Literal(True)
        if self._match(TokenType.NIL):
            return ast.Literal(None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return ast.Literal(self._previous().literal)

        if self._match(TokenType.SUPER):
            keyword = self._previous()
            self._consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self._consume(TokenType.IDENTIFIER, "Expect superclass method name.")
            return ast.Super(keyword, method)

        if self._match(TokenType.THIS):
            return ast.This(self._previous())

        if self._match(TokenType.IDENTIFIER):
            return ast.Variable(self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)

        raise self._error(self._peek(), "Expect expression.")

    # token helpers

    def _synchronize(self):
        """Discards tokens until the start of what looks like the next statement."""
        self._advance()

        while not self._is_at_end():
            if self._previous().kind is TokenType.SEMICOLON:
                return
            if self._peek().kind in Parser.BOUNDARIES:
                return
            self._advance()

    def _error(self, token, message):
        """Reports the error and returns (does not raise) the signal, so callers choose whether to unwind."""
        self.error_handler.token_error(token, message)
        return ParseError(message)

    def _consume(self, kind, message):
        if self._check(kind):
            return self._advance()
        raise self._error(self._peek(), message)

    def _match(self, *kinds):
        for kind in kinds:
            if self._check(kind):
                self._advance()
                return True
        return False

    def _check(self, kind):
        return not self._is_at_end() and self._peek().kind is kind

    def _advance(self):
        if not self._is_at_end():
            self._current += 1
        return self._previous()

    def _is_at_end(self):
        return self._peek().kind is TokenType.EOF

    def _peek(self):
        return self.tokens[self._current]

    def _previous(self):
        return self.tokens[self._current - 1]
