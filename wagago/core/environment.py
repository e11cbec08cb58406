"""Lexical scope chain. An Environment is shared by every closure that captured it and by every scope nested in it;
it never references a scope it encloses, so the chain is acyclic.
"""

from wagago.lang.error import RuntimeFault


class Environment:

    def __init__(self, enclosing=None):
        self.enclosing = enclosing
        self.values = {}

    def define(self, name, value):
        """Binds name in this scope unconditionally (redefinition and shadowing are allowed here)."""
        self.values[name] = value

    def get(self, name):
        """Looks name (a Token) up along the chain. An unbound name is a RuntimeFault."""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing

        raise RuntimeFault(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        """Rebinds an existing name (a Token) along the chain. Assigning an unbound name is a RuntimeFault."""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing

        raise RuntimeFault(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance):
        """Returns the environment exactly distance links out. The Resolver guarantees the link exists; a short
        chain means resolver and interpreter disagree on scope nesting.
        """
        env = self
        for __ in range(distance):
            env = env.enclosing
            if env is None:
                raise LookupError(f"scope chain is shorter than resolved distance {distance}")
        return env

    def get_at(self, distance, name):
        """Reads name (a str) from the scope exactly distance links out."""
        values = self.ancestor(distance).values
        if name not in values:
            raise LookupError(f"'{name}' is not bound at resolved distance {distance}")
        return values[name]

    def assign_at(self, distance, name, value):
        """Writes name (a Token) into the scope exactly distance links out."""
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise LookupError(f"'{name.lexeme}' is not bound at resolved distance {distance}")
        values[name.lexeme] = value

    def __repr__(self):
        return f"Environment({list(self.values)}, enclosing={self.enclosing!r})"
