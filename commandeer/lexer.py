"""
Commandeer lexer: raw process arguments to a persistent token cursor.

Rules (per raw argument, left to right)
- "--name"        → LONG("name")
- "--name=value"  → LONG("name"), VALUE("value")   (inline value, may be empty)
- "-abc"          → SHORT("a"), SHORT("b"), SHORT("c")   (clustered shorts)
- "--"            → LONG("")      (no end-of-options marker; lookup rejects it)
- "-"             → nothing      (a cluster of zero short flags)
- anything else   → VALUE(argument)

The lexer is total over strings: it never fails on user input. Whether a
clustered short flag may take a value is decided by resolution, not here.

Cursor
- A functionally persistent view: peek() does not consume, next() returns the
  token plus a *new* cursor, push_back() returns a new cursor with the token in
  front. Backtracking is just keeping an older cursor around.
- Pushing back EOF is a no-op (end-of-stream cannot be un-consumed).
"""
from collections.abc import Iterable
from enum import Enum


class TokenKind(Enum):
    """
    lexical category of a token.
    """
    SHORT = "short"
    LONG = "long"
    VALUE = "value"
    EOF = "eof"


class Token:
    """
    one immutable lexical unit: a kind plus its text.

    text holds the flag name without dashes for SHORT/LONG tokens, the literal
    string for VALUE tokens, and "" for EOF. str(token) renders the token the way
    it was typed ("-a", "--name", "value"), which is also how a flag token reads
    when it is taken as a literal value.
    """
    __slots__ = ("_kind", "_text")

    def __init__(self, kind, text="", /):
        if not isinstance(kind, TokenKind):
            raise TypeError("Token() first argument must be a token kind")
        if not isinstance(text, str):
            raise TypeError("Token() second argument must be a string")
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_text", text)

    @property
    def kind(self):
        return self._kind

    @property
    def text(self):
        return self._text

    def is_flag(self):
        return self._kind is TokenKind.SHORT or self._kind is TokenKind.LONG

    def is_value(self):
        return self._kind is TokenKind.VALUE

    def is_eof(self):
        return self._kind is TokenKind.EOF

    def __setattr__(self, name, value):
        raise AttributeError("token objects are immutable")

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return self._kind is other._kind and self._text == other._text

    def __hash__(self):
        return hash((self._kind, self._text))

    def __str__(self):
        match self._kind:
            case TokenKind.SHORT:
                return "-" + self._text
            case TokenKind.LONG:
                return "--" + self._text
            case TokenKind.VALUE:
                return self._text
            case TokenKind.EOF:
                return "<EOF>"

    def __repr__(self):
        return f"Token({self._kind.name}, {self._text!r})"


EOF = Token(TokenKind.EOF)
"""
Shared end-of-stream marker. Never allocated per parse.
"""


class Cursor:
    """
    Persistent, peekable, push-back-capable view over a token sequence.

    Representation
    - _buffer: the full tuple of tokens produced by tokenize() (shared, never copied).
    - _index: read position inside the buffer.
    - _pushed: small tuple of tokens returned to the stream, read before the buffer.

    All operations return new cursors; none mutate. This keeps push_back() O(1)
    for the common case of returning a single token.
    """
    __slots__ = ("_buffer", "_index", "_pushed")

    def __init__(self, tokens=(), /, index=0, pushed=()):
        self._buffer = tuple(tokens)
        self._index = index
        self._pushed = tuple(pushed)

    @classmethod
    def _view(cls, buffer, index, pushed):
        # Skip re-tupling: buffer and pushed are already tuples.
        self = cls.__new__(cls)
        self._buffer = buffer
        self._index = index
        self._pushed = pushed
        return self

    def peek(self):
        """
        Return the next token without consuming it (EOF when exhausted).
        """
        if self._pushed:
            return self._pushed[0]
        if self._index < len(self._buffer):
            return self._buffer[self._index]
        return EOF

    def next(self):
        """
        Consume one token; return (token, remaining cursor).

        At end-of-stream returns (EOF, self).
        """
        if self._pushed:
            return self._pushed[0], Cursor._view(self._buffer, self._index, self._pushed[1:])
        if self._index < len(self._buffer):
            return self._buffer[self._index], Cursor._view(self._buffer, self._index + 1, ())
        return EOF, self

    def push_back(self, token, /):
        """
        Return a cursor with token placed in front; EOF is never pushed back.
        """
        if not isinstance(token, Token):
            raise TypeError("push_back() argument must be a token")
        if token.is_eof():
            return self
        return Cursor._view(self._buffer, self._index, (token,) + self._pushed)

    def __iter__(self):
        yield from self._pushed
        yield from self._buffer[self._index:]

    def __len__(self):
        return len(self._pushed) + max(len(self._buffer) - self._index, 0)

    def __bool__(self):
        return len(self) > 0

    def __str__(self):
        return "Tokens{" + ", ".join(map(str, self)) + "}"

    def __repr__(self):
        return str(self)


def tokenize(args, /):
    """
    Split raw arguments into a Cursor of typed tokens.

    Parameters
    - args: Iterable[str], already excluding the program name.

    Raises
    - TypeError: when args is a plain string or contains non-string items.
    """
    if isinstance(args, str) or not isinstance(args, Iterable):
        raise TypeError("tokenize() argument must be an iterable of strings")

    tokens = []
    for arg in args:
        if not isinstance(arg, str):
            raise TypeError("tokenize() argument must be an iterable of strings")
        if arg.startswith("--"):
            name, separator, value = arg[2:].partition("=")
            tokens.append(Token(TokenKind.LONG, name))
            if separator:
                tokens.append(Token(TokenKind.VALUE, value))
        elif arg.startswith("-"):
            tokens.extend(Token(TokenKind.SHORT, char) for char in arg[1:])
        else:
            tokens.append(Token(TokenKind.VALUE, arg))
    return Cursor(tokens)


__all__ = (
    "TokenKind",
    "Token",
    "Cursor",
    "EOF",
    "tokenize",
)
