"""SSH client config text model.

Parses an OpenSSH client config into host blocks and nodes while keeping
every line's original text, so that an unmodified document serializes back
to exactly the text it was decoded from.
"""

import fnmatch
import re

# Directive line: optional indent, key, whitespace and/or "=", value,
# optional trailing comment.
_DIRECTIVE_RE = re.compile(
    r"^(?P<indent>\s*)(?P<key>[^\s=#]+)(?P<sep>\s*=\s*|\s+)(?P<rest>.*?)(?P<trail>\s*)$"
)
_TRAILING_COMMENT_RE = re.compile(r"(?:^|\s+)#")
_BARE_KEY_RE = re.compile(r"^\s*[^\s=#]+\s*=?\s*$")


class SSHConfigError(Exception):
    """Raised when SSH config text cannot be parsed."""

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        super().__init__(f"ssh config line {line_number}: {message}")


class Pattern:
    """A host pattern: literal or glob, optionally negated with '!'."""

    def __init__(self, text: str):
        self.text = text
        self.negated = text.startswith("!")
        self.glob = text[1:] if self.negated else text

    def matches(self, alias: str) -> bool:
        return fnmatch.fnmatchcase(alias, self.glob)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Pattern({self.text!r})"


class KeyValue:
    """A single directive line such as '    HostName 10.0.0.1'."""

    def __init__(
        self,
        key: str,
        value: str,
        indent: str = "    ",
        separator: str = " ",
        comment: str = "",
        trailing: str = "",
        raw: str | None = None,
    ):
        self.key = key
        self._value = value
        self.indent = indent
        self.separator = separator
        # Trailing comment including its leading whitespace, e.g. "  # prod"
        self.comment = comment
        self.trailing = trailing
        # Exact source text, dropped once the value changes
        self._raw = raw

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, new_value: str) -> None:
        self._value = new_value
        self._raw = None

    def __str__(self) -> str:
        if self._raw is not None:
            return self._raw
        return f"{self.indent}{self.key}{self.separator}{self._value}{self.comment}{self.trailing}"

    def __repr__(self) -> str:
        return f"KeyValue({self.key!r}, {self._value!r})"


class Comment:
    """A comment line."""

    def __init__(self, text: str):
        self.text = text

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Comment({self.text!r})"


class Empty:
    """A blank or whitespace-only line."""

    def __init__(self, text: str = ""):
        self.text = text

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return "Empty()"


Node = KeyValue | Comment | Empty


class HostBlock:
    """
    A Host (or Match) section and the nodes that follow it.

    The implicit block holds any lines before the first Host line. Its only
    pattern is '*' and it has no header line of its own.
    """

    def __init__(
        self,
        patterns: list[Pattern],
        nodes: list[Node] | None = None,
        header: str | None = None,
        kind: str = "host",
    ):
        self.patterns = patterns
        self.nodes = nodes if nodes is not None else []
        self.header = header
        self.kind = kind

    @property
    def implicit(self) -> bool:
        return self.header is None

    def matches(self, alias: str) -> bool:
        """
        Check whether this block applies to the given host alias.

        A matching negated pattern rules the block out, otherwise any
        matching plain pattern is enough. Match blocks never match.
        """
        if self.kind != "host":
            return False

        matched = False
        for pattern in self.patterns:
            if pattern.matches(alias):
                if pattern.negated:
                    return False
                matched = True
        return matched

    def lines(self) -> list[str]:
        rendered = [] if self.header is None else [self.header]
        rendered.extend(str(node) for node in self.nodes)
        return rendered

    def __repr__(self) -> str:
        return f"HostBlock({[str(p) for p in self.patterns]!r}, kind={self.kind!r})"


class Document:
    """A parsed SSH config file: an ordered list of host blocks."""

    def __init__(self, hosts: list[HostBlock], trailing_newline: bool = True):
        self.hosts = hosts
        self.trailing_newline = trailing_newline

    def to_text(self) -> str:
        lines = [line for host in self.hosts for line in host.lines()]
        text = "\n".join(lines)
        if lines and self.trailing_newline:
            text += "\n"
        return text

    def marshal_text(self) -> bytes:
        return self.to_text().encode("utf-8")

    def __str__(self) -> str:
        return self.to_text()


def _parse_directive(line: str, line_number: int) -> KeyValue:
    match = _DIRECTIVE_RE.match(line)
    rest = match.group("rest") if match else ""
    comment = ""
    comment_match = _TRAILING_COMMENT_RE.search(rest)
    if comment_match:
        rest, comment = rest[: comment_match.start()], rest[comment_match.start() :]

    if not rest:
        raise SSHConfigError(line_number, f"missing value: {line.strip()!r}")

    return KeyValue(
        key=match.group("key"),
        value=rest,
        indent=match.group("indent"),
        separator=match.group("sep"),
        comment=comment,
        trailing=match.group("trail"),
        raw=line,
    )


def decode(text: str) -> Document:
    """
    Parse SSH config text into a Document.

    Args:
        text: Full contents of an SSH config file

    Returns:
        Document whose to_text() reproduces text exactly

    Raises:
        SSHConfigError: If a Host/Match line has no patterns or a directive
            has no value
    """
    lines = text.split("\n")
    trailing_newline = text.endswith("\n")
    if trailing_newline:
        lines.pop()

    current = HostBlock([Pattern("*")])
    hosts = [current]

    for line_number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped:
            current.nodes.append(Empty(line))
            continue
        if stripped.startswith("#"):
            current.nodes.append(Comment(line))
            continue
        if _BARE_KEY_RE.match(line):
            raise SSHConfigError(line_number, f"missing value: {stripped!r}")

        node = _parse_directive(line, line_number)
        keyword = node.key.lower()
        if keyword in ("host", "match"):
            patterns = [Pattern(p) for p in node.value.split()]
            current = HostBlock(patterns, header=line, kind=keyword)
            hosts.append(current)
        else:
            current.nodes.append(node)

    return Document(hosts, trailing_newline=trailing_newline)
