from __future__ import annotations

import re
from dataclasses import dataclass

from letor.errors import FormatError

_UINT_RE = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class Record:
    """
    One line of a LETOR / SVM-Rank dataset:
        <label> qid:<group_id> 1:<f1> 2:<f2> ... # <description>

    `features` are 0-indexed here and 1-indexed on disk.
    """

    label: int
    group_id: int
    features: tuple[float, ...]
    description: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.label, bool) or not isinstance(self.label, int) or self.label < 0:
            raise FormatError(f"label must be a non-negative integer, got {self.label!r}")
        if isinstance(self.group_id, bool) or not isinstance(self.group_id, int) or self.group_id < 0:
            raise FormatError(f"group id must be a non-negative integer, got {self.group_id!r}")
        object.__setattr__(self, "features", tuple(float(v) for v in self.features))
        if not self.features:
            raise FormatError("a record needs at least one feature")
        if "\n" in self.description or "\r" in self.description:
            raise FormatError("description must fit on one line")
        # the comment text is stripped when read back
        object.__setattr__(self, "description", self.description.strip())

    @property
    def num_features(self) -> int:
        return len(self.features)

    @classmethod
    def from_line(cls, line: str) -> "Record":
        return parse_record(line)

    def to_line(self) -> str:
        return format_record(self)


def parse_uint(text: str) -> int:
    if not _UINT_RE.fullmatch(text):
        raise ValueError(f"not an unsigned integer: {text!r}")
    return int(text)


def parse_float(text: str) -> float:
    # float() also takes "1_0"; LETOR tools do not.
    if not text or "_" in text:
        raise ValueError(f"not a float: {text!r}")
    return float(text)


def _value_of(pair: str) -> str:
    # Only the text after the last ':' matters, "qid:3" and "3" both give "3".
    return pair[pair.rfind(":") + 1:]


def parse_record(line: str) -> Record:
    """
    Parse one LETOR line.

    Feature indices written in the line are not used: the n-th feature token
    becomes features[n - 1] whatever index it states.
    """
    body = line.strip()
    if not body:
        raise FormatError("empty record line", line=line)

    description = ""
    comment_at = body.find("#")
    if comment_at != -1:
        description = body[comment_at + 1:].strip()
        body = body[:comment_at].strip()

    tokens = body.split()
    if not tokens:
        raise FormatError("record has no label", line=line)

    try:
        label = parse_uint(tokens[0])
    except ValueError:
        raise FormatError(f"invalid label {tokens[0]!r}", line=line) from None

    if len(tokens) < 2:
        raise FormatError("record has no query id", line=line)
    try:
        group_id = parse_uint(_value_of(tokens[1]))
    except ValueError:
        raise FormatError(f"invalid query id {tokens[1]!r}", line=line) from None

    features = []
    for token in tokens[2:]:
        try:
            features.append(parse_float(_value_of(token)))
        except ValueError:
            raise FormatError(f"invalid feature {token!r}", line=line) from None

    if not features:
        raise FormatError("record has no features", line=line)

    return Record(label=label, group_id=group_id, features=tuple(features), description=description)


def format_record(record: Record) -> str:
    parts = [f"{record.label} qid:{record.group_id} "]
    # LETOR feature indices are 1-based.
    parts.extend(f"{i}:{value!r} " for i, value in enumerate(record.features, start=1))
    if record.description:
        parts.append(f"# {record.description}")
    parts.append("\n")
    return "".join(parts)
