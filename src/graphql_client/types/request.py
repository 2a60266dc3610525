"""Request types."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, Any, Union

from graphql_client.errors import ConfigurationError

FileSource = Union[bytes, str, IO[bytes]]


@dataclass(frozen=True)
class File:
    """A file to upload. Only sent by clients in multipart mode."""

    field: str
    name: str
    reader: FileSource

    def read_bytes(self) -> bytes:
        """Read the whole source. Stream sources can only be read once."""
        if isinstance(self.reader, bytes):
            return self.reader
        if isinstance(self.reader, str):
            return self.reader.encode("utf-8")
        return self.reader.read()


@dataclass
class Request:
    """A GraphQL request: query, variables, file attachments and headers.

    The request is sealed once encoding begins; any later mutation raises
    :class:`ConfigurationError`.
    """

    query: str
    variables: dict[str, Any] | None = None
    files: list[File] = field(default_factory=list)
    headers: list[tuple[str, str]] = field(default_factory=list)
    _sealed: bool = field(default=False, init=False, repr=False, compare=False)

    def var(self, key: str, value: Any) -> Request:
        """Set a variable."""
        self._check_mutable()
        if self.variables is None:
            self.variables = {}
        self.variables[key] = value
        return self

    def file(self, field_name: str, file_name: str, reader: FileSource) -> Request:
        """Attach a file to upload."""
        self._check_mutable()
        self.files.append(File(field=field_name, name=file_name, reader=reader))
        return self

    def add_header(self, key: str, value: str) -> Request:
        """Append a header; existing values for *key* are kept."""
        self._check_mutable()
        self.headers.append((key, value))
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        self._sealed = True

    def _check_mutable(self) -> None:
        if self._sealed:
            raise ConfigurationError("Request cannot be modified once it has been sent")
