"""Route file storage adapter — implements RouteStorePort."""

import os
import tempfile
from pathlib import Path
from typing import Union

from routescout.domain.routes import RouteDocument, parse, serialize
from routescout.errors import ConfigurationError


class RouteFileStore:
    """Plain-text route file on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> RouteDocument:
        if not self.path.exists():
            return RouteDocument()
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ConfigurationError(f"Route file {self.path} is not valid UTF-8: {e}") from e
        return parse(text)

    def save(self, document: RouteDocument) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = serialize(document)
        # Atomic write
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.replace(tmp_path, str(self.path))
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
